"""Application constants."""

SOURCE_ENCODING = "iso-8859-1"
SOURCE_HEADER_LINES = 2
FIELD_SEPARATOR = "|"
INSERT_BATCH_SIZE = 5000
MALFORMED_POLICIES = ("abort", "skip")
MAX_MALFORMED_SAMPLES = 50

# Column order of one data line in the published catalogue.
RAW_COLUMNS = (
    "zip_code",
    "settlement_name",
    "settlement_type_name",
    "district_name",
    "state_name",
    "city_name",
    "office_zip_code",
    "state_code",
    "office_code",
    "zip_region_code",
    "settlement_type_code",
    "district_code",
    "settlement_cpcons_id",
    "zone",
    "city_code",
)
RAW_FIELD_COUNT = len(RAW_COLUMNS)
REQUIRED_NUMERIC_COLUMNS = ("zip_code", "state_code", "district_code", "settlement_type_code")

DEFAULT_STATE_RENAMES = {
    "Coahuila de Zaragoza": "Coahuila",
    "Michoacán de Ocampo": "Michoacán",
    "Veracruz de Ignacio de la Llave": "Veracruz",
    "México": "Estado de México",
    "Ciudad de México": "CDMX",
}

STAGES = (
    "load-raw",
    "states",
    "location-types",
    "rename-states",
    "districts",
    "cities",
    "settlements",
    "zip-codes",
    "settlement-zip-codes",
    "cleanup",
)
TABLE_BY_STAGE = {
    "states": "states",
    "location-types": "location_types",
    "districts": "districts",
    "cities": "cities",
    "settlements": "settlements",
    "zip-codes": "zip_codes",
    "settlement-zip-codes": "settlement_zip_codes",
}
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
