import sys

import pytest

from sepomex_importer.cli import main, parse_args


def test_parse_args_defaults():
    args = parse_args(["CPdescarga.txt"])
    assert args.source == "CPdescarga.txt"
    assert args.config == "./config/importer.yml"
    assert args.overlay_config is None
    assert args.database_url is None
    assert args.skip_malformed is False
    assert args.no_rename is False


def test_parse_args_accepts_database_url_and_flags():
    args = parse_args(["raw.txt", "--database-url", "sqlite:///x.db", "--create-schema", "--no-rename"])
    assert args.database_url == "sqlite:///x.db"
    assert args.create_schema is True
    assert args.no_rename is True


def test_main_with_empty_argv_does_not_fall_back_to_process_arguments(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["sepomex-import", "CPdescarga.txt"])

    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
