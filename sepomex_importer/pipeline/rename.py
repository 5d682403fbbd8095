"""Collapse official state names into their common form."""

from __future__ import annotations

from typing import Mapping

from sqlalchemy import bindparam, update
from sqlalchemy.engine import Engine

from sepomex_importer.common.models import StageResult
from sepomex_importer.common.store import states, transaction


def rename_states(engine: Engine, renames: Mapping[str, str]) -> StageResult:
    """Rename every state whose name equals a key of ``renames``.

    Entries are applied in mapping order, each one as an exact-match update.
    Names that are not present are ignored.
    """
    renamed = 0
    if renames:
        statement = (
            update(states)
            .where(states.c.name == bindparam("old_name"))
            .values(name=bindparam("new_name"))
        )
        with transaction(engine) as conn:
            for old_name, new_name in renames.items():
                result = conn.execute(statement, {"old_name": old_name, "new_name": new_name})
                renamed += result.rowcount
    return StageResult(stage="rename-states", rows_in=len(renames), rows_out=renamed)
