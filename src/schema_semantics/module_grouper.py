"""
Module Grouper

Partitions entity tables into modules and associates stored routines with
the table they most likely operate on.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import StoredRoutine, Table
from .naming import to_singular
from .utils import get_logger

logger = get_logger(__name__)

GLOBAL_ROUTINE_KEY = "_global"


def group_by_module(entity_tables: Iterable[Table]) -> Dict[str, List[Table]]:
    """Group tables by module name, keys in first-seen order"""
    modules: Dict[str, List[Table]] = {}
    for table in entity_tables:
        modules.setdefault(table.module_name, []).append(table)
    return modules


def match_routine_table(routine: StoredRoutine, tables: Iterable[Table]) -> Optional[Table]:
    """
    First table whose singular, lower-cased name occurs in the routine name

    get_user_by_id -> users, update_category -> categories. This is a
    best-effort heuristic: when several tables match, the first one in
    iteration order wins and callers must not rely on which one that is.
    """
    routine_name = routine.name.lower()
    for table in tables:
        singular = to_singular(table.name.lower())
        if singular and singular in routine_name:
            return table
    return None


def associate_routines(
    routines: Iterable[StoredRoutine],
    tables: Iterable[Table],
    global_key: str = GLOBAL_ROUTINE_KEY,
) -> Dict[str, List[StoredRoutine]]:
    """Map table name -> routines, unmatched routines under the global key"""
    tables = list(tables)
    associations: Dict[str, List[StoredRoutine]] = {}

    for routine in routines:
        table = match_routine_table(routine, tables)
        if table is None:
            logger.debug(f"Routine '{routine.name}' matched no table, using '{global_key}'")
            key = global_key
        else:
            key = table.name
        associations.setdefault(key, []).append(routine)

    return associations
