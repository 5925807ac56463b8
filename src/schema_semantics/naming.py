"""
Naming Normalizer

Pure string transforms shared by every other component:
- snake_case / kebab-case -> PascalCase / camelCase
- plural -> singular (English heuristics, not a dictionary)
- foreign-key column -> logical field name
- table name -> entity name / module name

Singularization is a fixed, ordered rule cascade. Irregular plurals such as
"people" or "children" pass through unchanged.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

# (suffixes, number of trailing characters to drop, replacement)
# Evaluated top to bottom, first match wins.
SINGULAR_RULES: List[Tuple[Tuple[str, ...], int, str]] = [
    (("ies",), 3, "y"),
    (("sses",), 2, ""),
    (("xes", "ches", "shes"), 2, ""),
    (("uses", "ases", "ises", "oses"), 2, ""),
]

_SEGMENT_SEPARATOR = re.compile(r"[_\-]+")
_ID_SUFFIX = re.compile(r"_id$", re.IGNORECASE)


def _segments(name: str) -> List[str]:
    return [s for s in _SEGMENT_SEPARATOR.split(name.lower()) if s]


def to_pascal_case(name: Optional[str]) -> Optional[str]:
    """order_items -> OrderItems"""
    if name is None:
        return None
    return "".join(segment.capitalize() for segment in _segments(name))


def to_camel_case(name: Optional[str]) -> Optional[str]:
    """order_items -> orderItems"""
    if name is None:
        return None
    segments = _segments(name)
    if not segments:
        return ""
    return segments[0] + "".join(segment.capitalize() for segment in segments[1:])


def to_singular(name: Optional[str]) -> Optional[str]:
    """
    Convert a plural name to its singular form

    categories -> category, boxes -> box, addresses -> address,
    order_items -> order_item, status -> status
    """
    if name is None:
        return None

    for suffixes, drop, replacement in SINGULAR_RULES:
        if name.endswith(suffixes):
            return name[:-drop] + replacement

    if name.endswith("s") and not name.endswith("ss"):
        return name[:-1]

    return name


def foreign_key_to_field_name(column_name: Optional[str]) -> Optional[str]:
    """parent_category_id -> parentCategory"""
    if column_name is None:
        return None
    return to_camel_case(_ID_SUFFIX.sub("", column_name))


def entity_name_for(table_name: Optional[str]) -> Optional[str]:
    """Entity name is PascalCase of the singular table name"""
    if table_name is None:
        return None
    return to_pascal_case(to_singular(table_name))


def module_name_for(table_name: Optional[str]) -> Optional[str]:
    """order_items -> orderitems"""
    if table_name is None:
        return None
    return table_name.lower().replace("_", "")
