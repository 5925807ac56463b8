"""
Table Classifier

Decides, per table, whether it is a junction table, an audit table or a
regular entity table.

Junction detection is structural (foreign key and primary key counts) and
works regardless of the table name. Audit detection is name based and uses
the fixed AUDIT_TABLE_SUFFIXES and AUDIT_TABLE_NAMES, so Table.is_audit_table
and SemanticModel.audit_tables() always agree. A table matching both is a
junction table.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Table

AUDIT_TABLE_SUFFIXES = ("_aud", "_audit")
AUDIT_TABLE_NAMES = ("revision_info",)


@dataclass(frozen=True)
class TableClassification:
    """Classification result for one table"""
    is_junction: bool
    is_audit: bool

    @property
    def is_entity(self) -> bool:
        return not self.is_junction and not self.is_audit


def count_foreign_keys(table: "Table") -> int:
    return len(table.foreign_keys)


def count_primary_key_columns(table: "Table") -> int:
    return len(table.primary_key_columns)


def is_junction_table(table: "Table") -> bool:
    """Exactly two foreign keys and exactly two primary-key columns"""
    return count_foreign_keys(table) == 2 and count_primary_key_columns(table) == 2


def has_audit_name(table_name: str) -> bool:
    lower = table_name.lower()
    return lower in AUDIT_TABLE_NAMES or lower.endswith(AUDIT_TABLE_SUFFIXES)


def is_audit_table(table: "Table") -> bool:
    """Audit naming applies only to tables that are not junction tables"""
    return not is_junction_table(table) and has_audit_name(table.name)


def classify(table: "Table") -> TableClassification:
    junction = is_junction_table(table)
    return TableClassification(
        is_junction=junction,
        is_audit=not junction and has_audit_name(table.name),
    )
