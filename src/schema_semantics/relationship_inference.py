"""
Relationship Inference Engine

Infers the relationship kind implied by each foreign key, in priority order:
1. Owning table is a junction table -> MANY_TO_MANY
2. Owning column carries a unique constraint -> ONE_TO_ONE
3. Otherwise -> MANY_TO_ONE

Relationships are reported from the owning side only. ONE_TO_MANY is never
inferred; callers derive it with Relationship.inverse().

Junction tables are not filtered out of the enumeration, so a many-to-many
link appears as two MANY_TO_MANY edges rooted at the junction table. Pairing
those two edges into one A <-> B edge is left to the consumer.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from .classifier import is_junction_table
from .models import ForeignKey, RelationKind, Relationship, Table
from .utils import get_logger

logger = get_logger(__name__)


def find_table(tables: Iterable[Table], name: Optional[str]) -> Optional[Table]:
    """Get table by name (case-insensitive); None when absent"""
    if name is None:
        return None
    name_lower = name.lower()
    for table in tables:
        if table.name.lower() == name_lower:
            return table
    return None


def infer_kind(foreign_key: ForeignKey, owning_table: Table) -> RelationKind:
    """Infer the relationship kind of a foreign key on its owning table"""
    if is_junction_table(owning_table):
        return RelationKind.MANY_TO_MANY

    column = owning_table.get_column(foreign_key.column_name)
    if column is not None and column.unique:
        return RelationKind.ONE_TO_ONE

    return RelationKind.MANY_TO_ONE


def get_all_relationships(tables: Iterable[Table]) -> List[Relationship]:
    """
    One relationship per resolvable foreign key, across every table

    Foreign keys whose referenced table is missing are skipped here; the
    validator reports them as dangling.
    """
    tables = list(tables)
    relationships = []

    for table in tables:
        for fk in table.foreign_keys:
            referenced = find_table(tables, fk.referenced_table)
            if referenced is None:
                logger.debug(
                    f"Skipping foreign key {table.name}.{fk.column_name}: "
                    f"table '{fk.referenced_table}' not found"
                )
                continue

            relationships.append(Relationship(
                source_table=table,
                target_table=referenced,
                foreign_key=fk,
                kind=infer_kind(fk, table),
            ))

    return relationships


def relationships_for_table(tables: Iterable[Table], table_name: str) -> List[Relationship]:
    """Relationships where the table is either the source or the target"""
    name_lower = table_name.lower()
    return [
        r for r in get_all_relationships(tables)
        if r.source_table.name.lower() == name_lower
        or r.target_table.name.lower() == name_lower
    ]
