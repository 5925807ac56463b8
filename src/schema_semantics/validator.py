"""
Schema Validator

Scans a schema for structural defects. Defects are returned as values, never
raised; whether any of them blocks code generation is the caller's decision.
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from .models import (
    DanglingForeignKey,
    DuplicateEntityName,
    IssueType,
    MissingPrimaryKey,
    Table,
    ValidationIssue,
)
from .relationship_inference import find_table


def find_missing_primary_keys(tables: List[Table]) -> List[ValidationIssue]:
    return [MissingPrimaryKey(t.name) for t in tables if not t.primary_key_columns]


def find_dangling_foreign_keys(tables: List[Table]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for table in tables:
        for fk in table.foreign_keys:
            if find_table(tables, fk.referenced_table) is None:
                issues.append(DanglingForeignKey(table.name, fk.referenced_table))
    return issues


def find_duplicate_entity_names(tables: List[Table]) -> List[ValidationIssue]:
    by_entity: Dict[str, List[str]] = {}
    for table in tables:
        by_entity.setdefault(table.entity_name, []).append(table.name)

    return [
        DuplicateEntityName(entity_name, tuple(names))
        for entity_name, names in by_entity.items()
        if len(names) > 1
    ]


def validate(tables: Iterable[Table]) -> List[ValidationIssue]:
    """Collect every issue; no short-circuiting"""
    tables = list(tables)

    issues: List[ValidationIssue] = []
    issues.extend(find_missing_primary_keys(tables))
    issues.extend(find_dangling_foreign_keys(tables))
    issues.extend(find_duplicate_entity_names(tables))

    return issues


def has_issues_of_type(issues: Iterable[ValidationIssue], issue_type: IssueType) -> bool:
    return any(issue.issue_type == issue_type for issue in issues)
