"""
Schema Semantics

Turns a parsed relational schema (tables, columns, foreign keys, indexes,
stored routines) into a normalized semantic model for code generators:
- Classify tables as entity, junction or audit tables
- Infer the relationship kind behind every foreign key
- Normalize names (singular entity names, PascalCase, camelCase fields)
- Group entity tables into modules and attach stored routines to tables
- Report structural defects (missing primary keys, dangling foreign keys,
  colliding entity names)

USAGE:
======

From a schema description file produced by the DDL parser:
    model = SemanticModel.load("schema.yaml")

From model objects:
    model = SemanticModel(tables=[users, roles, user_roles])

Then:
    model.entity_tables()
    model.all_relationships()
    model.tables_by_module()
    model.routines_by_table()
    issues = model.validate()
"""

__version__ = "1.0.0"

# Core models
from .models import (
    Column,
    ForeignKey,
    ForeignKeyAction,
    Index,
    IndexType,
    Table,
    StoredRoutine,
    RoutineKind,
    RoutineParameter,
    ParameterMode,
    RelationKind,
    Relationship,
    IssueType,
    ValidationIssue,
    MissingPrimaryKey,
    DanglingForeignKey,
    DuplicateEntityName,
)
from .type_mapping import SemanticType, map_sql_type

# Naming
from .naming import (
    to_pascal_case,
    to_camel_case,
    to_singular,
    foreign_key_to_field_name,
    entity_name_for,
    module_name_for,
)

# Engine
from .classifier import TableClassification, classify, is_audit_table, is_junction_table
from .relationship_inference import find_table, get_all_relationships, infer_kind
from .module_grouper import associate_routines, group_by_module
from .validator import validate

# Model facade and configuration
from .semantic_model import SemanticModel
from .config import EngineConfig, NamingConfig, LoggingConfig, configure_logging

__all__ = [
    # Models
    "Column",
    "ForeignKey",
    "ForeignKeyAction",
    "Index",
    "IndexType",
    "Table",
    "StoredRoutine",
    "RoutineKind",
    "RoutineParameter",
    "ParameterMode",
    "RelationKind",
    "Relationship",
    "IssueType",
    "ValidationIssue",
    "MissingPrimaryKey",
    "DanglingForeignKey",
    "DuplicateEntityName",
    "SemanticType",
    "map_sql_type",

    # Naming
    "to_pascal_case",
    "to_camel_case",
    "to_singular",
    "foreign_key_to_field_name",
    "entity_name_for",
    "module_name_for",

    # Engine
    "TableClassification",
    "classify",
    "is_audit_table",
    "is_junction_table",
    "find_table",
    "get_all_relationships",
    "infer_kind",
    "associate_routines",
    "group_by_module",
    "validate",

    # Facade and configuration
    "SemanticModel",
    "EngineConfig",
    "NamingConfig",
    "LoggingConfig",
    "configure_logging",
]
