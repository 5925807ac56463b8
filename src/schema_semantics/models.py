"""
Schema Model Definitions

Immutable representation of a parsed relational schema: columns, foreign
keys, indexes, tables and stored routines, plus the derived value objects
(relationships and validation issues) computed from them.

Every type is a frozen dataclass and list-valued attributes are stored as
tuples, so a snapshot cannot change once it has been built.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from . import classifier
from .naming import (
    entity_name_for,
    foreign_key_to_field_name,
    module_name_for,
    to_camel_case,
)
from .type_mapping import SemanticType, map_sql_type
from .utils.errors import SchemaDefinitionError

# Columns shared by every entity through a common base type
BASE_COLUMNS = frozenset({
    "estado",
    "fecha_creacion",
    "fecha_actualizacion",
    "fecha_eliminacion",
    "creado_por",
    "modificado_por",
    "eliminado_por",
    "version",
    "created_at",
    "updated_at",
    "deleted_at",
    "created_by",
    "updated_by",
    "deleted_by",
})


def _freeze(instance: Any, *names: str) -> None:
    # Frozen dataclasses need object.__setattr__ during __post_init__
    for name in names:
        object.__setattr__(instance, name, tuple(getattr(instance, name)))


class ForeignKeyAction(str, Enum):
    """Referential action for ON DELETE / ON UPDATE"""
    CASCADE = "CASCADE"
    SET_NULL = "SET_NULL"
    SET_DEFAULT = "SET_DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO_ACTION"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ForeignKeyAction":
        """Parse SQL spellings like 'SET NULL' or 'no action'"""
        if not text:
            return cls.NO_ACTION
        normalized = "_".join(text.strip().upper().split())
        try:
            return cls(normalized)
        except ValueError:
            return cls.NO_ACTION


class IndexType(str, Enum):
    """Index access methods"""
    BTREE = "BTREE"
    HASH = "HASH"
    GIN = "GIN"
    GIST = "GIST"
    BRIN = "BRIN"


class RoutineKind(str, Enum):
    """Kinds of stored routines"""
    FUNCTION = "FUNCTION"
    PROCEDURE = "PROCEDURE"
    TRIGGER = "TRIGGER"


class ParameterMode(str, Enum):
    """Routine parameter direction"""
    IN = "IN"
    OUT = "OUT"
    INOUT = "INOUT"


class RelationKind(str, Enum):
    """
    Logical relationship kinds

    Inference only ever reports the owning side (ONE_TO_ONE, MANY_TO_ONE,
    MANY_TO_MANY). ONE_TO_MANY exists for callers that explicitly invert a
    MANY_TO_ONE relationship with Relationship.inverse().
    """
    ONE_TO_ONE = "ONE_TO_ONE"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"
    ONE_TO_MANY = "ONE_TO_MANY"


def _parse_enum(enum_cls, value: Any, default, table_name: Optional[str] = None):
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value

    text = str(value).strip()
    for candidate in (text, text.upper(), text.lower()):
        try:
            return enum_cls(candidate)
        except ValueError:
            continue

    raise SchemaDefinitionError(
        f"Unknown {enum_cls.__name__} value '{value}'",
        table_name=table_name,
    )


@dataclass(frozen=True)
class Column:
    """A table column as produced by the DDL parser"""
    name: str
    sql_type: Optional[str] = None
    semantic_type: SemanticType = SemanticType.UNKNOWN
    nullable: bool = True
    unique: bool = False
    primary_key: bool = False
    auto_increment: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        if self.semantic_type == SemanticType.UNKNOWN and self.sql_type:
            object.__setattr__(self, "semantic_type", map_sql_type(self.sql_type))

    @property
    def field_name(self) -> Optional[str]:
        """camelCase field name for this column"""
        return to_camel_case(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sql_type": self.sql_type,
            "semantic_type": self.semantic_type.value,
            "nullable": self.nullable,
            "unique": self.unique,
            "primary_key": self.primary_key,
            "auto_increment": self.auto_increment,
            "length": self.length,
            "precision": self.precision,
            "scale": self.scale,
            "default_value": self.default_value,
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        sql_type = data.get("sql_type", data.get("type"))
        semantic = data.get("semantic_type")
        primary_key = bool(data.get("primary_key", False))
        default_value = data.get("default_value", data.get("default"))

        return cls(
            name=data["name"],
            sql_type=sql_type,
            semantic_type=_parse_enum(SemanticType, semantic or None, SemanticType.UNKNOWN),
            # Primary key columns are never nullable
            nullable=bool(data.get("nullable", True)) and not primary_key,
            unique=bool(data.get("unique", False)),
            primary_key=primary_key,
            auto_increment=bool(data.get("auto_increment", False)),
            length=data.get("length"),
            precision=data.get("precision"),
            scale=data.get("scale"),
            default_value=str(default_value) if default_value is not None else None,
            comment=data.get("comment"),
        )


@dataclass(frozen=True)
class ForeignKey:
    """A foreign key constraint owned by exactly one table"""
    column_name: str
    referenced_table: str
    referenced_column: str = "id"
    name: Optional[str] = None
    on_delete: ForeignKeyAction = ForeignKeyAction.NO_ACTION
    on_update: ForeignKeyAction = ForeignKeyAction.NO_ACTION

    @property
    def field_name(self) -> Optional[str]:
        """Logical field name: category_id -> category"""
        return foreign_key_to_field_name(self.column_name)

    @property
    def referenced_entity_name(self) -> Optional[str]:
        return entity_name_for(self.referenced_table)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "column_name": self.column_name,
            "referenced_table": self.referenced_table,
            "referenced_column": self.referenced_column,
            "on_delete": self.on_delete.value,
            "on_update": self.on_update.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForeignKey":
        return cls(
            name=data.get("name"),
            column_name=data.get("column_name") or data["column"],
            referenced_table=data["referenced_table"],
            referenced_column=data.get("referenced_column") or "id",
            on_delete=ForeignKeyAction.parse(data.get("on_delete")),
            on_update=ForeignKeyAction.parse(data.get("on_update")),
        )


@dataclass(frozen=True)
class Index:
    """A table index"""
    name: Optional[str]
    columns: Tuple[str, ...] = ()
    unique: bool = False
    index_type: IndexType = IndexType.BTREE

    def __post_init__(self) -> None:
        _freeze(self, "columns")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "unique": self.unique,
            "index_type": self.index_type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Index":
        return cls(
            name=data.get("name"),
            columns=tuple(data.get("columns", [])),
            unique=bool(data.get("unique", False)),
            index_type=_parse_enum(
                IndexType, data.get("index_type", data.get("type")), IndexType.BTREE
            ),
        )


@dataclass(frozen=True)
class Table:
    """
    A parsed table

    Entity name, module name, classification flags and the primary-key
    column set are derived on access, never stored.
    """
    name: str
    columns: Tuple[Column, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    indexes: Tuple[Index, ...] = ()
    schema: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "columns", "foreign_keys", "indexes")

        seen = set()
        for column in self.columns:
            key = column.name.lower()
            if key in seen:
                raise SchemaDefinitionError(
                    f"Duplicate column '{column.name}' in table '{self.name}'",
                    table_name=self.name,
                    column_name=column.name,
                )
            seen.add(key)

    @property
    def entity_name(self) -> Optional[str]:
        return entity_name_for(self.name)

    @property
    def entity_variable_name(self) -> Optional[str]:
        """camelCase variable name for the entity"""
        entity_name = self.entity_name
        if not entity_name:
            return None
        return entity_name[0].lower() + entity_name[1:]

    @property
    def module_name(self) -> Optional[str]:
        return module_name_for(self.name)

    @property
    def primary_key_columns(self) -> List[str]:
        return [c.name for c in self.columns if c.primary_key]

    @property
    def is_junction_table(self) -> bool:
        return classifier.is_junction_table(self)

    @property
    def is_audit_table(self) -> bool:
        """Name ends in _aud / _audit or is revision_info, and not a junction"""
        return classifier.is_audit_table(self)

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name (case-insensitive)"""
        name_lower = name.lower()
        for column in self.columns:
            if column.name.lower() == name_lower:
                return column
        return None

    @property
    def business_columns(self) -> List[Column]:
        """Columns that are neither keys nor shared base columns"""
        fk_columns = {fk.column_name.lower() for fk in self.foreign_keys}
        return [
            c for c in self.columns
            if not c.primary_key
            and c.name.lower() not in fk_columns
            and c.name.lower() not in BASE_COLUMNS
        ]

    @property
    def extends_base(self) -> bool:
        """Whether the table carries the standard base columns"""
        names = {c.name.lower() for c in self.columns}
        return "estado" in names or "created_at" in names

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema,
            "comment": self.comment,
            "columns": [c.to_dict() for c in self.columns],
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
            "indexes": [i.to_dict() for i in self.indexes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        name = data.get("name")
        if not name:
            raise SchemaDefinitionError("Table definition without a name")

        try:
            columns = [Column.from_dict(c) for c in data.get("columns", [])]
            foreign_keys = [ForeignKey.from_dict(fk) for fk in data.get("foreign_keys", [])]
        except KeyError as e:
            raise SchemaDefinitionError(
                f"Missing required attribute {e} in table '{name}'",
                table_name=name,
                original_error=e,
            ) from e

        # Table-level PRIMARY KEY (...) overrides inline column flags
        table_pk = data.get("primary_key")
        if table_pk:
            pk_names = {p.lower() for p in table_pk}
            columns = [
                replace(
                    c,
                    primary_key=c.name.lower() in pk_names,
                    nullable=c.nullable and c.name.lower() not in pk_names,
                )
                for c in columns
            ]

        return cls(
            name=name,
            schema=data.get("schema"),
            comment=data.get("comment"),
            columns=tuple(columns),
            foreign_keys=tuple(foreign_keys),
            indexes=tuple(Index.from_dict(i) for i in data.get("indexes", [])),
        )


@dataclass(frozen=True)
class RoutineParameter:
    """A stored routine parameter"""
    name: str
    sql_type: Optional[str] = None
    semantic_type: Optional[SemanticType] = None
    mode: ParameterMode = ParameterMode.IN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sql_type": self.sql_type,
            "semantic_type": self.semantic_type.value if self.semantic_type else None,
            "mode": self.mode.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoutineParameter":
        sql_type = data.get("sql_type", data.get("type"))
        semantic = data.get("semantic_type")
        return cls(
            name=data["name"],
            sql_type=sql_type,
            semantic_type=(
                _parse_enum(SemanticType, semantic, None)
                if semantic else (map_sql_type(sql_type) if sql_type else None)
            ),
            mode=_parse_enum(ParameterMode, data.get("mode"), ParameterMode.IN),
        )


@dataclass(frozen=True)
class StoredRoutine:
    """A stored function, procedure or trigger"""
    name: str
    kind: RoutineKind = RoutineKind.FUNCTION
    parameters: Tuple[RoutineParameter, ...] = ()
    return_type: Optional[str] = None
    language: str = "sql"
    body: Optional[str] = None

    def __post_init__(self) -> None:
        _freeze(self, "parameters")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "parameters": [p.to_dict() for p in self.parameters],
            "return_type": self.return_type,
            "language": self.language,
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredRoutine":
        try:
            parameters = tuple(RoutineParameter.from_dict(p) for p in data.get("parameters", []))
            name = data["name"]
        except KeyError as e:
            raise SchemaDefinitionError(
                f"Missing required routine attribute {e}",
                original_error=e,
            ) from e

        return cls(
            name=name,
            kind=_parse_enum(RoutineKind, data.get("kind", data.get("type")), RoutineKind.FUNCTION),
            parameters=parameters,
            return_type=data.get("return_type"),
            language=data.get("language") or "sql",
            body=data.get("body"),
        )


@dataclass(frozen=True)
class Relationship:
    """
    A relationship implied by one foreign key, seen from the owning table

    Built fresh on every query; never cached.
    """
    source_table: Table
    target_table: Table
    foreign_key: ForeignKey
    kind: RelationKind

    def inverse(self) -> "Relationship":
        """The same foreign key seen from the referenced table"""
        inverted = {
            RelationKind.MANY_TO_ONE: RelationKind.ONE_TO_MANY,
            RelationKind.ONE_TO_MANY: RelationKind.MANY_TO_ONE,
        }.get(self.kind, self.kind)

        return Relationship(
            source_table=self.target_table,
            target_table=self.source_table,
            foreign_key=self.foreign_key,
            kind=inverted,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_table": self.source_table.name,
            "target_table": self.target_table.name,
            "column_name": self.foreign_key.column_name,
            "referenced_column": self.foreign_key.referenced_column,
            "foreign_key": self.foreign_key.name,
            "kind": self.kind.value,
        }


class IssueType(str, Enum):
    """Structural defects reported by schema validation"""
    MISSING_PRIMARY_KEY = "missing_primary_key"
    DANGLING_FOREIGN_KEY = "dangling_foreign_key"
    DUPLICATE_ENTITY_NAME = "duplicate_entity_name"


@dataclass(frozen=True)
class ValidationIssue:
    """Base class for structural defects; never raised"""
    issue_type: ClassVar[IssueType]

    @property
    def table_names(self) -> Tuple[str, ...]:
        raise NotImplementedError

    @property
    def message(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issue_type": self.issue_type.value,
            "table_names": list(self.table_names),
            "message": self.message,
        }

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class MissingPrimaryKey(ValidationIssue):
    table_name: str
    issue_type: ClassVar[IssueType] = IssueType.MISSING_PRIMARY_KEY

    @property
    def table_names(self) -> Tuple[str, ...]:
        return (self.table_name,)

    @property
    def message(self) -> str:
        return f"Table '{self.table_name}' has no primary key"


@dataclass(frozen=True)
class DanglingForeignKey(ValidationIssue):
    table_name: str
    referenced_table: str
    issue_type: ClassVar[IssueType] = IssueType.DANGLING_FOREIGN_KEY

    @property
    def table_names(self) -> Tuple[str, ...]:
        return (self.table_name,)

    @property
    def message(self) -> str:
        return (
            f"Foreign key in '{self.table_name}' references "
            f"non-existent table '{self.referenced_table}'"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["referenced_table"] = self.referenced_table
        return data


@dataclass(frozen=True)
class DuplicateEntityName(ValidationIssue):
    entity_name: str
    duplicate_tables: Tuple[str, ...] = field(default=())
    issue_type: ClassVar[IssueType] = IssueType.DUPLICATE_ENTITY_NAME

    def __post_init__(self) -> None:
        _freeze(self, "duplicate_tables")

    @property
    def table_names(self) -> Tuple[str, ...]:
        return self.duplicate_tables

    @property
    def message(self) -> str:
        tables = ", ".join(self.duplicate_tables)
        return f"Multiple tables would generate entity name '{self.entity_name}': {tables}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["entity_name"] = self.entity_name
        return data
