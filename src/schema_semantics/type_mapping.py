"""
SQL type -> semantic type mapping

Emitters for every target stack translate the semantic tag, never the raw
SQL type, so the mapping lives in one place.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional


class SemanticType(str, Enum):
    """Stack-independent value types for columns and routine parameters"""
    INTEGER = "integer"
    LONG = "long"
    SHORT = "short"
    BYTE = "byte"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    STRING = "string"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    UUID = "uuid"
    JSON = "json"
    BINARY = "binary"
    UNKNOWN = "unknown"


SQL_TYPE_MAP: Dict[str, SemanticType] = {
    # Integers
    "INTEGER": SemanticType.INTEGER,
    "INT": SemanticType.INTEGER,
    "INT4": SemanticType.INTEGER,
    "SERIAL": SemanticType.INTEGER,
    "SERIAL4": SemanticType.INTEGER,
    "BIGINT": SemanticType.LONG,
    "INT8": SemanticType.LONG,
    "BIGSERIAL": SemanticType.LONG,
    "SERIAL8": SemanticType.LONG,
    "SMALLINT": SemanticType.SHORT,
    "INT2": SemanticType.SHORT,
    "SMALLSERIAL": SemanticType.SHORT,
    "SERIAL2": SemanticType.SHORT,
    "TINYINT": SemanticType.BYTE,

    # Numeric
    "DECIMAL": SemanticType.DECIMAL,
    "NUMERIC": SemanticType.DECIMAL,
    "NUMBER": SemanticType.DECIMAL,
    "MONEY": SemanticType.DECIMAL,
    "REAL": SemanticType.FLOAT,
    "FLOAT4": SemanticType.FLOAT,
    "DOUBLE": SemanticType.DOUBLE,
    "DOUBLE PRECISION": SemanticType.DOUBLE,
    "FLOAT8": SemanticType.DOUBLE,
    "FLOAT": SemanticType.DOUBLE,

    # Boolean
    "BOOLEAN": SemanticType.BOOLEAN,
    "BOOL": SemanticType.BOOLEAN,
    "BIT": SemanticType.BOOLEAN,

    # Text
    "VARCHAR": SemanticType.STRING,
    "CHARACTER VARYING": SemanticType.STRING,
    "NVARCHAR": SemanticType.STRING,
    "TEXT": SemanticType.STRING,
    "CHAR": SemanticType.STRING,
    "CHARACTER": SemanticType.STRING,
    "NCHAR": SemanticType.STRING,
    "CLOB": SemanticType.STRING,
    "NCLOB": SemanticType.STRING,
    "INET": SemanticType.STRING,
    "CIDR": SemanticType.STRING,
    "MACADDR": SemanticType.STRING,

    # Temporal
    "DATE": SemanticType.DATE,
    "TIME": SemanticType.TIME,
    "TIMETZ": SemanticType.TIME,
    "TIME WITH TIME ZONE": SemanticType.TIME,
    "TIMESTAMP": SemanticType.DATETIME,
    "TIMESTAMPTZ": SemanticType.DATETIME,
    "TIMESTAMP WITH TIME ZONE": SemanticType.DATETIME,
    "DATETIME": SemanticType.DATETIME,

    # Other
    "UUID": SemanticType.UUID,
    "JSON": SemanticType.JSON,
    "JSONB": SemanticType.JSON,
    "BYTEA": SemanticType.BINARY,
    "BLOB": SemanticType.BINARY,
    "BINARY": SemanticType.BINARY,
    "VARBINARY": SemanticType.BINARY,
    "LONGVARBINARY": SemanticType.BINARY,
}

_TYPE_ARGUMENTS = re.compile(r"\s*\(.*\)\s*")
_WHITESPACE = re.compile(r"\s+")


def map_sql_type(sql_type: Optional[str]) -> SemanticType:
    """Map a SQL type such as 'VARCHAR(100)' or 'timestamp with time zone'"""
    if not sql_type:
        return SemanticType.UNKNOWN

    clean = _TYPE_ARGUMENTS.sub(" ", sql_type).strip()
    clean = _WHITESPACE.sub(" ", clean).upper()

    return SQL_TYPE_MAP.get(clean, SemanticType.UNKNOWN)
