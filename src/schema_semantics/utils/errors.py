"""
Error Handling Module for Schema Semantics

Structural schema defects are reported as validation issues, not raised.
The exceptions below cover the edges of the engine: building an invalid
model, loading malformed schema files and reading bad configuration.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorSeverity(str, Enum):
    """Error severity levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Error categories for classification"""
    SCHEMA = "schema"
    SERIALIZATION = "serialization"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Additional context for errors"""
    schema_name: Optional[str] = None
    source_file: Optional[str] = None
    table_name: Optional[str] = None
    column_name: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_name": self.schema_name,
            "source_file": self.source_file,
            "table_name": self.table_name,
            "column_name": self.column_name,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class SchemaSemanticsError(Exception):
    """Base exception for Schema Semantics"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        suggestions: Optional[List[str]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.suggestions = suggestions or []
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"


class SchemaDefinitionError(SchemaSemanticsError):
    """A table, column or routine could not be built from its description"""

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        column_name: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        context = context or ErrorContext()
        context.table_name = context.table_name or table_name
        context.column_name = context.column_name or column_name

        suggestions = ["Check the schema description produced by the parser"]
        if table_name:
            suggestions.append(f"Review the definition of table '{table_name}'")
        if column_name:
            suggestions.append(f"Review column '{column_name}'")

        super().__init__(
            message=message,
            category=ErrorCategory.SCHEMA,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggestions=suggestions,
            original_error=original_error
        )
        self.table_name = table_name
        self.column_name = column_name


class SchemaLoadError(SchemaSemanticsError):
    """A schema file could not be read or decoded"""

    def __init__(
        self,
        message: str,
        source_file: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        context = context or ErrorContext()
        context.source_file = context.source_file or source_file

        suggestions = [
            "Verify the file exists and is readable",
            "Use a .json, .yaml or .yml extension",
        ]
        if original_error is not None:
            suggestions.append(f"Fix the decoding error: {original_error}")

        super().__init__(
            message=message,
            category=ErrorCategory.SERIALIZATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggestions=suggestions,
            original_error=original_error
        )
        self.source_file = source_file


class ConfigurationError(SchemaSemanticsError):
    """Configuration errors"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        suggestions = ["Review configuration settings"]
        if config_key:
            suggestions.append(f"Check configuration for key: {config_key}")

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggestions=suggestions,
            original_error=original_error
        )
        self.config_key = config_key
