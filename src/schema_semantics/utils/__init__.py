"""
Utilities Package for Schema Semantics
"""
from .logging import (
    setup_logging,
    get_logger,
    get_schema_context,
    clear_context,
    log_context,
    log_operation,
)

from .errors import (
    ErrorSeverity,
    ErrorCategory,
    ErrorContext,
    SchemaSemanticsError,
    SchemaDefinitionError,
    SchemaLoadError,
    ConfigurationError,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_schema_context",
    "clear_context",
    "log_context",
    "log_operation",
    # Errors
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "SchemaSemanticsError",
    "SchemaDefinitionError",
    "SchemaLoadError",
    "ConfigurationError",
]
