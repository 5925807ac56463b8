"""
Semantic Model

Immutable schema snapshot plus the accessors that code emitters consume:
entity/junction tables, relationships, module grouping, routine association
and validation. Every accessor recomputes its answer from the snapshot, so
nothing can go stale and concurrent readers need no locking.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml

from . import classifier, module_grouper, relationship_inference, validator
from .config import EngineConfig
from .models import Relationship, StoredRoutine, Table, ValidationIssue
from .utils import get_logger, log_context, log_operation
from .utils.errors import SchemaDefinitionError, SchemaLoadError

logger = get_logger(__name__)

YAML_EXTENSIONS = (".yaml", ".yml")


class SemanticModel:
    """
    Read-only semantic model of one schema snapshot

    Usage:
        model = SemanticModel.load("schema.yaml")
        for issue in model.validate():
            print(issue.message)
        for rel in model.all_relationships():
            print(rel.source_table.name, rel.kind.value, rel.target_table.name)
    """

    def __init__(
        self,
        tables: Iterable[Table],
        routines: Iterable[StoredRoutine] = (),
        name: Optional[str] = None,
        source_file: Optional[str] = None,
        config: Optional[EngineConfig] = None,
    ):
        self._tables: Tuple[Table, ...] = tuple(tables)
        self._routines: Tuple[StoredRoutine, ...] = tuple(routines)
        self._name = name
        self._source_file = source_file
        self._config = config or EngineConfig()

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def source_file(self) -> Optional[str]:
        return self._source_file

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def tables(self) -> Tuple[Table, ...]:
        return self._tables

    @property
    def routines(self) -> Tuple[StoredRoutine, ...]:
        return self._routines

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, table_name: str) -> Optional[classifier.TableClassification]:
        """Same answer as the table's own is_junction_table / is_audit_table"""
        table = self.table_by_name(table_name)
        if table is None:
            return None
        return classifier.classify(table)

    def entity_tables(self) -> List[Table]:
        """Tables that produce entities (no junction or audit tables)"""
        return [t for t in self._tables if classifier.classify(t).is_entity]

    def junction_tables(self) -> List[Table]:
        return [t for t in self._tables if t.is_junction_table]

    def audit_tables(self) -> List[Table]:
        return [t for t in self._tables if t.is_audit_table]

    def table_by_name(self, name: str) -> Optional[Table]:
        """Get table by name (case-insensitive); None when absent"""
        return relationship_inference.find_table(self._tables, name)

    # ------------------------------------------------------------------
    # Relationships, modules, routines
    # ------------------------------------------------------------------

    def all_relationships(self) -> List[Relationship]:
        return relationship_inference.get_all_relationships(self._tables)

    def relationships_for_table(self, table_name: str) -> List[Relationship]:
        return relationship_inference.relationships_for_table(self._tables, table_name)

    def tables_by_module(self) -> Dict[str, List[Table]]:
        return module_grouper.group_by_module(self.entity_tables())

    def routines_by_table(self) -> Dict[str, List[StoredRoutine]]:
        return module_grouper.associate_routines(
            self._routines,
            self._tables,
            global_key=self._config.naming.global_routine_key,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> List[ValidationIssue]:
        with log_context(schema_name=self._name, source_file=self._source_file):
            with log_operation(logger, "schema_validation", tables=len(self._tables)) as ctx:
                issues = validator.validate(self._tables)
                ctx["issues"] = len(issues)
        return issues

    def summary(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "tables": len(self._tables),
            "entity_tables": len(self.entity_tables()),
            "junction_tables": len(self.junction_tables()),
            "audit_tables": len(self.audit_tables()),
            "relationships": len(self.all_relationships()),
            "routines": len(self._routines),
            "issues": len(validator.validate(self._tables)),
        }

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "source_file": self._source_file,
            "tables": [t.to_dict() for t in self._tables],
            "routines": [r.to_dict() for r in self._routines],
        }

    def to_json(self, indent: int = 2) -> str:
        """Export as JSON"""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def to_yaml(self) -> str:
        """Export as YAML"""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save model to file (JSON or YAML based on extension)"""
        path = Path(path)
        content = self.to_yaml() if path.suffix.lower() in YAML_EXTENSIONS else self.to_json()
        path.write_text(content, encoding="utf-8")
        logger.info(f"Saved schema '{self._name}' to {path}")

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[EngineConfig] = None,
        source_file: Optional[str] = None,
    ) -> "SemanticModel":
        """Create model from dictionary"""
        if not isinstance(data, dict):
            raise SchemaDefinitionError(
                f"Schema description must be a mapping, got {type(data).__name__}"
            )

        tables = [Table.from_dict(t) for t in data.get("tables") or []]
        routines = [
            StoredRoutine.from_dict(r)
            for r in (data.get("routines") or data.get("functions") or [])
        ]

        return cls(
            tables=tables,
            routines=routines,
            name=data.get("name"),
            source_file=source_file or data.get("source_file"),
            config=config,
        )

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        config: Optional[EngineConfig] = None,
    ) -> "SemanticModel":
        """Load model from a JSON or YAML file"""
        path = Path(path)

        with log_context(source_file=str(path)):
            with log_operation(logger, "schema_load", path=str(path)) as ctx:
                try:
                    with open(path, "r", encoding="utf-8") as f:
                        if path.suffix.lower() in YAML_EXTENSIONS:
                            data = yaml.safe_load(f)
                        else:
                            data = json.load(f)
                except OSError as e:
                    raise SchemaLoadError(
                        f"Could not read schema file {path}",
                        source_file=str(path),
                        original_error=e,
                    ) from e
                except (yaml.YAMLError, json.JSONDecodeError) as e:
                    raise SchemaLoadError(
                        f"Could not decode schema file {path}",
                        source_file=str(path),
                        original_error=e,
                    ) from e

                model = cls.from_dict(data, config=config, source_file=str(path))
                ctx["tables"] = len(model.tables)
                ctx["routines"] = len(model.routines)

        return model
