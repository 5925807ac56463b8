"""
Integration Tests for the Semantic Model
Tests end-to-end behaviour from a parsed schema description to the accessors
"""
import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest
import sys
import os
import yaml

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from schema_semantics import (
    DanglingForeignKey,
    EngineConfig,
    NamingConfig,
    RelationKind,
    SemanticModel,
)
from schema_semantics.utils.errors import SchemaDefinitionError, SchemaLoadError


def pk(name="id"):
    return {"name": name, "type": "BIGSERIAL", "primary_key": True}


def fk_column(name):
    return {"name": name, "type": "BIGINT", "nullable": False}


SHOP_SCHEMA = {
    "name": "shop",
    "tables": [
        {
            "name": "users",
            "columns": [
                pk(),
                {"name": "email", "type": "VARCHAR(255)", "unique": True},
                {"name": "created_at", "type": "TIMESTAMP"},
            ],
        },
        {
            "name": "roles",
            "columns": [pk(), {"name": "name", "type": "VARCHAR(50)"}],
        },
        {
            "name": "user_roles",
            "columns": [fk_column("user_id"), fk_column("role_id")],
            "primary_key": ["user_id", "role_id"],
            "foreign_keys": [
                {"column_name": "user_id", "referenced_table": "users", "on_delete": "CASCADE"},
                {"column_name": "role_id", "referenced_table": "roles", "on_delete": "CASCADE"},
            ],
        },
        {
            "name": "users_aud",
            "columns": [
                {"name": "id", "type": "BIGINT"},
                {"name": "rev", "type": "INTEGER"},
                {"name": "email", "type": "VARCHAR(255)"},
            ],
            "primary_key": ["id", "rev"],
        },
        {
            "name": "categories",
            "columns": [pk(), {"name": "title", "type": "TEXT"}],
        },
        {
            "name": "products",
            "columns": [
                pk(),
                fk_column("category_id"),
                {"name": "price", "type": "NUMERIC(10,2)"},
            ],
            "foreign_keys": [{"column_name": "category_id", "referenced_table": "categories"}],
        },
        {
            "name": "user_profiles",
            "columns": [
                pk(),
                {"name": "user_id", "type": "BIGINT", "unique": True},
                {"name": "bio", "type": "TEXT"},
            ],
            "foreign_keys": [{"column_name": "user_id", "referenced_table": "users"}],
        },
        {
            "name": "orders",
            "columns": [pk(), fk_column("user_id"), fk_column("shipping_zone_id")],
            "foreign_keys": [
                {"column_name": "user_id", "referenced_table": "users"},
                {"column_name": "shipping_zone_id", "referenced_table": "shipping_zones"},
            ],
        },
    ],
    "routines": [
        {"name": "get_user_by_email", "kind": "FUNCTION", "return_type": "users"},
        {"name": "update_product_stock", "kind": "PROCEDURE"},
        {"name": "refresh_statistics", "kind": "FUNCTION", "language": "plpgsql"},
    ],
}


@pytest.fixture
def model():
    return SemanticModel.from_dict(SHOP_SCHEMA)


class TestClassificationAccessors:
    """Tests for table classification through the model"""

    def test_entity_tables(self, model):
        """Test junction and audit tables are excluded"""
        names = [t.name for t in model.entity_tables()]

        assert names == ["users", "roles", "categories", "products", "user_profiles", "orders"]

    def test_junction_tables(self, model):
        """Test user_roles is the only junction table"""
        assert [t.name for t in model.junction_tables()] == ["user_roles"]

    def test_audit_tables(self, model):
        """Test users_aud is an audit table"""
        assert [t.name for t in model.audit_tables()] == ["users_aud"]

    def test_table_by_name(self, model):
        """Test case-insensitive lookup"""
        assert model.table_by_name("Products").name == "products"
        assert model.table_by_name("shipping_zones") is None

    def test_classify(self, model):
        """Test per-table classification lookup"""
        assert model.classify("user_roles").is_junction
        assert model.classify("missing") is None

    def test_table_flags_agree_with_model(self):
        """Test per-table flags match the model for every table and any config"""
        schema = dict(SHOP_SCHEMA)
        schema["tables"] = SHOP_SCHEMA["tables"] + [
            {"name": "orders_history", "columns": [pk()]},
        ]
        config = EngineConfig(naming=NamingConfig(global_routine_key="common"))
        model = SemanticModel.from_dict(schema, config=config)

        for table in model.tables:
            classification = model.classify(table.name)
            assert classification.is_audit == table.is_audit_table
            assert classification.is_junction == table.is_junction_table
            assert (table in model.audit_tables()) == table.is_audit_table
            assert (table in model.entity_tables()) == classification.is_entity

        assert [t.name for t in model.audit_tables()] == ["users_aud"]
        assert "orders_history" in [t.name for t in model.entity_tables()]


class TestRelationships:
    """Tests for relationship inference through the model"""

    def test_all_relationships(self, model):
        """Test every resolvable FK produces one relationship"""
        relationships = model.all_relationships()

        edges = [
            (r.source_table.name, r.target_table.name, r.kind) for r in relationships
        ]
        assert edges == [
            ("user_roles", "users", RelationKind.MANY_TO_MANY),
            ("user_roles", "roles", RelationKind.MANY_TO_MANY),
            ("products", "categories", RelationKind.MANY_TO_ONE),
            ("user_profiles", "users", RelationKind.ONE_TO_ONE),
            ("orders", "users", RelationKind.MANY_TO_ONE),
        ]

    def test_relationships_for_table(self, model):
        """Test relationships touching users"""
        sources = {r.source_table.name for r in model.relationships_for_table("users")}

        assert sources == {"user_roles", "user_profiles", "orders"}


class TestModulesAndRoutines:
    """Tests for module grouping and routine association"""

    def test_tables_by_module(self, model):
        """Test entity tables grouped by module name"""
        modules = model.tables_by_module()

        assert list(modules) == [
            "users", "roles", "categories", "products", "userprofiles", "orders",
        ]
        assert "userroles" not in modules
        assert "usersaud" not in modules

    def test_routines_by_table(self, model):
        """Test routines keyed by table name with a global fallback"""
        routines = model.routines_by_table()

        assert [r.name for r in routines["users"]] == ["get_user_by_email"]
        assert [r.name for r in routines["products"]] == ["update_product_stock"]
        assert [r.name for r in routines["_global"]] == ["refresh_statistics"]

    def test_configured_global_key(self):
        """Test the global key comes from configuration"""
        config = EngineConfig(naming=NamingConfig(global_routine_key="common"))
        model = SemanticModel.from_dict(SHOP_SCHEMA, config=config)

        assert "common" in model.routines_by_table()


class TestValidation:
    """Tests for validation through the model"""

    def test_dangling_reference_reported(self, model):
        """Test the missing shipping_zones table is the only issue"""
        assert model.validate() == [DanglingForeignKey("orders", "shipping_zones")]

    def test_validation_logged(self, model, caplog):
        """Test validation logs its completion"""
        with caplog.at_level(logging.INFO, logger="schema_semantics"):
            model.validate()

        assert any("schema_validation" in r.getMessage() for r in caplog.records)

    def test_summary(self, model):
        """Test summary counts"""
        summary = model.summary()

        assert summary == {
            "name": "shop",
            "tables": 8,
            "entity_tables": 6,
            "junction_tables": 1,
            "audit_tables": 1,
            "relationships": 5,
            "routines": 3,
            "issues": 1,
        }


class TestPersistence:
    """Tests for loading and saving schema files"""

    @pytest.mark.parametrize("filename", ["shop.yaml", "shop.yml", "shop.json"])
    def test_save_and_load(self, model, tmp_path, filename):
        """Test a saved model loads back with the same answers"""
        path = tmp_path / filename

        model.save(path)
        loaded = SemanticModel.load(path)

        assert loaded.tables == model.tables
        assert loaded.routines == model.routines
        assert loaded.source_file == str(path)
        assert loaded.all_relationships() == model.all_relationships()
        assert loaded.validate() == model.validate()

    def test_load_yaml_written_by_hand(self, tmp_path):
        """Test loading a YAML document using the functions alias"""
        path = tmp_path / "crm.yaml"
        path.write_text(yaml.safe_dump({
            "name": "crm",
            "tables": [{"name": "contacts", "columns": [pk()]}],
            "functions": [{"name": "merge_contacts"}],
        }))

        loaded = SemanticModel.load(path)

        assert loaded.name == "crm"
        assert list(loaded.routines_by_table()) == ["contacts"]

    def test_saved_json_is_readable(self, model, tmp_path):
        """Test JSON output has the table list"""
        path = tmp_path / "shop.json"
        model.save(path)

        data = json.loads(path.read_text())

        assert [t["name"] for t in data["tables"]][:2] == ["users", "roles"]

    def test_missing_file(self, tmp_path):
        """Test unreadable files raise SchemaLoadError"""
        with pytest.raises(SchemaLoadError) as exc_info:
            SemanticModel.load(tmp_path / "missing.yaml")

        assert exc_info.value.source_file.endswith("missing.yaml")

    @pytest.mark.parametrize("filename,content", [
        ("broken.yaml", "tables: [unclosed"),
        ("broken.json", "{\"tables\": "),
    ])
    def test_malformed_file(self, tmp_path, filename, content):
        """Test undecodable files raise SchemaLoadError"""
        path = tmp_path / filename
        path.write_text(content)

        with pytest.raises(SchemaLoadError):
            SemanticModel.load(path)

    def test_non_mapping_document(self, tmp_path):
        """Test a document that is not a mapping is rejected"""
        path = tmp_path / "list.yaml"
        path.write_text("- users\n- roles\n")

        with pytest.raises(SchemaDefinitionError):
            SemanticModel.load(path)


class TestConcurrentReads:
    """Tests for sharing one snapshot across threads"""

    def test_parallel_accessors(self, model):
        """Test concurrent readers see the same answers as a single reader"""
        expected_relationships = model.all_relationships()
        expected_issues = model.validate()
        expected_modules = model.tables_by_module()

        def read(_):
            return (
                model.all_relationships(),
                model.validate(),
                model.tables_by_module(),
            )

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(read, range(32)))

        for relationships, issues, modules in results:
            assert relationships == expected_relationships
            assert issues == expected_issues
            assert modules == expected_modules
