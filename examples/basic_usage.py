#!/usr/bin/env python3
"""
Basic Usage Example for Schema Semantics

This example demonstrates:
1. Building a semantic model from a parsed schema description
2. Listing entity and junction tables
3. Inferring relationships and grouping modules
4. Validating the schema
"""
import sys
import os

# Add src to path for local development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from schema_semantics import EngineConfig, SemanticModel, configure_logging


SCHEMA = {
    "name": "library",
    "tables": [
        {
            "name": "authors",
            "columns": [
                {"name": "id", "type": "BIGSERIAL", "primary_key": True},
                {"name": "full_name", "type": "VARCHAR(200)", "nullable": False},
                {"name": "created_at", "type": "TIMESTAMP"},
            ],
        },
        {
            "name": "books",
            "columns": [
                {"name": "id", "type": "BIGSERIAL", "primary_key": True},
                {"name": "title", "type": "VARCHAR(300)", "nullable": False},
                {"name": "isbn", "type": "CHAR(13)", "unique": True},
                {"name": "publisher_id", "type": "BIGINT"},
            ],
            "foreign_keys": [
                {"column_name": "publisher_id", "referenced_table": "publishers",
                 "on_delete": "SET NULL"},
            ],
        },
        {
            "name": "book_authors",
            "columns": [
                {"name": "book_id", "type": "BIGINT"},
                {"name": "author_id", "type": "BIGINT"},
            ],
            "primary_key": ["book_id", "author_id"],
            "foreign_keys": [
                {"column_name": "book_id", "referenced_table": "books"},
                {"column_name": "author_id", "referenced_table": "authors"},
            ],
        },
        {
            "name": "author_bios",
            "columns": [
                {"name": "id", "type": "BIGSERIAL", "primary_key": True},
                {"name": "author_id", "type": "BIGINT", "unique": True},
                {"name": "bio", "type": "TEXT"},
            ],
            "foreign_keys": [
                {"column_name": "author_id", "referenced_table": "authors"},
            ],
        },
        {
            "name": "books_aud",
            "columns": [
                {"name": "id", "type": "BIGINT"},
                {"name": "rev", "type": "INTEGER"},
                {"name": "title", "type": "VARCHAR(300)"},
            ],
            "primary_key": ["id", "rev"],
        },
    ],
    "routines": [
        {"name": "find_books_by_author", "kind": "FUNCTION", "language": "plpgsql"},
        {"name": "rebuild_search_index", "kind": "PROCEDURE"},
    ],
}


def main():
    configure_logging(EngineConfig.from_env())

    print("=" * 60)
    print("Schema Semantics - Basic Usage Example")
    print("=" * 60)

    model = SemanticModel.from_dict(SCHEMA)

    print("\n1. Entity tables:")
    for table in model.entity_tables():
        print(f"   {table.name:<15} -> {table.entity_name}")

    print("\n2. Junction tables:")
    for table in model.junction_tables():
        print(f"   {table.name}")

    print("\n3. Relationships:")
    for rel in model.all_relationships():
        print(
            f"   {rel.source_table.name}.{rel.foreign_key.column_name} "
            f"-> {rel.target_table.name} ({rel.kind.value})"
        )

    print("\n4. Modules:")
    for module, tables in model.tables_by_module().items():
        print(f"   {module}: {', '.join(t.name for t in tables)}")

    print("\n5. Routines by table:")
    for table_name, routines in model.routines_by_table().items():
        print(f"   {table_name}: {', '.join(r.name for r in routines)}")

    print("\n6. Validation:")
    issues = model.validate()
    if not issues:
        print("   No issues found")
    for issue in issues:
        print(f"   [{issue.issue_type.value}] {issue.message}")

    print("\n" + "=" * 60)
    print("Example completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
