"""
Unit Tests for the Relationship Inference Engine
"""
import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from schema_semantics.models import Column, ForeignKey, RelationKind, Table
from schema_semantics.relationship_inference import (
    find_table,
    get_all_relationships,
    infer_kind,
    relationships_for_table,
)


@pytest.fixture
def categories():
    return Table(name="categories", columns=[Column("id", "BIGINT", primary_key=True)])


@pytest.fixture
def products():
    fk = ForeignKey(column_name="category_id", referenced_table="categories")
    return Table(
        name="products",
        columns=[
            Column("id", "BIGINT", primary_key=True),
            Column("category_id", "BIGINT"),
        ],
        foreign_keys=[fk],
    )


@pytest.fixture
def user_roles():
    return Table(
        name="user_roles",
        columns=[
            Column("user_id", "BIGINT", primary_key=True, unique=True),
            Column("role_id", "BIGINT", primary_key=True),
        ],
        foreign_keys=[
            ForeignKey(column_name="user_id", referenced_table="users"),
            ForeignKey(column_name="role_id", referenced_table="roles"),
        ],
    )


class TestInferKind:
    """Tests for the inference priority order"""

    def test_many_to_one_default(self, products):
        """Test regular FK is MANY_TO_ONE"""
        fk = products.foreign_keys[0]
        assert infer_kind(fk, products) == RelationKind.MANY_TO_ONE

    def test_unique_column_one_to_one(self):
        """Test unique FK column is ONE_TO_ONE"""
        fk = ForeignKey(column_name="profile_id", referenced_table="profiles")
        users = Table(
            name="users",
            columns=[
                Column("id", "BIGINT", primary_key=True),
                Column("profile_id", "BIGINT", unique=True),
            ],
            foreign_keys=[fk],
        )

        assert infer_kind(fk, users) == RelationKind.ONE_TO_ONE

    def test_junction_many_to_many(self, user_roles):
        """Test junction FK is MANY_TO_MANY"""
        for fk in user_roles.foreign_keys:
            assert infer_kind(fk, user_roles) == RelationKind.MANY_TO_MANY

    def test_junction_beats_unique(self, user_roles):
        """Test a unique FK column on a junction table is still MANY_TO_MANY"""
        fk = user_roles.foreign_keys[0]
        assert user_roles.get_column(fk.column_name).unique
        assert infer_kind(fk, user_roles) == RelationKind.MANY_TO_MANY

    def test_missing_column_falls_back(self):
        """Test an FK whose column is absent is MANY_TO_ONE"""
        fk = ForeignKey(column_name="ghost_id", referenced_table="ghosts")
        table = Table(name="things", columns=[Column("id", primary_key=True)], foreign_keys=[fk])

        assert infer_kind(fk, table) == RelationKind.MANY_TO_ONE

    def test_column_lookup_case_insensitive(self):
        """Test FK column matching ignores case"""
        fk = ForeignKey(column_name="PROFILE_ID", referenced_table="profiles")
        table = Table(
            name="users",
            columns=[Column("id", primary_key=True), Column("profile_id", unique=True)],
            foreign_keys=[fk],
        )

        assert infer_kind(fk, table) == RelationKind.ONE_TO_ONE


class TestGetAllRelationships:
    """Tests for whole-schema enumeration"""

    def test_resolvable_fk(self, products, categories):
        """Test one relationship per resolvable FK"""
        relationships = get_all_relationships([products, categories])

        assert len(relationships) == 1
        rel = relationships[0]
        assert rel.source_table == products
        assert rel.target_table == categories
        assert rel.foreign_key == products.foreign_keys[0]
        assert rel.kind == RelationKind.MANY_TO_ONE

    def test_dangling_fk_skipped(self, products):
        """Test FK to a missing table is silently skipped"""
        assert get_all_relationships([products]) == []

    def test_referenced_table_case_insensitive(self, categories):
        """Test referenced table names resolve regardless of case"""
        fk = ForeignKey(column_name="category_id", referenced_table="CATEGORIES")
        items = Table(
            name="items",
            columns=[Column("id", primary_key=True), Column("category_id")],
            foreign_keys=[fk],
        )

        relationships = get_all_relationships([items, categories])

        assert len(relationships) == 1
        assert relationships[0].target_table == categories

    def test_junction_edges_not_paired(self, user_roles):
        """Test many-to-many is exposed as two junction-rooted edges"""
        users = Table(name="users", columns=[Column("id", primary_key=True)])
        roles = Table(name="roles", columns=[Column("id", primary_key=True)])

        relationships = get_all_relationships([users, roles, user_roles])

        assert len(relationships) == 2
        assert all(r.kind == RelationKind.MANY_TO_MANY for r in relationships)
        assert all(r.source_table == user_roles for r in relationships)
        assert {r.target_table.name for r in relationships} == {"users", "roles"}

    def test_self_reference(self):
        """Test a table referencing itself"""
        fk = ForeignKey(column_name="parent_id", referenced_table="categories")
        categories = Table(
            name="categories",
            columns=[Column("id", primary_key=True), Column("parent_id")],
            foreign_keys=[fk],
        )

        relationships = get_all_relationships([categories])

        assert len(relationships) == 1
        assert relationships[0].source_table == relationships[0].target_table

    def test_deterministic(self, products, categories):
        """Test repeated enumeration gives equal results"""
        assert get_all_relationships([products, categories]) == \
            get_all_relationships([products, categories])

    def test_fresh_objects(self, products, categories):
        """Test relationships are new value objects on each call"""
        first = get_all_relationships([products, categories])[0]
        second = get_all_relationships([products, categories])[0]

        assert first == second
        assert first is not second


class TestInverse:
    """Tests for caller-side inversion"""

    def test_many_to_one_inverts_to_one_to_many(self, products, categories):
        """Test inverse swaps direction and kind"""
        rel = get_all_relationships([products, categories])[0]

        inverse = rel.inverse()

        assert inverse.source_table == categories
        assert inverse.target_table == products
        assert inverse.kind == RelationKind.ONE_TO_MANY
        assert inverse.inverse() == rel

    def test_symmetric_kinds_unchanged(self, user_roles):
        """Test MANY_TO_MANY keeps its kind when inverted"""
        users = Table(name="users", columns=[Column("id", primary_key=True)])
        rel = get_all_relationships([users, user_roles])[0]

        assert rel.inverse().kind == RelationKind.MANY_TO_MANY


class TestLookups:
    """Tests for table lookup helpers"""

    def test_find_table(self, products, categories):
        """Test case-insensitive lookup and absence"""
        tables = [products, categories]

        assert find_table(tables, "PRODUCTS") == products
        assert find_table(tables, "missing") is None
        assert find_table(tables, None) is None

    def test_relationships_for_table(self, products, categories):
        """Test filtering by source or target"""
        tables = [products, categories]

        assert len(relationships_for_table(tables, "categories")) == 1
        assert len(relationships_for_table(tables, "products")) == 1
        assert relationships_for_table(tables, "users") == []
