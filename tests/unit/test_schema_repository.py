"""Unit tests for the session schema cache."""

import pytest

from moquery.domain.errors import DatabaseQueryError, SchemaError
from moquery.repositories.schema_repository import SchemaCache


class TestSchemaCache:

    def test_builds_snapshot(self, fake_db):
        snapshot = SchemaCache().ensure_schema(fake_db)

        assert snapshot.database_name == "tpch"
        assert snapshot.table_count == 2
        assert snapshot.table_ddl[0].startswith("CREATE TABLE `nation`")
        assert snapshot.schema_text.endswith(")\n")
        assert fake_db.open_cursors == 0

    def test_fetched_once(self, fake_db):
        cache = SchemaCache()
        first = cache.ensure_schema(fake_db)
        second = cache.ensure_schema(fake_db)

        assert first is second
        assert fake_db.count("show tables") == 1
        assert fake_db.count("show create table `nation`") == 1

    def test_failure_is_not_cached(self, fake_db):
        failure = DatabaseQueryError("table vanished")
        fake_db.errors["show create table `region`"] = failure
        cache = SchemaCache()

        with pytest.raises(DatabaseQueryError) as exc_info:
            cache.ensure_schema(fake_db)
        assert exc_info.value is failure
        assert not cache.is_cached()

        del fake_db.errors["show create table `region`"]
        snapshot = cache.ensure_schema(fake_db)
        assert snapshot.table_count == 2
        assert fake_db.count("select database()") == 2

    def test_missing_ddl_column(self, fake_db):
        fake_db.results["show create table `region`"] = (["Table"], [("region",)])
        cache = SchemaCache()
        with pytest.raises(SchemaError):
            cache.ensure_schema(fake_db)
        assert not cache.is_cached()

    def test_invalidate_forces_refetch(self, fake_db):
        cache = SchemaCache()
        cache.ensure_schema(fake_db)
        cache.invalidate()
        assert cache.snapshot is None

        cache.ensure_schema(fake_db)
        assert fake_db.count("show tables") == 2

    def test_backticks_in_table_names_are_escaped(self, fake_db):
        fake_db.results["show tables"] = (["Tables_in_tpch"], [("odd`name",)])
        fake_db.results["show create table `odd``name`"] = (
            ["Table", "Create Table"],
            [("odd`name", "CREATE TABLE `odd``name` (`a` int)")],
        )
        snapshot = SchemaCache().ensure_schema(fake_db)
        assert snapshot.table_ddl == ["CREATE TABLE `odd``name` (`a` int)"]

    def test_empty_database(self, fake_db):
        fake_db.results["show tables"] = (["Tables_in_tpch"], [])
        snapshot = SchemaCache().ensure_schema(fake_db)
        assert snapshot.table_count == 0
        assert snapshot.schema_text == ""
