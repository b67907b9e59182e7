"""Shared pytest fixtures for tablerest tests."""

from pathlib import Path

import pytest

from tablerest.specs import DatabaseSpec, TableSpec


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def database(fixtures_dir: Path) -> DatabaseSpec:
    """The test database described by fixtures/schema.json."""
    return DatabaseSpec.from_json_file(fixtures_dir / "schema.json")


@pytest.fixture
def users(database: DatabaseSpec) -> TableSpec:
    return database.get_table_by_alias("users")


@pytest.fixture
def users_courses(database: DatabaseSpec) -> TableSpec:
    return database.get_table_by_alias("usersCourses")


@pytest.fixture
def phone_numbers(database: DatabaseSpec) -> TableSpec:
    return database.get_table_by_alias("phoneNumbers")
