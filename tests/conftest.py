"""
Pytest configuration - shared fixtures
"""
import sqlite3
import sys
import os
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

# Add backend directory to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../backend"))

from catalog.config import Settings
from catalog.database import init_db
from catalog.exceptions import ItemNotFound
from catalog.schemas import Item, NewItem
from catalog.services.catalog_service import CatalogService
from catalog.services.categories import CategoryResolver
from catalog.services.images import ImageStore
from catalog.services.items import SqlItemRepository


@pytest.fixture
def db_path(tmp_path) -> str:
    """Path to a throwaway SQLite database file."""
    return str(tmp_path / "db" / "catalog.sqlite3")


@pytest.fixture
def database(db_path):
    """File-backed database with the catalog schema, shared across threads."""
    db = init_db(f"sqlite:///{db_path}")
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def image_dir(tmp_path) -> str:
    return str(tmp_path / "images")


@pytest.fixture
def image_store(image_dir) -> ImageStore:
    return ImageStore(image_dir)


@pytest.fixture
def resolver(database) -> CategoryResolver:
    return CategoryResolver(database)


@pytest.fixture
def item_repository(database) -> SqlItemRepository:
    return SqlItemRepository(database)


@pytest.fixture
def catalog(image_store, resolver, item_repository) -> CatalogService:
    return CatalogService(images=image_store, categories=resolver, items=item_repository)


@pytest.fixture
def sample_image() -> bytes:
    """A few bytes standing in for a JPEG upload; the store never inspects format."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00sample-image-body\xff\xd9"


@pytest.fixture
def test_settings(db_path, image_dir) -> Settings:
    """Settings pointing the HTTP app at temporary storage."""
    return Settings(
        DATABASE_URL=f"sqlite:///{db_path}",
        IMAGE_DIR=image_dir,
        FRONT_URL="http://localhost:3000",
        _env_file=None,
    )


@pytest.fixture
def mock_image_store() -> Mock:
    store = Mock(spec=ImageStore)
    store.store.return_value = "a" * 64 + ".jpg"
    return store


class InMemoryItemRepository:
    """ItemRepository kept in a list, with a fixed category id -> name map."""

    def __init__(self, categories: Dict[int, str]):
        self.categories = categories
        self.rows: List[Item] = []

    def insert(self, item: NewItem, timeout: Optional[float] = None) -> int:
        item_id = len(self.rows) + 1
        self.rows.append(
            Item(
                id=item_id,
                name=item.name,
                category=self.categories[item.category_id],
                image_name=item.image_name,
            )
        )
        return item_id

    def get_all(self, timeout: Optional[float] = None) -> List[Item]:
        return list(self.rows)

    def get_by_id(self, item_id: int, timeout: Optional[float] = None) -> Item:
        for row in self.rows:
            if row.id == item_id:
                return row
        raise ItemNotFound(item_id)

    def search_by_keyword(self, keyword: str, timeout: Optional[float] = None) -> List[Item]:
        return [row for row in self.rows if keyword.lower() in row.name.lower()]


@pytest.fixture
def memory_repository() -> InMemoryItemRepository:
    return InMemoryItemRepository({1: "phone", 2: "fashion"})


@pytest.fixture
def count_rows(database):
    """Count rows in a catalog table."""
    def _count(table: str) -> int:
        with database.engine.connect() as conn:
            return conn.exec_driver_sql(f"SELECT COUNT(*) FROM {table}").scalar()
    return _count


@pytest.fixture
def category_ids(database):
    """All ids stored for a category name."""
    def _ids(name: str) -> list:
        with database.engine.connect() as conn:
            rows = conn.exec_driver_sql(
                "SELECT id FROM categories WHERE name = ?", (name,)
            ).fetchall()
        return [row[0] for row in rows]
    return _ids


@pytest.fixture
def locked_database(database, db_path):
    """Hold an exclusive lock on the database file from a second connection."""
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.execute("BEGIN EXCLUSIVE")
    try:
        yield database
    finally:
        conn.execute("ROLLBACK")
        conn.close()
