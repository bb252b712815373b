"""
Item persistence.

``ItemRepository`` is the capability the catalog service depends on; any object
with these four methods can stand in for the SQL implementation.
"""

from typing import List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from catalog.database import Database
from catalog.exceptions import InsertFailed, ItemNotFound, SearchFailed
from catalog.models.category import Category
from catalog.models.item import Item as ItemRow
from catalog.schemas import Item, NewItem

LIKE_ESCAPE = "\\"

# SQLite INTEGER is a signed 64-bit value
MIN_ROW_ID = -(2 ** 63)
MAX_ROW_ID = 2 ** 63 - 1


class ItemRepository(Protocol):
    def insert(self, item: NewItem, timeout: Optional[float] = None) -> int: ...

    def get_all(self, timeout: Optional[float] = None) -> List[Item]: ...

    def get_by_id(self, item_id: int, timeout: Optional[float] = None) -> Item: ...

    def search_by_keyword(self, keyword: str, timeout: Optional[float] = None) -> List[Item]: ...


def escape_like(keyword: str) -> str:
    """Make LIKE wildcards in ``keyword`` match literally."""
    return (
        keyword.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class SqlItemRepository:
    """
    ItemRepository backed by the relational store.

    Every read joins ``categories`` so callers get the category name, never a
    bare id. Search is a case-insensitive substring match (SQL ``LIKE``).
    ``timeout`` on each method bounds how long its storage call waits on a
    locked database.
    """

    def __init__(self, database: Database):
        self.database = database

    def insert(self, item: NewItem, timeout: Optional[float] = None) -> int:
        """
        Write a new item row and return its id.

        ``item.category_id`` must already exist; the foreign key rejects it otherwise.

        Raises:
            InsertFailed: the row could not be written.
        """
        try:
            with self.database.session(timeout) as db:
                row = ItemRow(
                    name=item.name,
                    category_id=item.category_id,
                    image_name=item.image_name,
                )
                db.add(row)
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
                return row.id
        except SQLAlchemyError as e:
            raise InsertFailed(item.name, str(e)) from e

    def get_all(self, timeout: Optional[float] = None) -> List[Item]:
        try:
            with self.database.session(timeout) as db:
                rows = self._joined(db).order_by(ItemRow.id).all()
        except SQLAlchemyError as e:
            raise SearchFailed("all items", str(e)) from e
        return [self._to_item(row) for row in rows]

    def get_by_id(self, item_id: int, timeout: Optional[float] = None) -> Item:
        """
        Raises:
            ItemNotFound: no row has this id.
            SearchFailed: the query failed.
        """
        if not MIN_ROW_ID <= item_id <= MAX_ROW_ID:
            raise ItemNotFound(item_id)
        try:
            with self.database.session(timeout) as db:
                row = self._joined(db).filter(ItemRow.id == item_id).first()
        except SQLAlchemyError as e:
            raise SearchFailed(f"item {item_id}", str(e)) from e
        if row is None:
            raise ItemNotFound(item_id)
        return self._to_item(row)

    def search_by_keyword(self, keyword: str, timeout: Optional[float] = None) -> List[Item]:
        pattern = f"%{escape_like(keyword)}%"
        try:
            with self.database.session(timeout) as db:
                rows = (
                    self._joined(db)
                    .filter(ItemRow.name.ilike(pattern, escape=LIKE_ESCAPE))
                    .order_by(ItemRow.id)
                    .all()
                )
        except SQLAlchemyError as e:
            raise SearchFailed(f"keyword {keyword!r}", str(e)) from e
        return [self._to_item(row) for row in rows]

    @staticmethod
    def _joined(db: Session) -> Query:
        return db.query(
            ItemRow.id,
            ItemRow.name,
            Category.name.label("category"),
            ItemRow.image_name,
        ).join(Category, ItemRow.category_id == Category.id)

    @staticmethod
    def _to_item(row) -> Item:
        return Item(id=row.id, name=row.name, category=row.category, image_name=row.image_name)
