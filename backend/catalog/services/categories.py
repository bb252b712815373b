"""
Category normalization: map a category name to a stable id, creating it on first use.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from catalog.database import Database
from catalog.exceptions import CategoryResolutionFailed
from catalog.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class CategoryResolver:
    """
    Get-or-create for categories, safe under concurrent first-time requests.

    The unique constraint on ``categories.name`` is the only lock. A create that
    loses the race to another request hits that constraint; the resolver then
    reads back the row the winner inserted instead of failing.
    """

    def __init__(self, database: Database, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.database = database
        self.max_attempts = max_attempts

    def resolve(self, name: str, timeout: Optional[float] = None) -> int:
        """
        Return the id of the category called ``name``, creating it if absent.

        Raises:
            CategoryResolutionFailed: storage failed or outlasted ``timeout``, or
                the category could not be read back after repeated uniqueness
                conflicts.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                category_id = self._lookup(name, timeout)
                if category_id is not None:
                    return category_id
                return self._create(name, timeout)
            except IntegrityError:
                # Someone else created it between our read and our insert
                logger.debug(
                    f"Category '{name}' created concurrently, re-reading (attempt {attempt})"
                )
                continue
            except SQLAlchemyError as e:
                raise CategoryResolutionFailed(name, str(e)) from e

        raise CategoryResolutionFailed(
            name, f"still conflicting after {self.max_attempts} attempts"
        )

    def _lookup(self, name: str, timeout: Optional[float] = None) -> Optional[int]:
        with self.database.session(timeout) as db:
            return db.query(Category.id).filter(Category.name == name).scalar()

    def _create(self, name: str, timeout: Optional[float] = None) -> int:
        with self.database.session(timeout) as db:
            category = Category(name=name)
            db.add(category)
            try:
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            return category.id
