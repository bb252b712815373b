"""
Catalog use cases: adding items and querying them.

This is the entry point the HTTP layer calls; it composes the image store,
category resolver and item repository. Every database-backed operation takes
an optional ``timeout`` in seconds, passed through to each storage call it makes.
"""

from typing import List, Optional

from catalog.schemas import Item, NewItem
from catalog.services.categories import CategoryResolver
from catalog.services.images import ImageStore
from catalog.services.items import ItemRepository


class CatalogService:
    def __init__(
        self,
        images: ImageStore,
        categories: CategoryResolver,
        items: ItemRepository,
    ):
        self.images = images
        self.categories = categories
        self.items = items

    def add_item(
        self,
        name: str,
        category_name: str,
        image_data: bytes,
        timeout: Optional[float] = None,
    ) -> Item:
        """
        Store the image, resolve the category, then insert the item.

        The item row is written only after both of the first two steps succeed.
        There is no transaction across the image store and the database, so a
        failure after the image is stored leaves that image in place; it is
        content-addressed and will be reused by the next identical upload.
        """
        image_name = self.images.store(image_data)
        category_id = self.categories.resolve(category_name, timeout=timeout)
        item_id = self.items.insert(
            NewItem(name=name, category_id=category_id, image_name=image_name),
            timeout=timeout,
        )
        return Item(id=item_id, name=name, category=category_name, image_name=image_name)

    def get_all(self, timeout: Optional[float] = None) -> List[Item]:
        return self.items.get_all(timeout=timeout)

    def get_by_id(self, item_id: int, timeout: Optional[float] = None) -> Item:
        return self.items.get_by_id(item_id, timeout=timeout)

    def search_by_keyword(self, keyword: str, timeout: Optional[float] = None) -> List[Item]:
        return self.items.search_by_keyword(keyword, timeout=timeout)

    def retrieve_image(self, reference: str) -> bytes:
        return self.images.retrieve(reference)
