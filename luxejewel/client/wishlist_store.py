# luxejewel/client/wishlist_store.py
from typing import Any, Dict, List

from luxejewel.client.storage import load_json, open_storage, save_json
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

WISHLIST_KEY = "luxejewel-wishlist"
PRODUCTS_KEY = "luxejewel-wishlist_products"


class WishlistStore:
    """
    Wishlisted product ids plus a snapshot cache of the products.
    Removing an id keeps its snapshot; only clear_wishlist drops the cache.
    """

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else open_storage()
        self._ids: List[Any] = []
        self._products: Dict[str, Dict[str, Any]] = {}
        self._load()

    def _load(self) -> None:
        ids = load_json(self.storage, WISHLIST_KEY, [])
        products = load_json(self.storage, PRODUCTS_KEY, {})

        if isinstance(ids, list):
            for product_id in ids:
                if product_id not in self._ids:
                    self._ids.append(product_id)
        else:
            logger.error("Stored wishlist is not a list, ignoring it")

        if isinstance(products, dict):
            self._products = products
        else:
            logger.error("Stored wishlist products are not a mapping, ignoring them")

    def _save(self) -> None:
        save_json(self.storage, WISHLIST_KEY, self._ids)
        save_json(self.storage, PRODUCTS_KEY, self._products)

    @property
    def items(self) -> List[Any]:
        return list(self._ids)

    def add_item(self, product: Dict[str, Any]) -> None:
        product_id = (product or {}).get("id")
        if product_id is None:
            return

        if product_id not in self._ids:
            self._ids.append(product_id)
        # JSON object keys are strings
        self._products[str(product_id)] = dict(product)
        self._save()

    def remove_item(self, product_id) -> None:
        self._ids = [i for i in self._ids if i != product_id]
        self._save()

    def toggle_item(self, product: Dict[str, Any]) -> bool:
        """Returns True when the product is in the wishlist afterwards."""
        product_id = (product or {}).get("id")
        if product_id is None:
            return False

        if self.is_in_wishlist(product_id):
            self.remove_item(product_id)
            return False
        self.add_item(product)
        return True

    def is_in_wishlist(self, product_id) -> bool:
        return product_id in self._ids

    def get_wishlist_products(self) -> List[Dict[str, Any]]:
        return [self._products[str(i)] for i in self._ids if str(i) in self._products]

    def get_item_count(self) -> int:
        return len(self._ids)

    def clear_wishlist(self) -> None:
        self._ids = []
        self._products = {}
        self._save()
