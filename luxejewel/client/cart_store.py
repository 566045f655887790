# luxejewel/client/cart_store.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from luxejewel.client.storage import load_json, open_storage, save_json
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

CART_KEY = "luxejewel-cart"


def _price(product: Dict[str, Any]) -> Decimal:
    try:
        return Decimal(str(product.get("price") or 0))
    except InvalidOperation:
        return Decimal("0")


def _is_valid_item(item) -> bool:
    if not isinstance(item, dict) or item.get("product_id") is None:
        return False
    if not isinstance(item.get("product") or {}, dict):
        return False
    quantity = item.get("quantity")
    # bool is an int subclass
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0


class CartStore:
    """
    Client-side cart of product snapshots.

    Every change is written to storage under `luxejewel-cart` and the cart is
    rehydrated from there on creation. Items look like
    {"product_id": 1, "quantity": 2, "product": {...}}.
    """

    def __init__(self, storage=None):
        self.storage = storage if storage is not None else open_storage()
        self._items: List[Dict[str, Any]] = self._load()

    def _load(self) -> List[Dict[str, Any]]:
        data = load_json(self.storage, CART_KEY, [])
        if not isinstance(data, list):
            logger.error("Stored cart is not a list, starting with an empty cart")
            return []
        items = [item for item in data if _is_valid_item(item)]
        if len(items) != len(data):
            logger.error(f"Dropped {len(data) - len(items)} unreadable stored cart item(s)")
        return items

    def _save(self) -> None:
        save_json(self.storage, CART_KEY, self._items)

    @property
    def items(self) -> List[Dict[str, Any]]:
        return [dict(item) for item in self._items]

    def _find(self, product_id) -> Dict[str, Any] | None:
        return next((i for i in self._items if i["product_id"] == product_id), None)

    def add_item(self, product: Dict[str, Any], quantity: int = 1) -> None:
        product_id = (product or {}).get("id")
        if product_id is None:
            return

        existing = self._find(product_id)
        if existing:
            existing["quantity"] += quantity
        else:
            self._items.append({"product_id": product_id, "quantity": quantity, "product": dict(product)})
        self._save()

    def remove_item(self, product_id) -> None:
        self._items = [i for i in self._items if i["product_id"] != product_id]
        self._save()

    def update_quantity(self, product_id, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id)
            return

        item = self._find(product_id)
        if item:
            item["quantity"] = quantity
            self._save()

    def clear_cart(self) -> None:
        self._items = []
        self._save()

    def get_item_count(self) -> int:
        return sum(i["quantity"] for i in self._items)

    def get_subtotal(self) -> Decimal:
        return sum(
            (_price(i.get("product") or {}) * i["quantity"] for i in self._items),
            Decimal("0"),
        )

    def is_in_cart(self, product_id) -> bool:
        return self._find(product_id) is not None
