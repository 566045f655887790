# luxejewel/services/catalog_service.py
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from luxejewel.data.models.product import ProductModel
from luxejewel.domain.errors import ConflictError, NotFoundError, ValidationError
from luxejewel.domain.schemas import ProductCreate
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

LISTING_SORTS = ("featured", "price-low", "price-high", "rating", "newest")
SEARCH_SORTS = ("relevance", "price-low", "price-high", "newest", "rating")
# columns a partial update may not set to null
NOT_NULL_FIELDS = (
    "name", "slug", "price", "description", "short_description", "images", "material",
    "inventory_quantity", "is_new", "is_featured", "is_on_sale", "is_active",
)


def parse_price(value: str | None) -> Decimal | None:
    """Price filter from a query string; anything unparseable is ignored."""
    if value is None or value == "":
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite():
        return None
    return price


def sort_products(products: Iterable[ProductModel], sort_by: str, newest_by_id: bool = False) -> List[ProductModel]:
    """
    In-memory sort for listing and search pages.
    Unknown keys ("featured", "relevance") keep the incoming order.
    Listing pages put is_new products first for "newest", search sorts by id.
    """
    items = list(products)
    if sort_by == "price-low":
        items.sort(key=lambda p: Decimal(p.price))
    elif sort_by == "price-high":
        items.sort(key=lambda p: Decimal(p.price), reverse=True)
    elif sort_by == "rating":
        items.sort(key=lambda p: Decimal(p.rating_average or 0), reverse=True)
    elif sort_by == "newest":
        if newest_by_id:
            items.sort(key=lambda p: p.id, reverse=True)
        else:
            items.sort(key=lambda p: bool(p.is_new), reverse=True)
    return items


def matches_text(product: ProductModel, term: str) -> bool:
    term = term.lower()
    fields = (
        product.name,
        product.description,
        product.short_description,
        product.material,
        product.gemstone,
    )
    return any(f and term in f.lower() for f in fields)


class CatalogService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    # =====================================================
    # QUERIES
    # =====================================================
    def _category_id(self, category: str | None) -> tuple[bool, int | None]:
        """(known, id) for a category slug; 'all' and empty mean no filter."""
        if not category or category == "all":
            return True, None
        found = self.repo.get_category_by_slug(category.lower())
        if not found:
            return False, None
        return True, found.id

    def list_products(
        self,
        category: str | None = None,
        featured: bool | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort: str = "featured",
    ) -> List[ProductModel]:
        if sort not in LISTING_SORTS:
            raise ValidationError(f"Unknown sort option: {sort}")

        known, category_id = self._category_id(category)
        if not known:
            return []

        products = self.repo.list_products(
            category_id=category_id,
            featured=True if featured else None,
            min_price=min_price,
            max_price=max_price,
        )
        return sort_products(products, sort)

    def list_categories(self):
        return self.repo.list_categories()

    def get_product(self, slug: str, track_view: bool = True) -> ProductModel:
        product = self.repo.get_by_slug(slug)
        if not product or not product.is_active:
            raise NotFoundError(f"Product {slug} not found")

        if track_view:
            product.view_count = (product.view_count or 0) + 1
            self.repo.commit()
        return product

    def search(
        self,
        q: str | None = None,
        category: str | None = None,
        min_price: str | None = None,
        max_price: str | None = None,
        sort_by: str = "relevance",
    ) -> List[ProductModel]:
        """
        Keyword search with optional category and price filters,
        filtered and sorted in memory.
        """
        if not q and not category and not min_price and not max_price:
            raise ValidationError("At least one search parameter is required")

        known, category_id = self._category_id(category)
        if not known:
            return []

        results = self.repo.list_products(
            category_id=category_id,
            min_price=parse_price(min_price),
            max_price=parse_price(max_price),
        )
        if q:
            results = [p for p in results if matches_text(p, q)]

        return sort_products(results, sort_by if sort_by in SEARCH_SORTS else "relevance", newest_by_id=True)

    # =====================================================
    # ADMIN COMMANDS
    # =====================================================
    def list_all_products(self) -> List[ProductModel]:
        return self.repo.list_products(active_only=False)

    def create_product(self, payload: ProductCreate) -> ProductModel:
        product = ProductModel(**payload.model_dump())
        try:
            created = self.repo.add_product(product)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError(f"Product slug {payload.slug} already exists")

        logger.info(f"Product {created.id} ({created.slug}) created")
        return created

    def update_product(self, product_id: int, changes: Dict[str, Any]) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        nulls = sorted(f for f in NOT_NULL_FIELDS if f in changes and changes[f] is None)
        if nulls:
            raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")

        slug = changes.get("slug")
        if slug is not None:
            owner = self.repo.get_by_slug(slug)
            if owner is not None and owner.id != product_id:
                raise ConflictError(f"Product slug {slug} already exists")

        for field, value in changes.items():
            setattr(product, field, value)

        # name or description changes make the stored vector stale
        if {"name", "description", "short_description"} & changes.keys():
            product.embedding = None

        try:
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            if slug is not None:
                raise ConflictError(f"Product slug {slug} already exists")
            raise ValidationError(f"Invalid product data: {e.orig}")

        logger.info(f"Product {product_id} updated: {sorted(changes.keys())}")
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        try:
            self.repo.delete_product(product)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Product is referenced by existing orders, deactivate it instead")
        logger.info(f"Product {product_id} deleted")
