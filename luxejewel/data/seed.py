# luxejewel/data/seed.py
"""
Database maintenance: table creation, sample catalog, cleanup,
embedding backfill and an environment check.

    python -m luxejewel.data.seed --init --seed
    python -m luxejewel.data.seed --embeddings --force
"""
import argparse
import os
from decimal import Decimal
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from luxejewel.data.database import SessionLocal, create_tables, drop_tables
from luxejewel.data.models import CategoryModel, ProductModel, UserModel
from luxejewel.domain.errors import ConflictError
from luxejewel.domain.schemas import RegisterIn
from luxejewel.services.auth_service import AuthService
from luxejewel.tasks.embeddings import generate_embeddings
from luxejewel.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {"name": "Rings", "slug": "rings", "description": "Engagement, wedding and statement rings"},
    {"name": "Necklaces", "slug": "necklaces", "description": "Chains, pendants and chokers"},
    {"name": "Earrings", "slug": "earrings", "description": "Studs, hoops and drops"},
    {"name": "Bracelets", "slug": "bracelets", "description": "Bangles, cuffs and tennis bracelets"},
]

PRODUCTS = [
    {
        "name": "Sapphire Halo Ring",
        "slug": "sapphire-halo-ring",
        "category": "rings",
        "description": "An oval blue sapphire framed by a halo of brilliant diamonds, set in polished platinum.",
        "short_description": "Oval sapphire with a diamond halo.",
        "price": "1299.00",
        "compare_price": "1499.00",
        "material": "Platinum",
        "gemstone": "Sapphire",
        "inventory_quantity": 12,
        "is_featured": True,
        "is_on_sale": True,
        "image": "https://images.unsplash.com/photo-1605100804763-247f67b3557e?w=800&q=80",
    },
    {
        "name": "Gold Chain Necklace",
        "slug": "gold-chain-necklace",
        "category": "necklaces",
        "description": "A classic 18k yellow gold rope chain with a secure lobster clasp, made to layer or wear alone.",
        "short_description": "Classic 18k gold rope chain.",
        "price": "649.00",
        "material": "18k Gold",
        "inventory_quantity": 30,
        "is_featured": True,
        "image": "https://images.unsplash.com/photo-1599643478518-a784e5dc4c8f?w=800&q=80",
    },
    {
        "name": "Pearl Drop Earrings",
        "slug": "pearl-drop-earrings",
        "category": "earrings",
        "description": "Freshwater pearls suspended from sterling silver hooks for a timeless, elegant look.",
        "short_description": "Freshwater pearl drops on silver.",
        "price": "189.00",
        "material": "Sterling Silver",
        "gemstone": "Pearl",
        "inventory_quantity": 45,
        "is_new": True,
        "image": "https://images.unsplash.com/photo-1535632066927-ab7c9ab60908?w=800&q=80",
    },
    {
        "name": "Silver Bangles Set",
        "slug": "silver-bangles-set",
        "category": "bracelets",
        "description": "A set of three hammered sterling silver bangles that stack with a soft chime.",
        "short_description": "Three hammered silver bangles.",
        "price": "129.00",
        "material": "Sterling Silver",
        "inventory_quantity": 60,
        "image": "https://images.unsplash.com/photo-1611591437281-460bfbe1220a?w=800&q=80",
    },
    {
        "name": "Geometric Floral Sterling Silver Ring",
        "slug": "geometric-floral-silver-ring",
        "category": "rings",
        "description": "A contemporary sterling silver ring featuring an intricate geometric floral pattern. "
                       "Its open-work design combines modern aesthetics with classic craftsmanship.",
        "short_description": "Intricate geometric floral silver ring.",
        "price": "54.99",
        "material": "Sterling Silver",
        "inventory_quantity": 100,
        "image": "https://images.unsplash.com/photo-1602751584552-8ba73aad10e1?w=800&q=80",
    },
    {
        "name": "Bohemian Single Charm Statement Necklace",
        "slug": "bohemian-charm-necklace",
        "category": "necklaces",
        "description": "A bohemian-inspired necklace with a single intricate charm suspended from a delicate "
                       "multi-layered chain.",
        "short_description": "Artistic bohemian single charm necklace.",
        "price": "49.99",
        "material": "Gold Plated",
        "inventory_quantity": 75,
        "image": "https://images.unsplash.com/photo-1589128777073-263566ae5e4d?w=800&q=80",
    },
    {
        "name": "Cubic Zirconia Huggie Earrings",
        "slug": "cz-huggie-earrings",
        "category": "earrings",
        "description": "Dainty silver huggie earrings encrusted with high-grade cubic zirconia stones.",
        "short_description": "Dainty silver CZ huggie earrings.",
        "price": "39.99",
        "material": "Sterling Silver",
        "gemstone": "Cubic Zirconia",
        "inventory_quantity": 120,
        "is_featured": True,
        "image": "https://images.unsplash.com/photo-1635767798638-3e25273a8236?w=800&q=80",
    },
    {
        "name": "Seashell Turquoise Charm Hoop Earrings",
        "slug": "seashell-turquoise-charm-earrings",
        "category": "earrings",
        "description": "Hoop earrings adorned with delicate seashells and turquoise accents.",
        "short_description": "Beachy seashell and turquoise charm hoops.",
        "price": "24.99",
        "material": "Gold Plated",
        "gemstone": "Turquoise",
        "inventory_quantity": 150,
        "is_new": True,
        "image": "https://images.unsplash.com/photo-1629224316810-9d8805b95e76?w=800&q=80",
    },
]

# products and categories that survive --cleanup
KEEP_SLUGS = ("gold-chain-necklace", "pearl-drop-earrings", "silver-bangles-set", "sapphire-halo-ring")
EXTRA_CATEGORIES = ("bangles", "anklets")

REQUIRED_ENV = ("DATABASE_URL", "GOOGLE_API_KEY")
OPTIONAL_ENV = ("GROQ_API_KEY", "CEREBRAS_API_KEY", "OPENROUTER_API_KEY", "REDIS_URL", "CELERY_BROKER_URL")


def seed(db) -> dict:
    """Insert missing categories and products (matched by slug); existing rows are left alone."""
    categories = {c.slug: c for c in db.execute(select(CategoryModel)).scalars().all()}
    for data in CATEGORIES:
        if data["slug"] not in categories:
            category = CategoryModel(**data)
            db.add(category)
            categories[data["slug"]] = category
            logger.info(f"Category {data['name']} seeded")
    db.flush()

    existing = set(db.execute(select(ProductModel.slug)).scalars().all())
    added = 0
    for data in PRODUCTS:
        if data["slug"] in existing:
            continue
        data = dict(data)
        category = categories[data.pop("category")]
        image = data.pop("image")
        price = Decimal(data.pop("price"))
        compare_price = data.pop("compare_price", None)
        db.add(
            ProductModel(
                **data,
                price=price,
                compare_price=Decimal(compare_price) if compare_price else None,
                category_id=category.id,
                images=[image],
                featured_image=image,
            )
        )
        added += 1
        logger.info(f"Product {data['name']} seeded")

    db.commit()
    return {"categories": len(categories), "products_added": added}


def seed_admin(db, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD) -> UserModel | None:
    if not email or not password:
        logger.info("ADMIN_EMAIL / ADMIN_PASSWORD not set, skipping admin user")
        return None

    try:
        user = AuthService(db).register(RegisterIn(email=email, password=password, full_name="Administrator"), role="admin")
    except ConflictError:
        logger.info(f"Admin {email} already exists")
        return None
    logger.info(f"Admin user {email} created")
    return user


def cleanup(db) -> dict:
    """Delete products outside KEEP_SLUGS and the extra categories no product still uses."""
    removed = deactivated = 0
    products = db.execute(select(ProductModel).where(ProductModel.slug.not_in(KEEP_SLUGS))).scalars().all()
    for product in products:
        try:
            db.delete(product)
            db.commit()
            removed += 1
        except IntegrityError:
            # referenced by orders
            db.rollback()
            product.is_active = False
            db.commit()
            deactivated += 1

    categories = db.execute(select(CategoryModel).where(CategoryModel.slug.in_(EXTRA_CATEGORIES))).scalars().all()
    categories_removed = categories_kept = 0
    for category in categories:
        in_use = db.execute(
            select(ProductModel.id).where(ProductModel.category_id == category.id).limit(1)
        ).first()
        if in_use:
            logger.warning(f"Category {category.slug} still has products, keeping it")
            categories_kept += 1
            continue
        try:
            db.delete(category)
            db.commit()
            categories_removed += 1
        except IntegrityError:
            db.rollback()
            logger.warning(f"Category {category.slug} is still referenced, keeping it")
            categories_kept += 1

    logger.info(
        f"Cleanup: removed {removed} products ({deactivated} deactivated), "
        f"{categories_removed} categories ({categories_kept} kept)"
    )
    return {
        "products_removed": removed,
        "products_deactivated": deactivated,
        "categories_removed": categories_removed,
        "categories_kept": categories_kept,
    }


def check_env(environ=None) -> List[str]:
    """Returns the missing required variables and logs the state of every variable."""
    environ = os.environ if environ is None else environ
    missing = []
    for name in REQUIRED_ENV:
        if environ.get(name):
            logger.info(f"{name}: set")
        else:
            logger.error(f"{name}: NOT SET")
            missing.append(name)
    for name in OPTIONAL_ENV:
        logger.info(f"{name}: {'set' if environ.get(name) else 'not set (optional)'}")
    return missing


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="LuxeJewel database maintenance")
    parser.add_argument("--init", action="store_true", help="Create tables")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate tables")
    parser.add_argument("--seed", action="store_true", help="Seed categories, products and the admin user")
    parser.add_argument("--cleanup", action="store_true", help="Remove products and categories outside the keep-list")
    parser.add_argument("--embeddings", action="store_true", help="Generate missing product embeddings")
    parser.add_argument("--force", action="store_true", help="With --embeddings: regenerate every embedding")
    parser.add_argument("--check-env", action="store_true", help="Report missing environment variables")
    args = parser.parse_args(argv)

    if args.check_env:
        return 1 if check_env() else 0

    if args.reset:
        drop_tables()
        create_tables()
    elif args.init:
        create_tables()

    db = SessionLocal()
    try:
        if args.seed:
            logger.info(f"Seed: {seed(db)}")
            seed_admin(db)
        if args.cleanup:
            cleanup(db)
        if args.embeddings:
            stats = generate_embeddings(db, force=args.force)
            if stats["failed"]:
                return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
