# tests/test_seed.py
from sqlalchemy import select

from luxejewel.data.models import CategoryModel, ProductModel, UserModel
from luxejewel.data.seed import KEEP_SLUGS, PRODUCTS, check_env, cleanup, seed, seed_admin


def test_seed_is_idempotent(db):
    first = seed(db)
    assert first == {"categories": 4, "products_added": len(PRODUCTS)}

    second = seed(db)
    assert second["products_added"] == 0
    assert len(db.execute(select(ProductModel)).scalars().all()) == len(PRODUCTS)


def test_seed_admin(db):
    assert seed_admin(db, email="", password="") is None

    admin = seed_admin(db, email="owner@luxejewel.test", password="owner-pass-1")
    assert admin.role == "admin"
    assert seed_admin(db, email="owner@luxejewel.test", password="owner-pass-1") is None
    assert db.execute(select(UserModel)).scalars().all() == [admin]


def test_cleanup_keeps_core_catalog(db):
    seed(db)
    db.add(CategoryModel(name="Anklets", slug="anklets"))
    db.commit()

    stats = cleanup(db)
    assert stats["products_removed"] == len(PRODUCTS) - len(KEEP_SLUGS)
    assert stats["categories_removed"] == 1

    slugs = set(db.execute(select(ProductModel.slug)).scalars().all())
    assert slugs == set(KEEP_SLUGS)


def test_cleanup_keeps_categories_still_in_use(db):
    seed(db)
    bangles = CategoryModel(name="Bangles", slug="bangles")
    db.add_all([bangles, CategoryModel(name="Anklets", slug="anklets")])
    db.commit()
    kept = db.execute(select(ProductModel).where(ProductModel.slug == "silver-bangles-set")).scalar_one()
    kept.category_id = bangles.id
    db.commit()

    stats = cleanup(db)
    assert stats["categories_removed"] == 1
    assert stats["categories_kept"] == 1
    assert db.execute(select(CategoryModel.slug).where(CategoryModel.slug.in_(("bangles", "anklets")))).scalars().all() == ["bangles"]


def test_check_env():
    assert check_env({"DATABASE_URL": "sqlite://", "GOOGLE_API_KEY": "AIza"}) == []
    assert check_env({"DATABASE_URL": "sqlite://"}) == ["GOOGLE_API_KEY"]
