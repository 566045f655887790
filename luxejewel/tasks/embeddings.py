# luxejewel/tasks/embeddings.py
from luxejewel.celery_worker import celery_app
from luxejewel.data.database import SessionLocal
from luxejewel.domain.errors import ProviderError
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.services.ai_providers import GeminiEmbeddingClient
from luxejewel.utils.retry import quota_retry
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


def product_embedding_text(product) -> str:
    return (
        f"Product: {product.name}. "
        f"Summary: {product.short_description}. "
        f"Details: {product.description}"
    )


def generate_embeddings(db, embedder: GeminiEmbeddingClient | None = None, force: bool = False, retry_delay: float | None = None) -> dict:
    """Embed products that have no vector yet (every product with force)."""
    embedder = embedder or GeminiEmbeddingClient()
    repo = ProductRepo(db)

    products = repo.list_for_embedding(force=force)
    if not products:
        logger.info("All products already have embeddings")
        return {"processed": 0, "succeeded": 0, "failed": 0}

    logger.info(f"Found {len(products)} products to embed")
    embed = quota_retry(delay=retry_delay)(embedder.embed)

    succeeded = failed = 0
    for i, product in enumerate(products, start=1):
        logger.info(f"[{i}/{len(products)}] Embedding {product.name}")
        try:
            product.embedding = embed(product_embedding_text(product))
            db.commit()
            succeeded += 1
        except ProviderError as e:
            db.rollback()
            logger.error(f"Embedding failed for {product.name}: {e}")
            failed += 1

    logger.info(f"Embeddings done: {succeeded} ok, {failed} failed")
    return {"processed": len(products), "succeeded": succeeded, "failed": failed}


@celery_app.task(name="luxejewel.tasks.embeddings.generate_embeddings_task")
def generate_embeddings_task(force: bool = False):
    logger.info("Generate embeddings task started")

    db = SessionLocal()
    try:
        return generate_embeddings(db, force=force)
    finally:
        db.close()
