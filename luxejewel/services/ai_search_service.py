# luxejewel/services/ai_search_service.py
from typing import Any, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from luxejewel.domain.errors import ProviderError, ValidationError
from luxejewel.domain.schemas import ProductOut
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.services.ai_providers import (
    GeminiEmbeddingClient,
    VisionResult,
    default_vision_providers,
    strip_base64_prefix,
)
from luxejewel.utils.retry import quota_retry
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)

TEXT_MATCH_THRESHOLD = 0.5
IMAGE_MATCH_THRESHOLD = 0.3
MATCH_COUNT = 8
FALLBACK_MESSAGE = "AI service currently at capacity. Showing keyword matches."


class AISearchError(Exception):
    """The AI part of the search failed and no fallback applies (HTTP 500)."""

    def __init__(self, message: str, details: str):
        super().__init__(message)
        self.details = details


def serialize_matches(pairs) -> List[Dict[str, Any]]:
    return [
        {**ProductOut.model_validate(product).model_dump(), "similarity": round(similarity, 4)}
        for product, similarity in pairs
    ]


class AISearchService:
    """
    Image / text search over product embeddings.

    Images are described by the first vision provider that answers
    (providers and their models are tried in order), the description is
    embedded and matched against product vectors. Text queries are embedded
    directly and fall back to a keyword match when embedding fails.
    """

    def __init__(
        self,
        db: Session,
        providers: Sequence | None = None,
        embedder: GeminiEmbeddingClient | None = None,
        retries: int | None = None,
        retry_delay: float | None = None,
    ):
        self.products = ProductRepo(db)
        self.providers = list(providers) if providers is not None else default_vision_providers()
        self.embedder = embedder or GeminiEmbeddingClient()
        self.retries = retries
        self.retry_delay = retry_delay

    def _with_quota_retry(self, fn, *args):
        return quota_retry(self.retries, self.retry_delay)(fn)(*args)

    def embed(self, text: str) -> List[float]:
        return self._with_quota_retry(self.embedder.embed, text)

    def describe_image(self, image_b64: str) -> VisionResult:
        """Walk the provider chain until a model returns a usable description."""
        for provider in self.providers:
            if not provider.api_key:
                logger.info(f"Skipping {provider.name}: no API key")
                continue

            for model_id in provider.models:
                logger.info(f"Attempting {provider.name} ({model_id})")
                try:
                    if provider.retry_on_quota:
                        result = self._with_quota_retry(provider.describe, model_id, image_b64)
                    else:
                        result = provider.describe(model_id, image_b64)
                except ProviderError as e:
                    logger.warning(f"{provider.name} {model_id} failed: {e}")
                    continue

                logger.info(f"{provider.name} ({model_id}) successful")
                return result

        raise ProviderError("All AI vision models failed")

    def search(self, image: str | None = None, query: str | None = None) -> Dict[str, Any]:
        if not image and not query:
            raise ValidationError("Image or query text is required")

        logger.info(f"AI search request: has_image={bool(image)}, has_query={bool(query)}")

        category_id = None
        detected_category = None

        if query:
            try:
                embedding = self.embed(query)
            except ProviderError as embed_error:
                logger.warning(f"AI embedding failed: {embed_error}")
                return self._keyword_fallback(query, embed_error)
        else:
            try:
                vision = self.describe_image(strip_base64_prefix(image))
                detected_category = vision.category or None

                if detected_category:
                    category = self.products.get_category_by_slug(detected_category.lower())
                    if category:
                        category_id = category.id
                        logger.info(f"Mapped '{detected_category}' to category {category_id}")

                embedding = self.embed(vision.description)
            except ProviderError as e:
                logger.error(f"AI vision flow failed: {e}")
                raise AISearchError("AI search failed", str(e))

        matches = self.products.match_products(
            query_embedding=embedding,
            match_threshold=TEXT_MATCH_THRESHOLD if query else IMAGE_MATCH_THRESHOLD,
            match_count=MATCH_COUNT,
            match_category_id=category_id,
        )
        results = serialize_matches(matches)

        return {
            "results": results,
            "count": len(results),
            "category": detected_category,
        }

    def _keyword_fallback(self, query: str, embed_error: ProviderError) -> Dict[str, Any]:
        try:
            products = self.products.keyword_search(query, limit=MATCH_COUNT)
        except SQLAlchemyError:
            logger.exception("Keyword fallback failed")
            raise embed_error

        results = [ProductOut.model_validate(p).model_dump() for p in products]
        return {
            "results": results,
            "count": len(results),
            "is_fallback": True,
            "message": FALLBACK_MESSAGE,
        }
