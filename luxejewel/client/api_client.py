# luxejewel/client/api_client.py
from typing import Any, Dict, List

import requests

from luxejewel.utils.retry import http_retry
from luxejewel.utils.settings import STOREFRONT_API_URL
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


class StorefrontAPIError(Exception):
    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _detail(resp) -> Any:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body


class StorefrontClient:
    """
    HTTP client for the storefront API.
    Only reads are retried on transport errors; writes are sent once.
    A request that never gets a response raises StorefrontAPIError(503).
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10,
        token: str | None = None,
    ):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = token

    def _headers(self, extra: Dict[str, str] | None = None) -> Dict[str, str]:
        headers = dict(extra or {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _handle(self, resp) -> Any:
        if resp.status_code >= 400:
            detail = _detail(resp)
            logger.warning(f"API error {resp.status_code}: {detail}")
            raise StorefrontAPIError(resp.status_code, detail)
        try:
            return resp.json()
        except ValueError as e:
            raise StorefrontAPIError(502, f"Invalid JSON response: {e}") from e

    @http_retry()
    def _fetch(self, url: str, params: Dict[str, Any], headers: Dict[str, str]):
        return self.session.get(url, params=params, headers=headers, timeout=self.timeout)

    def _get(self, path: str, params: Dict[str, Any] | None = None, headers: Dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"StorefrontClient GET {url}")
        params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            resp = self._fetch(url, params, self._headers(headers))
        except requests.RequestException as e:
            logger.error(f"GET {url} failed: {e}")
            raise StorefrontAPIError(503, str(e)) from e
        return self._handle(resp)

    def _send(self, method: str, path: str, json: Any = None, params: Dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"StorefrontClient {method} {url}")
        params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            resp = self.session.request(
                method, url, json=json, params=params, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise StorefrontAPIError(503, str(e)) from e
        return self._handle(resp)

    # ---------- catalog ----------
    def list_products(self, **filters) -> List[dict]:
        return self._get("/api/products", params=filters)

    def get_product(self, slug: str) -> dict:
        return self._get(f"/api/products/{slug}")

    def list_categories(self) -> List[dict]:
        return self._get("/api/categories")

    def search(self, **filters) -> dict:
        return self._get("/api/search", params=filters)

    def ai_search(self, image: str | None = None, query: str | None = None) -> dict:
        return self._send("POST", "/api/search/ai", json={"image": image, "query": query})

    def recommendations(self, product_id: int | None = None, count: int = 4) -> List[dict]:
        return self._get("/api/recommendations", params={"product_id": product_id, "count": count})

    # ---------- server cart ----------
    def get_cart(self, user_id: int | None = None, session_id: str | None = None) -> List[dict]:
        headers = {"X-Session-Id": session_id} if session_id else None
        return self._get("/api/cart", params={"user_id": user_id}, headers=headers)

    def add_to_cart(self, product_id: int, quantity: int = 1, user_id: int | None = None, session_id: str | None = None) -> dict:
        return self._send("POST", "/api/cart", json={
            "product_id": product_id,
            "quantity": quantity,
            "user_id": user_id,
            "session_id": session_id,
        })

    # ---------- wishlist ----------
    def get_wishlist(self, user_id: int) -> List[dict]:
        return self._get("/api/wishlist", params={"user_id": user_id})

    def add_to_wishlist(self, user_id: int, product_id: int) -> dict:
        return self._send("POST", "/api/wishlist", json={"user_id": user_id, "product_id": product_id})

    def remove_from_wishlist(self, user_id: int, product_id: int) -> dict:
        return self._send("DELETE", "/api/wishlist", params={"user_id": user_id, "product_id": product_id})

    # ---------- orders ----------
    def create_order(self, order: Dict[str, Any]) -> dict:
        return self._send("POST", "/api/orders", json=order)

    def get_order(self, order_id: int) -> dict:
        return self._get("/api/orders", params={"order_id": order_id})

    def list_orders(self, user_id: int) -> List[dict]:
        return self._get("/api/orders", params={"user_id": user_id})

    # ---------- reviews ----------
    def list_reviews(self, product_id: int) -> List[dict]:
        return self._get("/api/reviews", params={"product_id": product_id})

    def create_review(self, product_id: int, rating: int, comment: str = "", user_id: int | None = None) -> dict:
        return self._send("POST", "/api/reviews", json={
            "product_id": product_id,
            "user_id": user_id,
            "rating": rating,
            "comment": comment,
        })

    # ---------- auth ----------
    def register(self, email: str, password: str, full_name: str = "") -> dict:
        return self._send("POST", "/api/auth/register", json={
            "email": email,
            "password": password,
            "full_name": full_name,
        })

    def login(self, email: str, password: str) -> dict:
        data = self._send("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return data

    def logout(self) -> None:
        self._send("POST", "/api/auth/logout")
        self.token = None

    def me(self) -> dict:
        return self._get("/api/auth/me")
