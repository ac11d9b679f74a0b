"""
Open Food Facts client

Searches the public Open Food Facts database by name and barcode and maps
products onto the local food shape (nutrients per 100 g, sodium in mg).
"""

import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from flask import current_app

from foodtracker.errors import UpstreamError

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = "code,product_name,generic_name,brands,nutriments,image_url,serving_size"
UNKNOWN_PRODUCT = "Unknown Product"
MAX_NUTRIENT_VALUE = 9999
KJ_PER_KCAL = 4.184

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def sanitize_search_query(query: str) -> str:
    return re.sub(r"[^\w\s-]", "", (query or "").strip())[:100]


def sanitize_barcode(barcode: str) -> str:
    return re.sub(r"[^0-9]", "", barcode or "")


def clean_product_name(name: Optional[str]) -> str:
    if not name or name == UNKNOWN_PRODUCT:
        return UNKNOWN_PRODUCT
    name = re.sub(r"\s+", " ", name.strip())
    return _CONTROL_CHARS.sub("", name)[:200]


def clean_brand(brands: Optional[str]) -> str:
    if not brands:
        return ""
    return brands.split(",")[0].strip()[:100]


def clean_image_url(url: Optional[str]) -> Optional[str]:
    if not url or not url.startswith("http"):
        return None
    return url[:500]


def _nutriment(nutriments: Dict[str, Any], key: str) -> float:
    value = nutriments.get(key)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    if number < 0:
        return 0.0
    return min(number, MAX_NUTRIENT_VALUE)


def normalize_nutrition(nutriments: Dict[str, Any]) -> Dict[str, float]:
    """Nutrients per 100 g; energy falls back from kJ, sodium converted to mg."""
    calories = _nutriment(nutriments, "energy-kcal_100g") or _nutriment(nutriments, "energy_100g") / KJ_PER_KCAL
    return {
        "calories": round(calories, 2),
        "protein": _nutriment(nutriments, "proteins_100g"),
        "carbs": _nutriment(nutriments, "carbohydrates_100g"),
        "fat": _nutriment(nutriments, "fat_100g"),
        "fiber": _nutriment(nutriments, "fiber_100g"),
        "sugar": _nutriment(nutriments, "sugars_100g"),
        "sodium": round(_nutriment(nutriments, "sodium_100g") * 1000, 2),
    }


def calculate_confidence(name: str, brand: str, search_term: str) -> float:
    """Relevance of a product name/brand to the search term, 0..1."""
    term = search_term.lower()
    lower_name = name.lower()
    lower_brand = (brand or "").lower()

    confidence = 0.0
    if lower_name == term:
        confidence += 1.0
    elif lower_name.startswith(term):
        confidence += 0.8
    elif term in lower_name:
        confidence += 0.6

    if lower_brand and term in lower_brand:
        confidence += 0.2

    search_words = term.split(" ")
    name_words = lower_name.split(" ")
    matching = [w for w in search_words if any(w in nw for nw in name_words)]
    confidence += (len(matching) / len(search_words)) * 0.3

    return min(confidence, 1.0)


def map_product(product: Dict[str, Any], search_term: Optional[str] = None) -> Dict[str, Any]:
    name = clean_product_name(product.get("product_name") or product.get("generic_name"))
    brand = clean_brand(product.get("brands"))
    result = {
        "name": name,
        "brand": brand,
        "barcode": product.get("code") or "",
        "serving_size": product.get("serving_size") or "100g",
        "image_url": clean_image_url(product.get("image_url")),
        "is_from_cache": False,
        "confidence": calculate_confidence(name, brand, search_term) if search_term else 1.0,
    }
    result.update(normalize_nutrition(product.get("nutriments") or {}))
    return result


def should_cache(result: Dict[str, Any]) -> bool:
    """Only keep products with a name, some nutrition data and fair relevance."""
    if not result.get("name") or result["name"] == UNKNOWN_PRODUCT:
        return False
    has_nutrition = any((result.get(k) or 0) > 0 for k in ("calories", "protein", "carbs", "fat"))
    confidence = result.get("confidence")
    return has_nutrition and (not confidence or confidence >= 0.3)


class OpenFoodFactsClient:
    """Synchronous Open Food Facts API client."""

    def __init__(
        self,
        base_url: str = "https://world.openfoodfacts.org",
        timeout: float = 10,
        retries: int = 3,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.http_client = httpx.Client(
            base_url=base_url.rstrip("/") + "/api/v0",
            timeout=timeout,
            transport=transport or httpx.HTTPTransport(retries=retries),
            headers={"User-Agent": "FoodTracker/1.0"},
        )

    @classmethod
    def from_config(cls, config) -> "OpenFoodFactsClient":
        return cls(
            base_url=config.get("OPEN_FOOD_FACTS_URL", "https://world.openfoodfacts.org"),
            timeout=config.get("OPEN_FOOD_FACTS_TIMEOUT", 10),
        )

    def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        try:
            return self.http_client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.warning("Open Food Facts request to %s failed: %s", path, e)
            raise UpstreamError(f"Open Food Facts request failed: {e}")

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            return response.json() or {}
        except ValueError:
            raise UpstreamError("Open Food Facts returned an invalid JSON body")

    def search(self, query: str, page_size: int = 10) -> List[Dict[str, Any]]:
        """Search products by name, most relevant first."""
        term = sanitize_search_query(query)
        if not term:
            return []
        response = self._get("/cgi/search.pl", {
            "search_terms": term,
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "page_size": page_size,
            "fields": PRODUCT_FIELDS,
        })
        if response.status_code != 200:
            raise UpstreamError(f"Open Food Facts search returned HTTP {response.status_code}")

        products = self._json(response).get("products") or []
        results = [map_product(p, term) for p in products]
        results = [r for r in results if r["name"] and r["name"] != UNKNOWN_PRODUCT]
        results.sort(key=lambda r: r["confidence"], reverse=True)
        logger.info("Open Food Facts returned %s products for '%s'", len(results), term)
        return results

    def lookup_barcode(self, barcode: str) -> Optional[Dict[str, Any]]:
        """Fetch one product by barcode, None when it does not exist."""
        code = sanitize_barcode(barcode)
        if not code:
            return None
        response = self._get(f"/product/{code}.json", {"fields": PRODUCT_FIELDS})
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise UpstreamError(f"Open Food Facts barcode lookup returned HTTP {response.status_code}")

        data = self._json(response)
        if data.get("status") != 1 or not data.get("product"):
            logger.info("No Open Food Facts product for barcode %s", code)
            return None
        return map_product(data["product"])

    def close(self) -> None:
        self.http_client.close()


def get_open_food_facts_client() -> Optional[OpenFoodFactsClient]:
    """The application's shared client, or None when lookups are disabled."""
    if not current_app.config.get("OPEN_FOOD_FACTS_ENABLED", True):
        return None
    client = current_app.extensions.get("open_food_facts")
    if client is None:
        client = OpenFoodFactsClient.from_config(current_app.config)
        current_app.extensions["open_food_facts"] = client
    return client
