import httpx
import pytest

from foodtracker.errors import UpstreamError
from foodtracker.services.open_food_facts import (
    OpenFoodFactsClient,
    calculate_confidence,
    clean_brand,
    clean_product_name,
    map_product,
    normalize_nutrition,
    sanitize_barcode,
    sanitize_search_query,
    should_cache,
)

PRODUCT = {
    "code": "3017620422003",
    "product_name": "  Nutella   hazelnut spread ",
    "brands": "Ferrero, Nutella",
    "image_url": "https://images.openfoodfacts.org/nutella.jpg",
    "serving_size": "15g",
    "nutriments": {
        "energy-kcal_100g": 539,
        "proteins_100g": 6.3,
        "carbohydrates_100g": 57.5,
        "fat_100g": 30.9,
        "sugars_100g": 56.3,
        "sodium_100g": 0.0428,
    },
}


def make_client(handler):
    return OpenFoodFactsClient(base_url="https://off.test", transport=httpx.MockTransport(handler))


def test_search_maps_and_orders_products():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"products": [
            {"code": "1", "product_name": "Chocolate milk", "nutriments": {"energy-kcal_100g": 70}},
            {"code": "2", "product_name": "Milk", "nutriments": {"energy-kcal_100g": 42}},
            {"code": "3", "product_name": "", "nutriments": {}},
        ]})

    results = make_client(handler).search("milk!")

    assert seen["path"] == "/api/v0/cgi/search.pl"
    assert seen["params"]["search_terms"] == "milk"
    assert seen["params"]["json"] == "1"
    assert [r["name"] for r in results] == ["Milk", "Chocolate milk"]
    assert results[0]["confidence"] == 1.0


def test_search_http_error_raises_upstream():
    def handler(request):
        return httpx.Response(503)

    with pytest.raises(UpstreamError):
        make_client(handler).search("milk")


def test_search_transport_error_raises_upstream():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError):
        make_client(handler).search("milk")


def test_search_invalid_json_raises_upstream():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    with pytest.raises(UpstreamError):
        make_client(handler).search("milk")


def test_empty_query_makes_no_request():
    def handler(request):
        raise AssertionError("no request expected")

    assert make_client(handler).search("!!!") == []


def test_lookup_barcode():
    def handler(request):
        assert request.url.path == "/api/v0/product/3017620422003.json"
        return httpx.Response(200, json={"status": 1, "product": PRODUCT})

    product = make_client(handler).lookup_barcode("3017-6204-22003")
    assert product["name"] == "Nutella hazelnut spread"
    assert product["brand"] == "Ferrero"
    assert product["calories"] == 539
    assert product["sodium"] == 42.8
    assert product["confidence"] == 1.0


@pytest.mark.parametrize("response", [
    httpx.Response(404),
    httpx.Response(200, json={"status": 0, "status_verbose": "product not found"}),
])
def test_lookup_barcode_not_found(response):
    assert make_client(lambda request: response).lookup_barcode("123") is None


def test_normalize_nutrition_falls_back_to_kilojoules():
    values = normalize_nutrition({"energy_100g": 418.4, "proteins_100g": "bad", "fat_100g": -3, "sugars_100g": 1e9})
    assert values["calories"] == 100.0
    assert values["protein"] == 0.0
    assert values["fat"] == 0.0
    assert values["sugar"] == 9999


def test_cleaners():
    assert sanitize_search_query("  apple <script> ") == "apple script"
    assert sanitize_barcode("12 34-5") == "12345"
    assert clean_product_name(None) == "Unknown Product"
    assert clean_product_name("Tea\x00 bag") == "Tea bag"
    assert clean_brand("") == ""


def test_confidence():
    assert calculate_confidence("Apple", "", "apple") == 1.0
    assert calculate_confidence("Apple juice", "", "apple") == pytest.approx(1.0)
    assert calculate_confidence("Green apple", "", "apple") == pytest.approx(0.9)
    assert calculate_confidence("Pear", "", "apple") == 0.0


def test_should_cache():
    product = map_product(PRODUCT)
    assert should_cache(product)
    assert not should_cache(dict(product, name="Unknown Product"))
    assert not should_cache(dict(product, calories=0, protein=0, carbs=0, fat=0))
    assert not should_cache(dict(product, confidence=0.2))
