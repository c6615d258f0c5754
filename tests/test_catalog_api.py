"""Tests for the public storefront API."""
from datetime import datetime, timedelta, timezone
from fitnlitt.models.order import Shipment


def _seed_catalog(make_collection, make_product):
    tayt = make_collection("tayt", title="Tayt", description="Yüksek bel taytlar")
    bra = make_collection("sporcu-sutyeni", title="Sporcu Sütyeni")
    make_product(
        "sculpt-tayt",
        title="Sculpt Yüksek Bel Tayt",
        price=899.9,
        compare_at=1099.9,
        collection_id=tayt.id,
        is_featured=True,
        variants=[("S", "Siyah", 5), ("M", "Siyah", 5), ("M", "Lacivert", 0)],
        images=["https://cdn.test/sculpt-1.jpg", "https://cdn.test/sculpt-2.jpg"],
    )
    make_product(
        "flow-tayt",
        title="Flow Dikişsiz Tayt",
        price=749.9,
        collection_id=tayt.id,
        variants=[("L", "Bordo", 2)],
    )
    make_product(
        "core-bra",
        title="Core Sporcu Sütyeni",
        price=549.9,
        collection_id=bra.id,
        variants=[("M", "Lacivert", 10)],
    )
    return tayt, bra


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert data["db"] == "ok"
    assert "timestamp" in data


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    data = resp.get_json()
    assert data["error"] == "Not Found"
    assert data["message"] == "Route GET /api/nope not found"
    assert "timestamp" in data


def test_list_products_envelope(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)

    resp = client.get("/api/products")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["meta"] == {
        "page": 1,
        "limit": 24,
        "total": 3,
        "totalPages": 1,
        "hasMore": False,
    }
    # recommended: featured first
    assert data["items"][0]["slug"] == "sculpt-tayt"

    item = data["items"][0]
    assert item["price"] == 899.9
    assert item["compare_at"] == 1099.9
    assert item["currency"] == "TRY"
    assert item["primaryImage"] == {"url": "https://cdn.test/sculpt-1.jpg"}
    assert sorted(item["variantsSummary"]["sizes"]) == ["M", "S"]
    assert sorted(item["variantsSummary"]["colors"]) == ["Lacivert", "Siyah"]
    assert item["variantsSummary"]["totalStock"] == 10
    assert item["variantsSummary"]["inStock"] is True
    assert item["badges"] == {
        "isNew": True,
        "isSale": True,
        "isLowStock": False,
        "isFeatured": True,
    }
    assert "images" not in item

    facets = data["facets"]
    assert [f["value"] for f in facets["sizes"]] == ["S", "M", "L"]
    assert facets["price"] == {"min": 549, "max": 900}
    assert {c["slug"]: c["count"] for c in facets["collections"]} == {
        "tayt": 2,
        "sporcu-sutyeni": 1,
    }


def test_list_products_low_stock_badge(client, make_product):
    make_product("last-one", variants=[("M", "Siyah", 2)])
    item = client.get("/api/products").get_json()["items"][0]
    assert item["badges"]["isLowStock"] is True
    assert item["badges"]["isSale"] is False
    assert item["primaryImage"] is None


def test_list_products_is_new_badge(client, make_product):
    make_product(
        "old",
        variants=[("M", "Siyah", 10)],
        created_at=datetime.now(timezone.utc) - timedelta(days=60),
    )
    item = client.get("/api/products").get_json()["items"][0]
    assert item["badges"]["isNew"] is False


def test_list_products_collection_scope_omits_collection_facets(
    client, make_collection, make_product
):
    _seed_catalog(make_collection, make_product)
    data = client.get("/api/products?collection=tayt&include=collection,images").get_json()
    assert data["meta"]["total"] == 2
    assert "collections" not in data["facets"]
    assert data["items"][0]["collection"] == {"slug": "tayt", "title": "Tayt"}
    assert len(data["items"][0]["images"]) == 2


def test_unknown_collection_returns_empty_page(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)
    resp = client.get("/api/products?collection=yok-boyle-bir-sey")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["items"] == []
    assert data["meta"]["total"] == 0
    assert data["meta"]["totalPages"] == 0
    assert data["facets"] == {"sizes": [], "colors": [], "price": {"min": 0, "max": 0}}


def test_mismatched_variant_filters_return_empty(client, make_product):
    make_product("tayt", variants=[("M", "Lacivert", 5), ("S", "Siyah", 5)])
    resp = client.get("/api/products?size=M&color=Siyah")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["items"] == []
    assert data["meta"]["total"] == 0
    assert data["facets"]["sizes"] == []
    assert data["facets"]["collections"] == []


def test_facets_cover_all_pages(client, make_product):
    for i in range(5):
        make_product(f"p{i}", price=100 + i * 10, variants=[(["S", "M", "L", "XL", "XS"][i], "Siyah", 5)])

    data = client.get("/api/products?limit=2&sort=price_asc").get_json()
    assert [i["slug"] for i in data["items"]] == ["p0", "p1"]
    assert data["meta"]["hasMore"] is True
    assert data["meta"]["totalPages"] == 3
    assert [f["value"] for f in data["facets"]["sizes"]] == ["XS", "S", "M", "L", "XL"]
    assert data["facets"]["price"] == {"min": 100, "max": 140}


def test_list_products_filters(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)

    data = client.get("/api/products?onSale=true").get_json()
    assert [i["slug"] for i in data["items"]] == ["sculpt-tayt"]

    data = client.get("/api/products?q=tayt&sort=price_asc").get_json()
    assert [i["slug"] for i in data["items"]] == ["flow-tayt", "sculpt-tayt"]

    data = client.get("/api/products?color=Lacivert&inStock=true").get_json()
    assert [i["slug"] for i in data["items"]] == ["core-bra"]

    data = client.get("/api/products?priceMin=600&priceMax=800").get_json()
    assert [i["slug"] for i in data["items"]] == ["flow-tayt"]


def test_invalid_params_fall_back_to_defaults(client, make_product):
    make_product("a")
    resp = client.get("/api/products?page=abc&limit=-5&sort=cheap&inStock=maybe")
    assert resp.status_code == 200
    meta = resp.get_json()["meta"]
    assert meta["page"] == 1
    assert meta["limit"] == 24
    assert meta["total"] == 1


def test_product_detail(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)

    resp = client.get("/api/products/sculpt-tayt")
    assert resp.status_code == 200
    product = resp.get_json()["product"]
    assert product["title"] == "Sculpt Yüksek Bel Tayt"
    assert product["collection"]["slug"] == "tayt"
    assert product["collection"]["description"] == "Yüksek bel taytlar"
    assert [img["url"] for img in product["images"]] == [
        "https://cdn.test/sculpt-1.jpg",
        "https://cdn.test/sculpt-2.jpg",
    ]
    assert len(product["variants"]) == 3
    variant = product["variants"][0]
    assert set(variant) == {"id", "size", "color", "sku", "price", "stock", "isInStock"}
    assert variant["price"] == 899.9


def test_product_detail_without_collection(client, make_product):
    make_product("loose", variants=[("M", "Siyah", 1)])
    product = client.get("/api/products/loose").get_json()["product"]
    assert product["collection"] is None


def test_product_detail_not_found(client, make_product):
    make_product("hidden", is_active=False)
    resp = client.get("/api/products/hidden")
    assert resp.status_code == 404
    data = resp.get_json()
    assert data["error"] == "Not Found"
    assert data["message"] == "Product 'hidden' not found"


def test_facets_endpoint(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)

    data = client.get("/api/facets?collection=tayt").get_json()
    assert [f["value"] for f in data["sizes"]] == ["S", "M", "L"]
    assert data["colors"][0] == {"value": "Siyah", "count": 2}
    assert data["price"] == {"min": 749, "max": 900}
    assert "collections" not in data

    assert client.get("/api/facets?collection=nope").get_json() == {
        "sizes": [],
        "colors": [],
        "price": {"min": 0, "max": 0},
    }


def test_collections(client, make_collection):
    make_collection("tayt", title="Tayt")
    resp = client.get("/api/collections")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["meta"] == {"total": 1}
    assert data["collections"][0]["slug"] == "tayt"

    resp = client.get("/api/collections/tayt")
    assert resp.get_json()["collection"]["title"] == "Tayt"
    assert client.get("/api/collections/nope").status_code == 404


def test_search_suggest_requires_query(client):
    resp = client.get("/api/search/suggest?q=%20")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Bad Request"


def test_search_suggest(client, make_collection, make_product):
    _seed_catalog(make_collection, make_product)
    resp = client.get("/api/search/suggest?q=TAYT")
    assert resp.status_code == 200
    suggestions = resp.get_json()
    assert [s["slug"] for s in suggestions] == ["sculpt-tayt", "flow-tayt"]
    assert suggestions[0] == {
        "slug": "sculpt-tayt",
        "title": "Sculpt Yüksek Bel Tayt",
        "price": 899.9,
        "currency": "TRY",
        "primaryImageUrl": "https://cdn.test/sculpt-1.jpg",
        "collectionSlug": "tayt",
    }

    limited = client.get("/api/search/suggest?q=tayt&limit=1").get_json()
    assert len(limited) == 1


def test_search_top(client, make_product):
    for i in range(5):
        make_product(f"p{i}", is_featured=(i == 4))
    top = client.get("/api/search/top").get_json()
    assert len(top) == 3
    assert top[0]["slug"] == "p4"


def test_cargo(client, db):
    db.session.add(
        Shipment(
            tracking_number="FNL123456",
            carrier="Yurtiçi Kargo",
            status="Yolda",
            events=[{"date": "2026-01-02", "description": "Transfer merkezinde"}],
        )
    )
    db.session.commit()

    assert client.get("/api/cargo/ab").status_code == 400
    assert client.get("/api/cargo/XYZ999").status_code == 404

    resp = client.get("/api/cargo/fnl123456")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["carrier"] == "Yurtiçi Kargo"
    assert data["events"][0]["description"] == "Transfer merkezinde"


def test_cors_header(client, app):
    app.config["CORS_ORIGINS"] = ["https://fitnlitt.com"]
    resp = client.get("/api/health", headers={"Origin": "https://fitnlitt.com"})
    assert resp.headers["Access-Control-Allow-Origin"] == "https://fitnlitt.com"
    resp = client.get("/api/health", headers={"Origin": "https://evil.test"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_health_does_not_leak_internal_errors(client, db, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database password leaked")

    monkeypatch.setattr(db.session, "execute", boom)

    resp = client.get("/api/health")
    assert resp.status_code == 503
    data = resp.get_json()
    assert data["status"] == "degraded"
    assert data["db"] == "error"
    assert "password" not in str(data).lower()
