"""Tests for facet computation."""
from fitnlitt.services.facet_service import (
    compute_collection_facets,
    compute_color_facets,
    compute_facets,
    compute_price_range,
    compute_size_facets,
    empty_facets,
    size_sort_key,
)


def test_size_facets_canonical_order_then_alphabetical(db, make_product):
    make_product(
        "a",
        variants=[
            ("XL", "Siyah", 1),
            ("One Size", "Siyah", 1),
            ("M", "Siyah", 1),
            ("36", "Siyah", 1),
            ("XS", "Siyah", 1),
        ],
    )
    make_product("b", variants=[("M", "Beyaz", 1), ("XXL", "Beyaz", 1), ("S/M", "Beyaz", 1)])

    sizes = compute_size_facets()
    assert [f["value"] for f in sizes] == ["XS", "M", "XL", "XXL", "36", "One Size", "S/M"]
    assert {f["value"]: f["count"] for f in sizes}["M"] == 2


def test_size_sort_key():
    values = ["L", "Z", "XS", "A", "XXL", "S"]
    assert sorted(values, key=size_sort_key) == ["XS", "S", "L", "XXL", "A", "Z"]


def test_color_facets_by_count_desc(db, make_product):
    make_product("a", variants=[("S", "Siyah", 1), ("M", "Siyah", 1), ("L", "Bordo", 1)])
    make_product("b", variants=[("S", "Siyah", 1), ("S", "Gri", 1), ("M", "Gri", 1)])

    assert compute_color_facets() == [
        {"value": "Siyah", "count": 3},
        {"value": "Gri", "count": 2},
        {"value": "Bordo", "count": 1},
    ]


def test_facets_restricted_to_candidates(db, make_product):
    a = make_product("a", price=99.5, variants=[("S", "Siyah", 1)])
    make_product("b", price=400, variants=[("XL", "Gri", 1)])

    assert compute_size_facets([a.id]) == [{"value": "S", "count": 1}]
    assert compute_color_facets([a.id]) == [{"value": "Siyah", "count": 1}]
    assert compute_price_range([a.id]) == {"min": 99, "max": 100}


def test_inactive_products_do_not_count(db, make_product):
    make_product("a", price=10, variants=[("S", "Siyah", 1)])
    make_product("hidden", price=1000, is_active=False, variants=[("XL", "Gri", 1)])

    assert compute_size_facets() == [{"value": "S", "count": 1}]
    assert compute_price_range() == {"min": 10, "max": 10}


def test_price_range_floor_and_ceil(db, make_product):
    make_product("a", price=129.9)
    make_product("b", price=349.1)
    assert compute_price_range() == {"min": 129, "max": 350}


def test_price_range_without_products(db):
    assert compute_price_range() == {"min": 0, "max": 0}


def test_collection_facets(db, make_product, make_collection):
    tayt = make_collection("tayt", title="Tayt")
    sort = make_collection("sort", title="Şort")
    make_product("a", collection_id=tayt.id)
    make_product("b", collection_id=tayt.id)
    make_product("c", collection_id=sort.id)
    make_product("d")

    assert compute_collection_facets() == [
        {"slug": "tayt", "title": "Tayt", "count": 2},
        {"slug": "sort", "title": "Şort", "count": 1},
    ]


def test_empty_candidate_list_means_empty_set(db, make_product):
    make_product("a", variants=[("S", "Siyah", 1)])
    assert compute_facets([]) == empty_facets()
    assert compute_facets([], include_collections=False) == {
        "sizes": [],
        "colors": [],
        "price": {"min": 0, "max": 0},
    }


def test_compute_facets_can_omit_collections(db, make_product):
    a = make_product("a", price=50, variants=[("M", "Siyah", 1)])
    facets = compute_facets([a.id], include_collections=False)
    assert "collections" not in facets
    assert facets["sizes"] == [{"value": "M", "count": 1}]
    assert facets["price"] == {"min": 50, "max": 50}
