"""Tests for Flask CLI commands."""
from unittest.mock import patch
from fitnlitt.models.product import Product
from fitnlitt.services.import_service import StoreApiUnavailable


def test_seed_demo_is_idempotent(app, db):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["seed-demo"])
    assert result.exit_code == 0
    assert "Seeded 5 demo products." in result.output
    assert Product.query.count() == 5

    result = runner.invoke(args=["seed-demo"])
    assert "skipping" in result.output
    assert Product.query.count() == 5


def test_feature_clothing(app, db, make_product):
    make_product("tayt", variants=[("M", "Siyah", 1)])
    make_product("matara", variants=[("750ml", "Siyah", 1)])

    result = app.test_cli_runner().invoke(args=["feature-clothing"])
    assert result.exit_code == 0
    assert "Updated 1 products to is_featured=true" in result.output
    assert Product.query.filter_by(slug="tayt").one().is_featured is True
    assert Product.query.filter_by(slug="matara").one().is_featured is False


def test_stats(app, db, make_product):
    make_product("a", price=100, compare_at=150)
    make_product("b", is_active=False, is_featured=True)

    result = app.test_cli_runner().invoke(args=["stats"])
    assert result.exit_code == 0
    assert "Total products: 2" in result.output
    assert "on_sale: 1" in result.output
    assert "featured: 1" in result.output


def test_import_store_reports_unavailable_api(app, db):
    error = StoreApiUnavailable(
        "HTTP 404", status=404, url="https://store.test/wp-json/wc/store/v1/products"
    )
    with patch("fitnlitt.services.import_service.import_store", side_effect=error):
        result = app.test_cli_runner().invoke(args=["import-store", "--dry-run"])
    assert result.exit_code == 1
    assert "returned 404" in result.output


def test_import_store_summary(app, db):
    stats = {"imported": 3, "failed": 1, "collections": 2}
    with patch("fitnlitt.services.import_service.import_store", return_value=stats) as mock_import:
        result = app.test_cli_runner().invoke(
            args=["import-store", "--limit", "4", "--skip-images"]
        )
    assert result.exit_code == 0
    assert "Done: 3 imported, 1 failed, 2 collections" in result.output
    assert mock_import.call_args.kwargs["limit"] == 4
    assert mock_import.call_args.kwargs["skip_images"] is True
    assert mock_import.call_args.kwargs["store_base"] == "https://store.test"
