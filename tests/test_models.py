"""Tests for database models."""
from datetime import datetime, timedelta, timezone
import pytest
from sqlalchemy.exc import IntegrityError
from fitnlitt.models.audit_log import AuditLog
from fitnlitt.models.collection import Collection
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant


def test_product_creation(db):
    p = Product(slug="sculpt-tayt", title="Sculpt Tayt", price=899.9)
    db.session.add(p)
    db.session.flush()

    assert p.id is not None
    assert len(p.id) == 36
    assert p.currency == "TRY"
    assert p.is_active is True
    assert p.is_featured is False


def test_product_sale(db):
    p = Product(slug="a", title="A", price=100, compare_at=150)
    assert p.is_on_sale
    p.compare_at = None
    assert not p.is_on_sale


def test_compare_at_must_exceed_price(db):
    db.session.add(Product(slug="a", title="A", price=100, compare_at=80))
    with pytest.raises(IntegrityError):
        db.session.flush()
    db.session.rollback()


def test_product_is_new(db):
    now = datetime.now(timezone.utc)
    assert Product(slug="a", title="A", price=1, created_at=now - timedelta(days=20)).is_new
    assert not Product(slug="b", title="B", price=1, created_at=now - timedelta(days=22)).is_new
    # naive timestamps are read as UTC
    naive = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=1)
    assert Product(slug="c", title="C", price=1, created_at=naive).is_new


def test_badges(db, make_product):
    p = make_product("a", price=100, compare_at=120, is_featured=True, variants=[("M", "Siyah", 3)])
    assert p.badges() == {
        "isNew": True,
        "isSale": True,
        "isLowStock": True,
        "isFeatured": True,
    }
    assert p.total_stock == 3


def test_product_without_variants_is_low_stock(db, make_product):
    assert make_product("a").badges()["isLowStock"] is True


def test_variant_price_and_stock(db, make_product):
    p = make_product("a", price=100)
    v = Variant(product_id=p.id, size="M", color="Siyah", sku="a-m", stock=0)
    db.session.add(v)
    db.session.flush()

    assert not v.is_in_stock
    assert v.effective_price(p.price) == 100
    v.price_override = 80
    assert v.effective_price(p.price) == 80


def test_variant_sku_unique(db, make_product):
    p = make_product("a", variants=[("M", "Siyah", 1)])
    db.session.add(Variant(product_id=p.id, size="M", color="Siyah", sku="a-m-siyah", stock=1))
    with pytest.raises(IntegrityError):
        db.session.flush()
    db.session.rollback()


def test_images_ordered_by_sort(db, make_product):
    p = make_product("a", images=["https://cdn.test/0.jpg", "https://cdn.test/1.jpg"])
    assert [img.url for img in p.images] == ["https://cdn.test/0.jpg", "https://cdn.test/1.jpg"]
    assert p.primary_image.url == "https://cdn.test/0.jpg"


def test_collection_relationship(db, make_collection, make_product):
    c = make_collection("tayt", title="Tayt")
    make_product("a", collection_id=c.id)
    db.session.refresh(c)
    assert [p.slug for p in c.products] == ["a"]
    assert db.session.get(Collection, c.id).to_dict()["slug"] == "tayt"


def test_audit_log(db):
    entry = AuditLog(
        admin_id="5f0c1d2e-0000-4000-8000-000000000001",
        action="CREATE_PRODUCT",
        entity="product",
        entity_id="p-1",
        payload={"slug": "a"},
    )
    db.session.add(entry)
    db.session.flush()
    assert entry.id is not None
    assert entry.action in AuditLog.ACTIONS
