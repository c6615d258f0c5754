import pytest
from fitnlitt import create_app
from fitnlitt.extensions import db as _db
from fitnlitt.models.collection import Collection
from fitnlitt.models.image import ProductImage
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant

ADMIN_TOKEN = "valid-admin-token"
ADMIN_USER = {"id": "5f0c1d2e-0000-4000-8000-000000000001", "email": "admin@fitnlitt.com"}


class FakeAuthClient:
    """Stands in for Supabase Auth: one known token, everything else rejected."""

    def __init__(self, users=None):
        self.users = users if users is not None else {ADMIN_TOKEN: ADMIN_USER}
        self.calls = []

    def get_user(self, token):
        self.calls.append(token)
        return self.users.get(token)


@pytest.fixture
def auth_client():
    return FakeAuthClient()


@pytest.fixture
def app(auth_client):
    """Create application for testing with a fresh in-memory database."""
    app = create_app("testing", auth_client=auth_client)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def make_collection(db):
    def _make(slug, title=None, **kwargs):
        collection = Collection(slug=slug, title=title or slug.title(), **kwargs)
        db.session.add(collection)
        db.session.commit()
        return collection

    return _make


@pytest.fixture
def make_product(db):
    """Create a product with ``variants`` given as (size, color, stock) tuples."""

    def _make(slug, price=100.0, variants=(), images=(), **kwargs):
        title = kwargs.pop("title", slug.replace("-", " ").title())
        product = Product(slug=slug, title=title, price=price, **kwargs)
        db.session.add(product)
        db.session.flush()
        for size, color, stock in variants:
            db.session.add(
                Variant(
                    product_id=product.id,
                    size=size,
                    color=color,
                    sku=f"{slug}-{size}-{color}".lower(),
                    stock=stock,
                )
            )
        for index, url in enumerate(images):
            db.session.add(ProductImage(product_id=product.id, url=url, sort=index))
        db.session.commit()
        return product

    return _make
