from datetime import datetime, timezone
from fitnlitt.extensions import db
from fitnlitt.models.base import new_id, utcnow


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Numeric(10, 2, asdecimal=False), nullable=False)
    compare_at = db.Column(db.Numeric(10, 2, asdecimal=False))
    currency = db.Column(db.String(3), nullable=False, default="TRY")
    collection_id = db.Column(
        db.String(36),
        db.ForeignKey("collections.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    collection = db.relationship("Collection", back_populates="products")
    variants = db.relationship(
        "Variant",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
    )
    images = db.relationship(
        "ProductImage",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="ProductImage.sort",
    )

    __table_args__ = (
        db.CheckConstraint(
            "compare_at IS NULL OR compare_at > price", name="ck_products_compare_at"
        ),
    )

    NEW_PRODUCT_DAYS = 21
    LOW_STOCK_THRESHOLD = 3

    @property
    def is_on_sale(self):
        return self.compare_at is not None and self.compare_at > self.price

    @property
    def total_stock(self):
        return sum(v.stock or 0 for v in self.variants)

    @property
    def is_new(self):
        if not self.created_at:
            return False
        created_at = self.created_at
        if created_at.tzinfo is None:
            # SQLite drops tzinfo on the way back
            created_at = created_at.replace(tzinfo=timezone.utc)
        age = datetime.now(timezone.utc) - created_at
        return age.total_seconds() <= self.NEW_PRODUCT_DAYS * 86400

    @property
    def primary_image(self):
        return self.images[0] if self.images else None

    def badges(self):
        return {
            "isNew": self.is_new,
            "isSale": self.is_on_sale,
            "isLowStock": self.total_stock <= self.LOW_STOCK_THRESHOLD,
            "isFeatured": bool(self.is_featured),
        }

    def to_dict(self):
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "compare_at": self.compare_at,
            "currency": self.currency,
            "collection_id": self.collection_id,
            "is_active": self.is_active,
            "is_featured": self.is_featured,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Product {self.slug}: {self.title}>"
