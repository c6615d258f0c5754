from fitnlitt.extensions import db
from fitnlitt.models.base import new_id


class Variant(db.Model):
    __tablename__ = "variants"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size = db.Column(db.String(50), nullable=False, index=True)  # "M", "One Size"
    color = db.Column(db.String(100), nullable=False, index=True)  # "Siyah"
    sku = db.Column(db.String(255), unique=True, nullable=False)
    price_override = db.Column(db.Numeric(10, 2, asdecimal=False))
    stock = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.CheckConstraint("stock >= 0", name="ck_variants_stock"),
    )

    @property
    def is_in_stock(self):
        return (self.stock or 0) > 0

    def effective_price(self, product_price):
        return self.price_override if self.price_override else product_price

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "size": self.size,
            "color": self.color,
            "sku": self.sku,
            "price_override": self.price_override,
            "stock": self.stock,
        }

    def __repr__(self):
        return f"<Variant {self.sku}: {self.size}/{self.color}>"
