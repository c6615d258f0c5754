from fitnlitt.extensions import db
from fitnlitt.models.base import new_id


class ProductImage(db.Model):
    __tablename__ = "product_images"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = db.Column(db.String(1024), nullable=False)
    sort = db.Column(db.Integer, nullable=False, default=0)  # display order

    def to_dict(self):
        return {"url": self.url, "sort": self.sort}

    def __repr__(self):
        return f"<ProductImage {self.product_id} #{self.sort}>"
