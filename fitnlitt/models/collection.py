from fitnlitt.extensions import db
from fitnlitt.models.base import new_id, utcnow


class Collection(db.Model):
    __tablename__ = "collections"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    hero_image = db.Column(db.String(1024))
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    products = db.relationship("Product", back_populates="collection", lazy="select")

    def to_dict(self):
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "hero_image": self.hero_image,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Collection {self.slug}>"
