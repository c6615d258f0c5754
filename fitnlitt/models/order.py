from fitnlitt.extensions import db
from fitnlitt.models.base import new_id, utcnow


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    order_number = db.Column(db.String(50), unique=True, nullable=False)
    customer_id = db.Column(
        db.String(36),
        db.ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    customer_email = db.Column(db.String(255))
    customer_name = db.Column(db.String(255))
    status = db.Column(db.String(30), nullable=False, default="Beklemede", index=True)
    tracking_number = db.Column(db.String(100))
    notes = db.Column(db.Text)
    items = db.Column(db.JSON, default=list)
    subtotal = db.Column(db.Numeric(10, 2, asdecimal=False), default=0)
    shipping_total = db.Column(db.Numeric(10, 2, asdecimal=False), default=0)
    total = db.Column(db.Numeric(10, 2, asdecimal=False), default=0)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    STATUSES = (
        "Beklemede",
        "İşleniyor",
        "Kargoya Verildi",
        "Teslim Edildi",
        "İptal Edildi",
        "İade",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "order_number": self.order_number,
            "customer_id": self.customer_id,
            "customer_email": self.customer_email,
            "customer_name": self.customer_name,
            "status": self.status,
            "tracking_number": self.tracking_number,
            "notes": self.notes,
            "items": self.items or [],
            "subtotal": self.subtotal,
            "shipping_total": self.shipping_total,
            "total": self.total,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Order {self.order_number} [{self.status}]>"


class Shipment(db.Model):
    __tablename__ = "shipments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    tracking_number = db.Column(db.String(100), unique=True, nullable=False, index=True)
    order_id = db.Column(
        db.String(36),
        db.ForeignKey("orders.id", ondelete="SET NULL"),
        nullable=True,
    )
    carrier = db.Column(db.String(100))
    status = db.Column(db.String(50))
    events = db.Column(db.JSON, default=list)  # [{"date": ..., "description": ...}]
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    def to_dict(self):
        return {
            "id": self.id,
            "tracking_number": self.tracking_number,
            "order_id": self.order_id,
            "carrier": self.carrier,
            "status": self.status,
            "events": self.events or [],
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Shipment {self.tracking_number}>"
