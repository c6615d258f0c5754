from datetime import datetime, timezone
from sqlalchemy import or_
from fitnlitt.extensions import db
from fitnlitt.models.customer import Customer
from fitnlitt.models.order import Order, Shipment
from fitnlitt.services import audit_service


def _page(query, page, limit):
    return query.offset((page - 1) * limit).limit(limit).all()


def list_orders(status=None, search=None, page=1, limit=20):
    query = Order.query
    if status and status != "all":
        query = query.filter(Order.status == status)
    if search:
        query = query.filter(
            or_(
                Order.order_number.icontains(search, autoescape=True),
                Order.customer_email.icontains(search, autoescape=True),
                Order.customer_name.icontains(search, autoescape=True),
            )
        )
    total = query.count()
    orders = _page(query.order_by(Order.created_at.desc(), Order.id.asc()), page, limit)
    return {
        "orders": [o.to_dict() for o in orders],
        "total": total,
        "page": page,
        "limit": limit,
    }


def get_order(order_id):
    return db.session.get(Order, order_id)


def update_order(order_id, data, admin_id):
    """Update status, tracking number and notes.

    Raises ValueError for an unknown status; returns None when missing.
    """
    status = data.get("status")
    if status and status not in Order.STATUSES:
        raise ValueError("Geçersiz sipariş durumu.")

    order = db.session.get(Order, order_id)
    if not order:
        return None

    changes = {}
    if status:
        changes["status"] = status
    if "tracking_number" in data:
        changes["tracking_number"] = data["tracking_number"]
    if "notes" in data:
        changes["notes"] = data["notes"]

    for key, value in changes.items():
        setattr(order, key, value)
    order.updated_at = datetime.now(timezone.utc)

    audit_service.record(admin_id, "UPDATE_ORDER", "order", order.id, changes)
    db.session.commit()
    return order


def list_customers(search=None, page=1, limit=20):
    query = Customer.query
    if search:
        query = query.filter(
            or_(
                Customer.email.icontains(search, autoescape=True),
                Customer.first_name.icontains(search, autoescape=True),
                Customer.last_name.icontains(search, autoescape=True),
            )
        )
    total = query.count()
    customers = _page(
        query.order_by(Customer.created_at.desc(), Customer.id.asc()), page, limit
    )
    return {
        "customers": [c.to_dict() for c in customers],
        "total": total,
        "page": page,
        "limit": limit,
    }


def get_customer_with_orders(customer_id):
    customer = db.session.get(Customer, customer_id)
    if not customer:
        return None
    orders = (
        Order.query.filter_by(customer_id=customer.id)
        .order_by(Order.created_at.desc())
        .all()
    )
    data = customer.to_dict()
    data["orders"] = [o.to_dict() for o in orders]
    return data


def get_shipment(tracking_number):
    return Shipment.query.filter_by(
        tracking_number=tracking_number.strip().upper()
    ).first()
