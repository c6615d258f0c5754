from fitnlitt.models.collection import Collection
from fitnlitt.models.product import Product
from fitnlitt.models.variant import Variant
from fitnlitt.models.image import ProductImage
from fitnlitt.models.customer import Customer
from fitnlitt.models.order import Order, Shipment
from fitnlitt.models.audit_log import AuditLog

__all__ = [
    "Collection",
    "Product",
    "Variant",
    "ProductImage",
    "Customer",
    "Order",
    "Shipment",
    "AuditLog",
]
