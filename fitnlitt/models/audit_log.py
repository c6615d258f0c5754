from fitnlitt.extensions import db
from fitnlitt.models.base import utcnow


class AuditLog(db.Model):
    __tablename__ = "audit_log"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.String(36), nullable=False, index=True)  # Supabase user id
    action = db.Column(db.String(50), nullable=False)
    entity = db.Column(db.String(30), nullable=False)
    entity_id = db.Column(db.String(36), index=True)
    payload = db.Column(db.JSON)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, index=True)

    ACTIONS = {
        "CREATE_PRODUCT",
        "UPDATE_PRODUCT",
        "DELETE_PRODUCT",
        "CREATE_COLLECTION",
        "UPDATE_COLLECTION",
        "DELETE_COLLECTION",
        "UPDATE_ORDER",
        "UPLOAD_IMAGE",
        "DELETE_IMAGE",
    }

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity}:{self.entity_id} by {self.admin_id}>"
