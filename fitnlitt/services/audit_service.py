from fitnlitt.extensions import db
from fitnlitt.models.audit_log import AuditLog


def record(admin_id, action, entity, entity_id=None, payload=None):
    """Stage an audit row in the current session; the caller commits."""
    entry = AuditLog(
        admin_id=str(admin_id),
        action=action,
        entity=entity,
        entity_id=entity_id,
        payload=payload,
    )
    db.session.add(entry)
    return entry
