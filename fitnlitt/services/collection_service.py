from datetime import datetime, timezone
from fitnlitt.extensions import db
from fitnlitt.models.collection import Collection
from fitnlitt.models.product import Product
from fitnlitt.services import audit_service


def list_collections():
    """All collections, newest first."""
    return Collection.query.order_by(Collection.created_at.desc()).all()


def get_collection_by_slug(slug):
    return Collection.query.filter_by(slug=slug).first()


def get_collection(collection_id):
    return db.session.get(Collection, collection_id)


def list_collections_with_counts():
    rows = (
        db.session.query(Collection, db.func.count(Product.id))
        .outerjoin(Product, Product.collection_id == Collection.id)
        .group_by(Collection.id)
        .order_by(Collection.title)
        .all()
    )
    result = []
    for collection, count in rows:
        data = collection.to_dict()
        data["product_count"] = count
        result.append(data)
    return result


def create_collection(data, admin_id):
    title = (data.get("title") or "").strip()
    slug = (data.get("slug") or "").strip()
    if not title or not slug:
        raise ValueError("Title and slug are required")
    if Collection.query.filter_by(slug=slug).first():
        raise ValueError("Collection with this slug already exists")

    collection = Collection(
        title=title,
        slug=slug,
        description=data.get("description") or "",
        hero_image=data.get("hero_image") or None,
    )
    db.session.add(collection)
    db.session.flush()
    audit_service.record(
        admin_id, "CREATE_COLLECTION", "collection", collection.id, {"slug": slug}
    )
    db.session.commit()
    return collection


def update_collection(collection_id, data, admin_id):
    collection = db.session.get(Collection, collection_id)
    if not collection:
        return None

    if "slug" in data:
        slug = (data["slug"] or "").strip()
        if not slug:
            raise ValueError("Slug must not be empty")
        clash = Collection.query.filter(
            Collection.slug == slug, Collection.id != collection.id
        ).first()
        if clash:
            raise ValueError("Collection with this slug already exists")
        collection.slug = slug
    if "title" in data:
        title = (data["title"] or "").strip()
        if not title:
            raise ValueError("Title must not be empty")
        collection.title = title
    if "description" in data:
        collection.description = data["description"] or ""
    if "hero_image" in data:
        collection.hero_image = data["hero_image"] or None
    collection.updated_at = datetime.now(timezone.utc)

    audit_service.record(admin_id, "UPDATE_COLLECTION", "collection", collection.id)
    db.session.commit()
    return collection


def delete_collection(collection_id, admin_id):
    """Delete an empty collection.

    Returns False when missing; raises ValueError while products still
    reference it.
    """
    collection = db.session.get(Collection, collection_id)
    if not collection:
        return False
    if Product.query.filter_by(collection_id=collection.id).first():
        raise ValueError("Cannot delete collection with associated products")

    audit_service.record(
        admin_id, "DELETE_COLLECTION", "collection", collection.id, {"slug": collection.slug}
    )
    db.session.delete(collection)
    db.session.commit()
    return True
