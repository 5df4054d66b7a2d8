from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.service_provider import ServiceProvider
from marketplace.utils.clock import isoformat
from marketplace.utils.errors import DependencyFailure, InvalidRequest, NotFound


_HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)


def sanitize_text(text: str | None) -> str | None:
    """HTML-escapes free text before storing it."""
    if not text:
        return None
    out = text
    for raw, escaped in _HTML_ESCAPES:
        out = out.replace(raw, escaped)
    return out


def provider_to_dict(p: ServiceProvider) -> dict:
    return {
        "id": p.id,
        "user_id": p.user_id,
        "business_name": p.business_name,
        "description": p.description,
        "address": p.address,
        "zip_code": p.zip_code,
        "phone": p.phone,
        "is_active": bool(p.is_active),
        "rating": float(p.rating) if p.rating is not None else 0.0,
        "total_reviews": int(p.total_reviews or 0),
        "created_at": isoformat(p.created_at),
    }


def register_provider(data: dict, user_id: str) -> dict:
    existing = ServiceProvider.query.filter_by(user_id=str(user_id)).first()
    if existing is not None:
        raise InvalidRequest("Service provider profile already exists for this user")

    provider = ServiceProvider(
        user_id=str(user_id),
        business_name=sanitize_text(data["business_name"]),
        description=sanitize_text(data.get("description")),
        address=sanitize_text(data["address"]),
        zip_code=data["zip_code"].upper(),
        phone=data.get("phone") or None,
    )
    db.session.add(provider)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise InvalidRequest("Service provider profile already exists for this user")
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[providers] failed to register user=%s", user_id)
        raise DependencyFailure("Failed to create service provider profile")

    current_app.logger.info("[providers] registered provider=%s user=%s", provider.id, user_id)
    return provider_to_dict(provider)


def get_provider_for_user(user_id: str) -> dict:
    provider = ServiceProvider.query.filter_by(user_id=str(user_id)).first()
    if provider is None:
        raise NotFound("Service provider profile not found")
    return provider_to_dict(provider)
