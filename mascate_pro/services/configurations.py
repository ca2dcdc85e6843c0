"""
Key/value business settings stored as JSON documents.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from mascate_pro.core.database import utcnow
from mascate_pro.core.exceptions import NotFoundError, ValidationError
from mascate_pro.core.permissions import Actor
from mascate_pro.models.configuration import Configuration
from mascate_pro.services import activity_logger

DEFAULT_CONFIGURATIONS = {
    "business_rules": {
        "value": {
            "low_stock_alert": True,
            "allow_negative_stock": False,
            "default_minimum_stock": 5,
        },
        "description": "Regras de negócio do estoque",
    },
    "backup_config": {
        "value": {
            "auto_backup": False,
            "backup_frequency": "daily",
            "retention_days": 30,
        },
        "description": "Configurações de backup",
    },
}


def list_configurations(db: Session) -> List[Configuration]:
    return db.query(Configuration).order_by(Configuration.key.asc()).all()


def get_configuration(db: Session, key: str) -> Configuration:
    config = db.query(Configuration).filter(Configuration.key == key).first()
    if not config:
        raise NotFoundError(f"Configuration '{key}' not found")
    return config


def set_configuration(
    db: Session,
    key: str,
    value: dict,
    actor: Actor,
    description: Optional[str] = None,
) -> Configuration:
    """Create the key or replace its value."""
    if not key or not key.strip():
        raise ValidationError("Configuration key is required")
    if not isinstance(value, dict):
        raise ValidationError("Configuration value must be a JSON object")

    config = db.query(Configuration).filter(Configuration.key == key).first()
    try:
        if config is None:
            config = Configuration(key=key, value=value, description=description, created_by=actor.id)
            db.add(config)
        else:
            config.value = value
            if description is not None:
                config.description = description
            config.updated_at = utcnow()
        activity_logger.add_entry(
            db, actor.id, "CONFIG_UPDATED", f"Configuração {key} atualizada",
            actor.ip_address, actor.user_agent,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(config)
    return config


def seed_defaults(db: Session) -> int:
    """Insert the default keys that are missing; existing values are left alone."""
    created = 0
    for key, entry in DEFAULT_CONFIGURATIONS.items():
        if db.query(Configuration.id).filter(Configuration.key == key).first() is None:
            db.add(Configuration(key=key, value=dict(entry["value"]), description=entry["description"]))
            created += 1
    db.commit()
    return created
