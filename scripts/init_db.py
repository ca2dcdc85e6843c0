"""Initialize database: tables, default configurations and the first superadmin

The superadmin is only created when INITIAL_ADMIN_EMAIL and
INITIAL_ADMIN_PASSWORD are set in the environment (or .env) and no
superadmin exists yet.

Usage:
  INITIAL_ADMIN_EMAIL=owner@example.com INITIAL_ADMIN_PASSWORD=... python scripts/init_db.py
"""
import sys
from pathlib import Path

# Add parent directory to path
project_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_dir))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(dotenv_path=project_dir / ".env")

from mascate_pro.core.config import settings
from mascate_pro.core.database import Database
from mascate_pro.core.logging_config import setup_logging, get_logger
from mascate_pro.core.permissions import Role
from mascate_pro.core.security import get_password_hash
from mascate_pro.models.user import User
from mascate_pro.services.configurations import seed_defaults

logger = get_logger("scripts.init_db")


def create_initial_admin(db) -> bool:
    if not settings.INITIAL_ADMIN_EMAIL or not settings.INITIAL_ADMIN_PASSWORD:
        logger.info("INITIAL_ADMIN_EMAIL/INITIAL_ADMIN_PASSWORD not set, skipping superadmin")
        return False

    if db.query(User.id).filter(User.role == Role.SUPERADMIN.value).first():
        logger.info("A superadmin already exists, skipping")
        return False

    email = settings.INITIAL_ADMIN_EMAIL.strip().lower()
    if db.query(User.id).filter(User.email == email).first():
        logger.warning(f"User {email} exists but is not a superadmin; leaving it unchanged")
        return False

    db.add(User(
        email=email,
        display_name="Administrador",
        role=Role.SUPERADMIN.value,
        active=True,
        password_hash=get_password_hash(settings.INITIAL_ADMIN_PASSWORD),
    ))
    db.commit()
    logger.info(f"Superadmin {email} created")
    return True


def init_db(database: Database) -> None:
    """Create tables, default configurations and the first superadmin"""
    database.create_all()

    with database.session() as db:
        try:
            created = seed_defaults(db)
            logger.info(f"Seeded {created} default configuration(s)")
            create_initial_admin(db)
        except Exception:
            db.rollback()
            raise

    logger.info("Database initialized successfully")


if __name__ == "__main__":
    setup_logging()
    database = Database.from_settings(settings)
    try:
        init_db(database)
    finally:
        database.dispose()
