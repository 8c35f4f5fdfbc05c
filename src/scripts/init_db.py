import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.auth import ensure_profile, get_password_hash
from core.config import Config, configure_logging
from core.crud import create_auth_user, get_auth_user_by_email, init_settings
from core.database import engine, Base, SessionLocal
from core.models import Role
import core.models  # noqa: F401  registers the tables on Base

logger = logging.getLogger("init_db")


def init_db(bind=None, session_factory=None):
    bind = bind or engine
    session_factory = session_factory or SessionLocal

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created successfully.")

    db = session_factory()
    try:
        # Initialize Settings
        init_settings(db)

        # Check if admin exists
        admin = get_auth_user_by_email(db, Config.ADMIN_EMAIL)
        if not admin:
            logger.info("Creating admin %s...", Config.ADMIN_EMAIL)
            admin = create_auth_user(db, Config.ADMIN_EMAIL, get_password_hash(Config.ADMIN_PASSWORD))
        ensure_profile(db, admin.id, full_name="Administrator", requested_role=Role.ADMIN)
    finally:
        db.close()
    logger.info("Database initialization complete.")


if __name__ == "__main__":
    configure_logging()
    init_db()
