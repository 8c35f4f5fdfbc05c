import logging
import os


class Config:
    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./equipment_schedule.db")

    # App Settings
    APP_NAME = "ASM Equipment Schedule"
    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:8501")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Calendar range used until an admin saves one
    DEFAULT_START_HOUR = 6
    DEFAULT_END_HOUR = 18

    # Seed account created by scripts/init_db.py
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")


def configure_logging(level=None):
    level_name = (level or Config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
