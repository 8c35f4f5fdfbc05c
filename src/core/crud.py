import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from core.config import Config
from core.errors import StoreError, ValidationError
from core.hours import ScheduleSettings, is_valid_range
from core.models import (
    AuthUser, Equipment, Location, Role, ScheduleEntry, SettingEntry, UserProfile,
    KEY_END_HOUR, KEY_START_HOUR
)

logger = logging.getLogger(__name__)


@contextmanager
def _write(db: Session, what: str):
    """
    Scope of one write: every statement run inside, the commit and any
    refresh. A database failure anywhere rolls back and becomes a StoreError.
    """
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("%s rejected by the store: %s", what, exc)
        raise StoreError(f"{what} failed") from exc


def _refresh(db: Session, obj, what: str):
    try:
        db.refresh(obj)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("%s: reloading the saved row failed: %s", what, exc)
        raise StoreError(f"{what} failed") from exc
    return obj


# --- Equipment ---
def get_all_equipment(db: Session) -> List[Equipment]:
    return db.query(Equipment).order_by(Equipment.name).all()


def create_equipment(db: Session, name, type, equipment_id, description=None):
    with _write(db, "Create equipment"):
        item = Equipment(
            name=name,
            type=type,
            equipment_id=equipment_id,
            description=description or None
        )
        db.add(item)
    return _refresh(db, item, "Create equipment")


def delete_equipment(db: Session, item_id: str):
    with _write(db, "Delete equipment"):
        db.query(Equipment).filter(Equipment.id == item_id).delete()


# --- Locations ---
def get_all_locations(db: Session) -> List[Location]:
    return db.query(Location).order_by(Location.job_name).all()


def create_location(db: Session, job_name, address):
    with _write(db, "Create location"):
        location = Location(job_name=job_name, address=address)
        db.add(location)
    return _refresh(db, location, "Create location")


def delete_location(db: Session, location_id: str):
    with _write(db, "Delete location"):
        db.query(Location).filter(Location.id == location_id).delete()


# --- Schedule Entries ---
def get_schedule_entries(db: Session) -> List[ScheduleEntry]:
    return (
        db.query(ScheduleEntry)
        .options(joinedload(ScheduleEntry.equipment), joinedload(ScheduleEntry.location))
        .order_by(ScheduleEntry.day_of_week, ScheduleEntry.start_hour)
        .all()
    )


def create_schedule_entry(db: Session, equipment_id, location_id, day_of_week, start_hour, end_hour, notes=None):
    # Overlaps and inverted ranges are accepted as written
    with _write(db, "Create schedule entry"):
        entry = ScheduleEntry(
            equipment_id=equipment_id,
            location_id=location_id,
            day_of_week=int(day_of_week),
            start_hour=int(start_hour),
            end_hour=int(end_hour),
            notes=notes or None
        )
        db.add(entry)
    return _refresh(db, entry, "Create schedule entry")


def delete_schedule_entry(db: Session, entry_id: str):
    with _write(db, "Delete schedule entry"):
        db.query(ScheduleEntry).filter(ScheduleEntry.id == entry_id).delete()


# --- Settings ---
def get_setting(db: Session, key: str, default: str = ""):
    setting = db.query(SettingEntry).filter(SettingEntry.setting_key == key).first()
    if setting:
        return setting.setting_value
    return default


def _put_setting(db: Session, key: str, value: str):
    setting = db.query(SettingEntry).filter(SettingEntry.setting_key == key).first()
    if setting:
        setting.setting_value = value
    else:
        db.add(SettingEntry(setting_key=key, setting_value=value))


def set_setting(db: Session, key: str, value: str):
    with _write(db, f"Update setting {key}"):
        _put_setting(db, key, value)


def _int_setting(db: Session, key: str, default: int) -> int:
    try:
        return int(get_setting(db, key))
    except (TypeError, ValueError):
        return default


def get_schedule_settings(db: Session) -> ScheduleSettings:
    return ScheduleSettings(
        start_hour=_int_setting(db, KEY_START_HOUR, Config.DEFAULT_START_HOUR),
        end_hour=_int_setting(db, KEY_END_HOUR, Config.DEFAULT_END_HOUR),
    )


def update_schedule_settings(db: Session, start_hour: int, end_hour: int) -> ScheduleSettings:
    if not is_valid_range(start_hour, end_hour):
        raise ValidationError(
            f"Invalid hour range {start_hour}-{end_hour}: need 0 <= start < end <= 23",
            fields=("start_hour", "end_hour")
        )
    with _write(db, "Update settings"):
        _put_setting(db, KEY_START_HOUR, str(start_hour))
        _put_setting(db, KEY_END_HOUR, str(end_hour))
    return ScheduleSettings(start_hour=start_hour, end_hour=end_hour)


def init_settings(db: Session):
    # Set defaults if not exist
    if not get_setting(db, KEY_START_HOUR):
        set_setting(db, KEY_START_HOUR, str(Config.DEFAULT_START_HOUR))
    if not get_setting(db, KEY_END_HOUR):
        set_setting(db, KEY_END_HOUR, str(Config.DEFAULT_END_HOUR))


# --- Users ---
def get_auth_user_by_email(db: Session, email: str) -> Optional[AuthUser]:
    return db.query(AuthUser).filter(AuthUser.email == email).first()


def get_auth_user(db: Session, user_id: str) -> Optional[AuthUser]:
    return db.query(AuthUser).filter(AuthUser.id == user_id).first()


def create_auth_user(db: Session, email: str, password_hash: str) -> AuthUser:
    with _write(db, "Create user"):
        user = AuthUser(email=email, password_hash=password_hash)
        db.add(user)
    return _refresh(db, user, "Create user")


def get_user_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    return (
        db.query(UserProfile)
        .options(joinedload(UserProfile.user))
        .filter(UserProfile.id == user_id)
        .first()
    )


def create_user_profile(db: Session, user_id: str, full_name=None, role: Role = Role.VIEWER) -> UserProfile:
    with _write(db, "Create user profile"):
        profile = UserProfile(id=user_id, full_name=full_name or None, role=role)
        db.add(profile)
    return _refresh(db, profile, "Create user profile")


def get_all_profiles(db: Session) -> List[UserProfile]:
    return (
        db.query(UserProfile)
        .options(joinedload(UserProfile.user))
        .order_by(UserProfile.created_at.desc())
        .all()
    )


def update_user_role(db: Session, user_id: str, role: Role):
    with _write(db, "Update user role"):
        profile = db.query(UserProfile).filter(UserProfile.id == user_id).first()
        if profile:
            profile.role = role
    if profile:
        _refresh(db, profile, "Update user role")
    return profile
