"""
User actions that write to the store. Each one checks the caller's role,
validates presence of the required fields and then issues exactly one write.
"""
from sqlalchemy.orm import Session

from core import crud
from core.config import Config
from core.errors import StoreError, ValidationError
from core.forms import ENTRY_FIELDS, EQUIPMENT_FIELDS, LOCATION_FIELDS, require_fields
from core.roles import SessionContext, parse_role, require_admin, require_edit
from core.auth import invite_link


def _clean(value):
    return value.strip() if isinstance(value, str) else value


def add_equipment(db: Session, ctx: SessionContext, values: dict):
    require_edit(ctx)
    require_fields(values, EQUIPMENT_FIELDS)
    return crud.create_equipment(
        db,
        name=_clean(values["name"]),
        type=_clean(values["type"]),
        equipment_id=_clean(values["equipment_id"]),
        description=_clean(values.get("description")) or None
    )


def remove_equipment(db: Session, ctx: SessionContext, item_id: str):
    require_edit(ctx)
    crud.delete_equipment(db, item_id)


def add_location(db: Session, ctx: SessionContext, values: dict):
    require_edit(ctx)
    require_fields(values, LOCATION_FIELDS)
    return crud.create_location(db, job_name=_clean(values["job_name"]), address=_clean(values["address"]))


def remove_location(db: Session, ctx: SessionContext, location_id: str):
    require_edit(ctx)
    crud.delete_location(db, location_id)


def add_schedule_entry(db: Session, ctx: SessionContext, values: dict):
    require_edit(ctx)
    require_fields(values, ENTRY_FIELDS)
    return crud.create_schedule_entry(
        db,
        equipment_id=values["equipment_id"],
        location_id=values["location_id"],
        day_of_week=values["day_of_week"],
        start_hour=values["start_hour"],
        end_hour=values["end_hour"],
        notes=_clean(values.get("notes")) or None
    )


def remove_schedule_entry(db: Session, ctx: SessionContext, entry_id: str):
    require_edit(ctx)
    crud.delete_schedule_entry(db, entry_id)


def change_settings(db: Session, ctx: SessionContext, start_hour, end_hour):
    require_admin(ctx)
    return crud.update_schedule_settings(db, int(start_hour), int(end_hour))


def change_user_role(db: Session, ctx: SessionContext, user_id: str, role):
    require_admin(ctx)
    if user_id == ctx.user_id:
        raise ValidationError("You cannot change your own role.")
    try:
        new_role = parse_role(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role}", fields=("role",))
    profile = crud.update_user_role(db, user_id, new_role)
    if profile is None:
        raise StoreError(f"No profile for user {user_id}")
    return profile


def create_invitation(ctx: SessionContext, email, role, base_url=None):
    require_admin(ctx)
    require_fields({"email": email}, {"email": "Email address"})
    return invite_link(base_url or Config.APP_BASE_URL, role)
