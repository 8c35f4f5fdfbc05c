import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, Text
)
from sqlalchemy.orm import relationship

from core.database import Base

# Keys of the settings table
KEY_START_HOUR = "start_hour"
KEY_END_HOUR = "end_hour"


class Role(str, enum.Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


def _new_id():
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    # External asset tag, distinct from the row id
    equipment_id = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    schedule_entries = relationship(
        "ScheduleEntry", back_populates="equipment",
        cascade="all, delete-orphan", passive_deletes=True
    )


class Location(Base):
    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=_new_id)
    job_name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    schedule_entries = relationship(
        "ScheduleEntry", back_populates="location",
        cascade="all, delete-orphan", passive_deletes=True
    )


class ScheduleEntry(Base):
    __tablename__ = "schedule_entries"
    # start_hour < end_hour is not enforced; inverted ranges are stored as given
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_entry_day"),
        CheckConstraint("start_hour BETWEEN 0 AND 23", name="ck_entry_start"),
        CheckConstraint("end_hour BETWEEN 0 AND 23", name="ck_entry_end"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    equipment_id = Column(String(36), ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False)
    location_id = Column(String(36), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_hour = Column(Integer, nullable=False)
    end_hour = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    equipment = relationship("Equipment", back_populates="schedule_entries")
    location = relationship("Location", back_populates="schedule_entries")


class SettingEntry(Base):
    __tablename__ = "settings"

    setting_key = Column(String, primary_key=True)
    setting_value = Column(String, nullable=False)


class AuthUser(Base):
    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    profile = relationship("UserProfile", back_populates="user", uselist=False)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String, nullable=True)
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        default=Role.VIEWER, nullable=False
    )
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    user = relationship("AuthUser", back_populates="profile")

    @property
    def email(self):
        return self.user.email if self.user else None
