"""
Password sign-in, the per-browser session and first-login role assignment.

A new account gets its profile (and role) the first time it signs up or
signs in; the role can come from an invitation link. Every later sign-in
keeps the stored role.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import urlencode

import bcrypt
from sqlalchemy.orm import Session

from core.crud import (
    create_auth_user, create_user_profile, get_auth_user, get_auth_user_by_email,
    get_user_profile
)
from core.errors import AuthError, StoreError
from core.models import Role
from core.roles import parse_role

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


def verify_password(plain_password, hashed_password):
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode('utf-8')
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password)


def get_password_hash(password):
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str


def invitation_role(value) -> Role:
    """Role carried by an invitation link; anything unrecognised means viewer."""
    if not value:
        return Role.VIEWER
    try:
        return parse_role(value)
    except ValueError:
        logger.warning("Ignoring unknown invitation role %r", value)
        return Role.VIEWER


def _normalize_email(email):
    return (email or "").strip().lower()


def ensure_profile(db: Session, user_id: str, full_name=None, requested_role=None):
    """Create the profile on first login; an existing profile is left untouched."""
    profile = get_user_profile(db, user_id)
    if profile is None:
        profile = create_user_profile(db, user_id, full_name=full_name, role=invitation_role(requested_role))
        logger.info("Created %s profile for user %s", profile.role.value, user_id)
    return profile


def sign_up(db: Session, email, password, full_name=None, requested_role=None) -> SessionUser:
    email = _normalize_email(email)
    if not email or not password:
        raise AuthError("Email and password are required.")
    if get_auth_user_by_email(db, email):
        raise AuthError("An account with this email already exists.")
    try:
        user = create_auth_user(db, email, get_password_hash(password))
    except StoreError as exc:
        raise AuthError("Could not create the account.") from exc
    ensure_profile(db, user.id, full_name=full_name, requested_role=requested_role)
    return SessionUser(id=user.id, email=user.email)


def sign_in(db: Session, email, password, requested_role=None) -> SessionUser:
    user = get_auth_user_by_email(db, _normalize_email(email))
    if user is None or not verify_password(password or "", user.password_hash):
        raise AuthError("Invalid email or password.")
    ensure_profile(db, user.id, requested_role=requested_role)
    return SessionUser(id=user.id, email=user.email)


def invite_link(base_url: str, role) -> str:
    role = parse_role(role)
    return f"{base_url.rstrip('/')}/?{urlencode({'role': role.value})}"


class AuthSession:
    """
    Current-user holder on top of a mapping, normally ``st.session_state``.
    Listeners are called with the new user (or None) on every change.
    """

    def __init__(self, state):
        self.state = state
        self._listeners: List[Callable[[Optional[SessionUser]], None]] = []

    def get_current_user(self) -> Optional[SessionUser]:
        return self.state.get(SESSION_KEY)

    def set_user(self, user: SessionUser):
        self.state[SESSION_KEY] = user
        self._notify(user)

    def sign_out(self):
        user = self.state.get(SESSION_KEY)
        self.state[SESSION_KEY] = None
        if user is not None:
            logger.info("User %s signed out", user.email)
        self._notify(None)

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, user):
        for listener in list(self._listeners):
            listener(user)

    def load_profile(self, db: Session):
        """Profile of the signed-in user, or None when signed out or the user is gone."""
        user = self.get_current_user()
        if user is None:
            return None
        if get_auth_user(db, user.id) is None:
            self.sign_out()
            return None
        return get_user_profile(db, user.id)
