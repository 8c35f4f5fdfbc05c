from dataclasses import dataclass
from typing import Optional

from core.errors import PermissionDenied
from core.models import Role

ROLE_LABELS = {
    Role.ADMIN: "Admin",
    Role.EDITOR: "Editor",
    Role.VIEWER: "Viewer",
}


def parse_role(value) -> Role:
    """Role from a stored or submitted value. Unknown values raise ValueError."""
    if isinstance(value, Role):
        return value
    return Role(str(value).strip().lower())


@dataclass(frozen=True)
class Permissions:
    can_edit: bool = False
    is_admin: bool = False


NO_ACCESS = Permissions()


def permissions_for_role(role: Role) -> Permissions:
    role = parse_role(role)
    if role is Role.ADMIN:
        return Permissions(can_edit=True, is_admin=True)
    elif role is Role.EDITOR:
        return Permissions(can_edit=True, is_admin=False)
    elif role is Role.VIEWER:
        return Permissions(can_edit=False, is_admin=False)
    raise ValueError(f"Unhandled role: {role!r}")


def permissions_for(profile) -> Permissions:
    if profile is None:
        return NO_ACCESS
    return permissions_for_role(profile.role)


@dataclass(frozen=True)
class SessionContext:
    """Who is signed in and what they may do. Passed explicitly to every view."""
    user: object = None
    profile: object = None
    permissions: Permissions = NO_ACCESS

    @classmethod
    def build(cls, user, profile):
        return cls(user=user, profile=profile, permissions=permissions_for(profile))

    @property
    def can_edit(self):
        return self.permissions.can_edit

    @property
    def is_admin(self):
        return self.permissions.is_admin

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user is not None else None

    @property
    def display_name(self):
        if self.profile is not None and self.profile.full_name:
            return self.profile.full_name
        return self.user.email if self.user is not None else ""


def require_edit(ctx: SessionContext):
    if not ctx.can_edit:
        raise PermissionDenied("Editor or admin role required")


def require_admin(ctx: SessionContext):
    if not ctx.is_admin:
        raise PermissionDenied("Admin role required")
