"""Permission matrix and access rules.

A staff member's permissions are stored as JSONB::

    {"deposits": {"view": true, "add": true, "edit": false, ...}, ...}

Missing modules or actions read as False. Record-level rules combine the
module flag with ownership: admins act on every record, everyone else only
on records they submitted.
"""

import uuid
from typing import Any, Protocol

from src.bo_common.enums import ADMIN_ROLES, SUPER_ADMIN_ROLE
from src.bo_common.errors import (
    PermissionDeniedError,
    SelfModificationError,
    StaffNotFoundError,
)

PermissionMatrix = dict[str, dict[str, bool]]

MODULES: tuple[str, ...] = ("dashboard", "deposits", "bank_deposits", "staff_management")
ACTIONS: tuple[str, ...] = ("view", "add", "edit", "delete", "activity")

# Human-readable names used in PermissionDeniedError messages
_MODULE_LABELS: dict[str, str] = {
    "dashboard": "dashboard",
    "deposits": "deposits",
    "bank_deposits": "bank deposits",
    "staff_management": "staff",
}


class Actor(Protocol):
    """Anything carrying an identity, a role and a permission matrix (StaffModel)."""

    id: Any
    name: str
    role: str
    permissions: Any


# ---------------------------------------------------------------------------
# Matrix presets
# ---------------------------------------------------------------------------


def _matrix(flag: bool) -> PermissionMatrix:
    return {module: {action: flag for action in ACTIONS} for module in MODULES}


def full_permissions() -> PermissionMatrix:
    return _matrix(True)


def empty_permissions() -> PermissionMatrix:
    return _matrix(False)


def basic_staff_permissions() -> PermissionMatrix:
    """Default for non-admin staff whose matrix went missing."""
    perms = empty_permissions()
    perms["dashboard"]["view"] = True
    for module in ("deposits", "bank_deposits"):
        perms[module].update(view=True, add=True, edit=True)
    return perms


def normalize_permissions(raw: dict[str, Any] | None) -> PermissionMatrix:
    """Fill in every module/action, coercing values to bool. Unknown keys are dropped."""
    raw = raw or {}
    result = empty_permissions()
    for module in MODULES:
        flags = raw.get(module) or {}
        for action in ACTIONS:
            result[module][action] = bool(flags.get(action, False))
    return result


def is_matrix_missing(raw: dict[str, Any] | None) -> bool:
    """True when no module is present at all.

    An all-False matrix is a deliberate state (new staff, permission reset)
    and is not considered missing.
    """
    return not raw


def has_permission(raw: dict[str, Any] | None, module: str, action: str) -> bool:
    flags = (raw or {}).get(module) or {}
    return bool(flags.get(action, False))


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


def is_admin(role: str | None) -> bool:
    return role in ADMIN_ROLES


def is_super_admin(role: str | None) -> bool:
    return role == SUPER_ADMIN_ROLE


def repaired_permissions(role: str, is_sole_member: bool) -> PermissionMatrix:
    """Matrix granted when a staff record is found without one."""
    if is_sole_member or is_admin(role):
        return full_permissions()
    return basic_staff_permissions()


# ---------------------------------------------------------------------------
# Record-level rules
# ---------------------------------------------------------------------------


def _is_owner(actor: Actor, owner_id: Any) -> bool:
    return owner_id is not None and str(owner_id).lower() == str(actor.id).lower()


def can_view_record(actor: Actor, owner_id: Any) -> bool:
    return is_admin(actor.role) or _is_owner(actor, owner_id)


def can_edit_record(actor: Actor, module: str, owner_id: Any) -> bool:
    return has_permission(actor.permissions, module, "edit") and can_view_record(
        actor, owner_id
    )


def can_delete_record(actor: Actor, module: str, owner_id: Any) -> bool:
    return has_permission(actor.permissions, module, "delete") and can_view_record(
        actor, owner_id
    )


def can_edit_bank(actor: Actor) -> bool:
    return is_admin(actor.role) and has_permission(actor.permissions, "bank_deposits", "edit")


def can_delete_bank(actor: Actor) -> bool:
    return is_admin(actor.role) and has_permission(
        actor.permissions, "bank_deposits", "delete"
    )


def visible_owner_filter(actor: Actor) -> str | None:
    """Owner id every listing must be restricted to, or None for admins."""
    if is_admin(actor.role):
        return None
    return str(actor.id)


def resolve_owner_filter(actor: Actor, requested: str | None) -> str | None:
    """Apply the `submitted_by` query filter, which only admins may choose freely.

    Raises StaffNotFoundError(1008) when an admin asks for something that is
    not a staff id.
    """
    own = visible_owner_filter(actor)
    if own is not None:
        return own
    if requested is None or requested.strip() in ("", "all"):
        return None
    try:
        return str(uuid.UUID(requested.strip()))
    except ValueError:
        raise StaffNotFoundError(requested) from None


# ---------------------------------------------------------------------------
# Guards (raise AppError subclasses)
# ---------------------------------------------------------------------------


def check_permission(actor: Actor, module: str, action: str) -> None:
    """Raise PermissionDeniedError(1007) unless the module flag is set."""
    if not has_permission(actor.permissions, module, action):
        raise PermissionDeniedError(f"{action} {_MODULE_LABELS.get(module, module)}")


def check_record_access(
    actor: Actor, module: str, action: str, owner_id: Any, noun: str
) -> None:
    """Raise PermissionDeniedError unless the actor may `action` this record."""
    if action == "view":
        allowed = can_view_record(actor, owner_id)
    elif action == "edit":
        allowed = can_edit_record(actor, module, owner_id)
    elif action == "delete":
        allowed = can_delete_record(actor, module, owner_id)
    else:
        allowed = has_permission(actor.permissions, module, action)
    if not allowed:
        raise PermissionDeniedError(f"{action} this {noun}")


def ensure_not_self(actor: Actor, target_id: Any, action: str) -> None:
    """Raise SelfModificationError(1009) when staff target their own account."""
    if _is_owner(actor, target_id):
        raise SelfModificationError(action)
