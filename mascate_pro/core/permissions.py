"""
Role-based access control for the stock, catalog and admin modules
"""
import enum
from dataclasses import dataclass
from typing import Dict, Optional

from mascate_pro.core.exceptions import ForbiddenError


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


ROLE_LEVELS = {
    Role.USER: 1,
    Role.ADMIN: 2,
    Role.SUPERADMIN: 3,
}

# Minimum role for each action of each module
OPERATION_ROLES: Dict[str, Dict[str, Role]] = {
    "products": {
        "view": Role.USER,
        "create": Role.ADMIN,
        "edit": Role.ADMIN,
        "delete": Role.ADMIN,
    },
    "stock": {
        "view": Role.USER,
        "move": Role.USER,
        "adjust": Role.ADMIN,
    },
    "categories": {
        "view": Role.USER,
        "create": Role.ADMIN,
        "edit": Role.ADMIN,
        "delete": Role.ADMIN,
    },
    "activity_logs": {
        "record": Role.USER,
        "view": Role.ADMIN,
        "stats": Role.ADMIN,
        "prune": Role.SUPERADMIN,
    },
    "users": {
        "view": Role.SUPERADMIN,
        "create": Role.SUPERADMIN,
        "edit": Role.SUPERADMIN,
        "delete": Role.SUPERADMIN,
        "reset_password": Role.SUPERADMIN,
    },
    "configurations": {
        "view": Role.ADMIN,
        "edit": Role.SUPERADMIN,
    },
    "backup": {
        "export": Role.SUPERADMIN,
    },
    "dashboard": {
        "view": Role.USER,
    },
}


def role_level(role: Optional[str]) -> int:
    """Level of a role name; unknown or missing roles rank below everyone."""
    try:
        return ROLE_LEVELS[Role(role)]
    except ValueError:
        return 0


def is_authorized(actor_role: Optional[str], required_role: str) -> bool:
    return role_level(actor_role) >= role_level(required_role)


def authorize(actor_role: Optional[str], required_role: str) -> None:
    """Raise ForbiddenError unless actor_role ranks at least required_role."""
    if not is_authorized(actor_role, required_role):
        raise ForbiddenError(f"Permission denied: {Role(required_role).value} role required")


def required_role(module: str, action: str) -> Role:
    try:
        return OPERATION_ROLES[module][action]
    except KeyError:
        raise KeyError(f"No permission defined for {action} on {module}")


def check_permission(actor_role: Optional[str], module: str, action: str) -> None:
    """
    Check a module/action pair against the operation table

    Raises:
        ForbiddenError: the role is below the minimum for the action
    """
    if not is_authorized(actor_role, required_role(module, action)):
        raise ForbiddenError(f"Permission denied: You don't have permission to {action} {module}")


def ensure_not_self(actor_id: str, target_id: str, action: str) -> None:
    """Nobody may deactivate, delete or demote their own account."""
    if actor_id == target_id:
        raise ForbiddenError(f"You cannot {action} your own account")


def get_role_permissions(role: Optional[str]) -> Dict[str, list]:
    """Every module action the role may perform, for the /auth/permissions view"""
    return {
        module: [action for action, minimum in actions.items() if is_authorized(role, minimum)]
        for module, actions in OPERATION_ROLES.items()
    }


@dataclass(frozen=True)
class Actor:
    """The resolved caller of an operation, plus where the request came from"""
    id: str
    role: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
