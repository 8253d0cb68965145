"""
Role policy decisions for teams and memberships.

Every function here is pure and total: an unknown or missing role is
simply denied. Callers pass the role read from the database during the
current request, never one supplied by the client.
"""
from typing import Optional
from ..config import ROLE_HIERARCHY, MANAGER_ROLES


def _role_name(role) -> Optional[str]:
    if isinstance(role, str) and role in ROLE_HIERARCHY:
        return role
    return None


def is_known_role(role) -> bool:
    return _role_name(role) is not None


def can_create_team(actor_id: Optional[str]) -> bool:
    return bool(actor_id)


def can_update_team(actor_role) -> bool:
    return _role_name(actor_role) in MANAGER_ROLES


def can_delete_team(actor_role) -> bool:
    return _role_name(actor_role) == "owner"


def can_manage_members(actor_role) -> bool:
    return _role_name(actor_role) in MANAGER_ROLES


def can_invite(actor_role) -> bool:
    return can_manage_members(actor_role)


def can_change_role(actor_role, target_role, new_role) -> bool:
    target = _role_name(target_role)
    new = _role_name(new_role)
    if target is None or new is None:
        return False
    # The owner's role is immutable and nobody is promoted to owner
    if target == "owner" or new == "owner":
        return False
    return _role_name(actor_role) in MANAGER_ROLES


def can_remove(actor_role, target_role, actor_is_target: bool) -> bool:
    actor = _role_name(actor_role)
    target = _role_name(target_role)
    if target is None or target == "owner" or actor_is_target:
        return False
    if actor == "owner":
        return True
    # Admins may only remove non-admin members
    return actor == "admin" and target != "admin"
