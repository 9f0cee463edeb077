"""
Access policy.

Every access decision in the API goes through ``can(identity, action,
resource)``. Rules are either a set of roles or a predicate over the identity
and the record being touched.
"""
from typing import Callable, Dict, Iterable, Optional, Union

from fastapi import Depends

from hris.exceptions import AuthorizationError
from hris.models.leaves import LeaveStatus
from hris.models.users import UserRole
from hris.utils.app_utils import Identity, get_current_user

ADMIN_ROLES = frozenset({UserRole.ADMIN})
HR_ROLES = frozenset({UserRole.HR, UserRole.ADMIN})
APPROVER_ROLES = frozenset({UserRole.LINE_MANAGER, UserRole.HEAD_OF_UNIT, UserRole.HR, UserRole.ADMIN})

Rule = Union[frozenset, Callable[[Identity, Optional[dict]], bool]]


def has_role(identity: Identity, roles: Iterable[UserRole]) -> bool:
    return identity.role in set(roles)


def authorize_roles(identity: Identity, roles: Iterable[UserRole]) -> None:
    if not has_role(identity, roles):
        raise AuthorizationError()


def _owns(identity: Identity, resource: Optional[dict]) -> bool:
    return resource is not None and resource.get("employeeId") == identity.id


def _owner_or_hr(identity: Identity, resource: Optional[dict]) -> bool:
    return identity.role in HR_ROLES or _owns(identity, resource)


def _can_read_leave(identity: Identity, leave: Optional[dict]) -> bool:
    if identity.role in HR_ROLES or _owns(identity, leave):
        return True
    return leave is not None and identity.id in (leave.get("lineManagerId"), leave.get("headOfUnitId"))


def _can_act_on_leave(identity: Identity, leave: Optional[dict]) -> bool:
    """Stage gate: only the designated approver of the current stage, or an admin."""
    if leave is None:
        return False
    if identity.role == UserRole.ADMIN:
        return True

    stage = leave.get("status")
    if stage == LeaveStatus.LINE_MANAGER_APPROVAL:
        return identity.role == UserRole.LINE_MANAGER and leave.get("lineManagerId") == identity.id
    if stage == LeaveStatus.HEAD_OF_UNIT_APPROVAL:
        return identity.role == UserRole.HEAD_OF_UNIT and leave.get("headOfUnitId") == identity.id
    if stage == LeaveStatus.HR_APPROVAL:
        return identity.role == UserRole.HR
    return False


def _can_withdraw_leave(identity: Identity, leave: Optional[dict]) -> bool:
    if identity.role == UserRole.ADMIN:
        return True
    return _owns(identity, leave) and leave.get("status") == LeaveStatus.LINE_MANAGER_APPROVAL


def _can_update_appraisal(identity: Identity, appraisal: Optional[dict]) -> bool:
    return identity.role != UserRole.EMPLOYEE or _owns(identity, appraisal)


POLICY: Dict[str, Rule] = {
    "employees:manage": HR_ROLES,
    "departments:manage": HR_ROLES,
    "roles:manage": ADMIN_ROLES,
    "permissions:manage": ADMIN_ROLES,
    "appraisals:read_all": APPROVER_ROLES,
    "appraisals:create": HR_ROLES,
    "appraisals:update": _can_update_appraisal,
    "appraisals:delete": HR_ROLES,
    "leave:read_all": APPROVER_ROLES,
    "leave:read": _can_read_leave,
    "leave:update": _can_act_on_leave,
    "leave:delete": _can_withdraw_leave,
    "documents:read_all": HR_ROLES,
    "documents:read": _owner_or_hr,
    "documents:approve": HR_ROLES,
    "documents:download": _owner_or_hr,
    "documents:delete": _owner_or_hr,
    "documents:audit": _owner_or_hr,
    "documents:stats": HR_ROLES,
    "documents:compliance": HR_ROLES,
    "attendance:read_all": HR_ROLES,
    "onboarding:read": _owner_or_hr,
    "onboarding:complete_task": _owner_or_hr,
    "onboarding:manage": HR_ROLES,
    "integrations:manage": ADMIN_ROLES,
    "settings:manage": ADMIN_ROLES,
    "system:manage": ADMIN_ROLES,
}


def can(identity: Identity, action: str, resource: Optional[dict] = None) -> bool:
    rule = POLICY.get(action)
    if rule is None:
        return False
    if isinstance(rule, frozenset):
        return identity.role in rule
    return rule(identity, resource)


def authorize(identity: Identity, action: str, resource: Optional[dict] = None) -> None:
    if not can(identity, action, resource):
        raise AuthorizationError()


def require_permission(action: str):
    """Route dependency for actions that do not depend on a specific record."""

    async def dependency(identity: Identity = Depends(get_current_user)) -> Identity:
        authorize(identity, action)
        return identity

    return dependency
