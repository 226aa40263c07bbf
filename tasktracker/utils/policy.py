# tasktracker/utils/policy.py
"""
Authorization policy.

``can`` is a pure decision function over (identity, action, resource). The
resource is whatever the action is about: a Task (anything with an
``employee_id``), the id of the employee a task would belong to, or ``None``
for collection-level actions.
"""

import enum
import logging
from typing import Any, Optional

from tasktracker.errors import Forbidden
from tasktracker.utils.security import Identity

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    LIST_ALL_TASKS = "list_all_tasks"
    LIST_EMPLOYEE_TASKS = "list_employee_tasks"
    READ_TASK = "read_task"
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    EXPORT_TASKS = "export_tasks"
    LIST_DEPARTMENTS = "list_departments"
    MANAGE_DEPARTMENTS = "manage_departments"


# Actions an employee may take on resources they own
OWNER_ACTIONS = {
    Action.LIST_EMPLOYEE_TASKS,
    Action.READ_TASK,
    Action.CREATE_TASK,
    Action.UPDATE_TASK,
    Action.DELETE_TASK,
}


def _owner_id(resource: Any) -> Optional[int]:
    if resource is None:
        return None
    if isinstance(resource, int):
        return resource
    return getattr(resource, "employee_id", None)


def can(identity: Identity, action: Action, resource: Any = None) -> bool:
    if action == Action.LIST_DEPARTMENTS:
        return True

    if identity.is_admin:
        return True

    if action in OWNER_ACTIONS:
        owner_id = _owner_id(resource)
        return owner_id is not None and owner_id == identity.id

    return False


def authorize(identity: Identity, action: Action, resource: Any = None) -> None:
    """Raise Forbidden unless ``identity`` may perform ``action`` on ``resource``"""
    if not can(identity, action, resource):
        logger.warning(
            f"Denied {action.value} for user {identity.id} ({identity.role.value}) "
            f"on owner {_owner_id(resource)}"
        )
        raise Forbidden()
