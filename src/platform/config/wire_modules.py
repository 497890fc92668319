"""
Wire Modules Configuration

Modules whose ``Provide[...]`` markers must be wired by the container.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.admission.app.command import (
    admit_ticket_use_case,
    issue_credentials_use_case,
)
from src.service.admission.app.query import (
    check_staff_pin_use_case,
    list_recent_admission_logs_use_case,
    resolve_ticket_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    resolve_ticket_use_case,
    admit_ticket_use_case,
    check_staff_pin_use_case,
    list_recent_admission_logs_use_case,
    issue_credentials_use_case,
]
