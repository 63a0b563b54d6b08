"""
Agency approval state machine.

    PENDING -> ACTIVE | REJECTED | MODIFY     (admin email links)
    MODIFY  -> PENDING                        (agency resubmits the form)
    any     -> PENDING                        (manual admin "pending" action)

ACTIVE and REJECTED are final for the approve/reject/modify links: following
such a link on an agency in the other final state changes nothing and sends
the admin to the "already processed" page.
"""
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode

from ..models.agency import AgencyStatus


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    MODIFY = "modify"
    PENDING = "pending"


ACTION_TARGETS = {
    ApprovalAction.APPROVE: AgencyStatus.ACTIVE,
    ApprovalAction.REJECT: AgencyStatus.REJECTED,
    ApprovalAction.MODIFY: AgencyStatus.MODIFY,
    ApprovalAction.PENDING: AgencyStatus.PENDING,
}

RESULT_PAGES = {
    AgencyStatus.ACTIVE: "/agency-approved",
    AgencyStatus.REJECTED: "/agency-rejected",
    AgencyStatus.MODIFY: "/agency-modification-required",
    AgencyStatus.PENDING: "/agency-admin/under-review",
}

# States an admin link may move an agency out of
OPEN_STATES = {AgencyStatus.PENDING, AgencyStatus.MODIFY}


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an admin action to an agency."""
    previous: AgencyStatus
    status: AgencyStatus
    redirect_to: str

    @property
    def changed(self) -> bool:
        return self.previous != self.status


def apply_action(current: AgencyStatus, action: ApprovalAction) -> Transition:
    """Decide the new status and result page for an admin action."""
    current = AgencyStatus(current)
    action = ApprovalAction(action)
    target = ACTION_TARGETS[action]

    if current == target:
        return Transition(current, current, RESULT_PAGES[target])

    if action == ApprovalAction.PENDING or current in OPEN_STATES:
        return Transition(current, target, RESULT_PAGES[target])

    query = urlencode({"status": current.value})
    return Transition(current, current, f"/already-processed?{query}")


def status_after_resubmission(current: AgencyStatus) -> AgencyStatus:
    """Resubmitting the form puts an open registration back in the queue.

    Raises ValueError for ACTIVE/REJECTED registrations, which only an admin
    can reopen.
    """
    current = AgencyStatus(current)
    if current not in OPEN_STATES:
        raise ValueError(f"Agency registration already {current.value.lower()}")
    return AgencyStatus.PENDING


def access_status(status: AgencyStatus | None) -> str:
    """Collapse an approval status into the dashboard's access state."""
    if status is None:
        return "NO_FORM"
    status = AgencyStatus(status)
    if status == AgencyStatus.ACTIVE:
        return "GRANTED"
    return status.value
