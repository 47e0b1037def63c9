# app/services/status_resolver.py
"""
Derives the single display status of a visitor from its own workflow fields
and its parent request's fields.

Two approval tiers (department/peshi HOD, then legislative) plus the
suspend/activate toggle are reconciled here into one value. The rules are an
ordered table: the first rule whose predicate holds decides the status.
Add new workflow states here, and nowhere else.
"""

from typing import Callable, NamedTuple

from app.schemas.pass_request import PassRequest, Visitor
from app.schemas.visitor_row import VisitorStatus
from app.utils.formatting import is_set


class StatusRule(NamedTuple):
    name: str
    applies: Callable[[Visitor, PassRequest], bool]
    status: VisitorStatus


STATUS_RULES: tuple[StatusRule, ...] = (
    # Suspension outranks an issued pass
    StatusRule("suspended",
               lambda v, r: v.is_suspended is True,
               VisitorStatus.SUSPENDED),
    StatusRule("pass_generated",
               lambda v, r: v.pass_generated_at is not None,
               VisitorStatus.APPROVED),
    StatusRule("visitor_routed",
               lambda v, r: is_set(v.visitor_routed_to),
               VisitorStatus.ROUTED_FOR_APPROVAL),
    StatusRule("visitor_rejected",
               lambda v, r: v.visitor_status == "rejected",
               VisitorStatus.REJECTED),
    # Request approved but this visitor has no pass yet
    StatusRule("request_approved",
               lambda v, r: r.status == "approved",
               VisitorStatus.PENDING),
    # Weblink submissions are routed automatically (routed_by unset); they still
    # await legislative action and are not "routed" from the operator's view.
    StatusRule("request_auto_routed",
               lambda v, r: r.status == "routed_for_approval" and not is_set(r.routed_by),
               VisitorStatus.PENDING),
    StatusRule("request_routed_by_hod",
               lambda v, r: r.status == "routed_for_approval",
               VisitorStatus.ROUTED_FOR_APPROVAL),
    StatusRule("request_sent_to_legislative",
               lambda v, r: is_set(r.routed_to) and r.status == "pending",
               VisitorStatus.PENDING),
    StatusRule("hod_approved_awaiting_pass",
               lambda v, r: v.visitor_status == "approved" and v.pass_generated_at is None,
               VisitorStatus.PENDING),
)

_VALID_STATUSES = {s.value for s in VisitorStatus}


def resolve_visitor_status(visitor: Visitor, request: PassRequest) -> VisitorStatus:
    for rule in STATUS_RULES:
        if rule.applies(visitor, request):
            return rule.status
    # Fallback: the visitor's own status when it is a known one
    if visitor.visitor_status in _VALID_STATUSES:
        return VisitorStatus(visitor.visitor_status)
    return VisitorStatus.PENDING


STATUS_LABELS = {
    VisitorStatus.PENDING: "Pending",
    VisitorStatus.ROUTED_FOR_APPROVAL: "Routed for Approval",
    VisitorStatus.APPROVED: "Approved",
    VisitorStatus.REJECTED: "Rejected",
    VisitorStatus.SUSPENDED: "Suspended",
}


def status_label(status: VisitorStatus) -> str:
    return STATUS_LABELS[status]


_DECISION_ACTIONS = ("approve", "reject", "route", "generate_pass")


def allowed_actions(status: VisitorStatus, visitor: Visitor) -> tuple[str, ...]:
    """Workflow actions a client may offer for a visitor in this status."""
    if status == VisitorStatus.SUSPENDED:
        return ("activate",)
    if status == VisitorStatus.APPROVED:
        return ("suspend", "resend_whatsapp")
    if status == VisitorStatus.REJECTED:
        return ()
    # Individually routed visitors are delegated to someone else
    if is_set(visitor.visitor_routed_to):
        return ()
    return _DECISION_ACTIONS
