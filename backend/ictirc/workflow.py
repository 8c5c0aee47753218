"""Paper status state machine.

The transition table and the DEAN override live here and nowhere else.
"""

from types import MappingProxyType
from typing import Mapping

from ictirc.models.enums import PaperStatus, UserRole
from ictirc.rbac import Permission, is_dean

ALLOWED_TRANSITIONS: Mapping[PaperStatus, frozenset[PaperStatus]] = MappingProxyType(
    {
        PaperStatus.SUBMITTED: frozenset({PaperStatus.UNDER_REVIEW, PaperStatus.REJECTED}),
        PaperStatus.UNDER_REVIEW: frozenset(
            {PaperStatus.ACCEPTED, PaperStatus.REJECTED, PaperStatus.SUBMITTED}
        ),
        PaperStatus.ACCEPTED: frozenset({PaperStatus.PUBLISHED, PaperStatus.UNDER_REVIEW}),
        PaperStatus.PUBLISHED: frozenset(),
        PaperStatus.REJECTED: frozenset({PaperStatus.SUBMITTED}),
        PaperStatus.ARCHIVED: frozenset(),
    }
)

# Statuses that trigger an email to the corresponding author
NOTIFY_STATUSES = frozenset(
    {
        PaperStatus.UNDER_REVIEW,
        PaperStatus.ACCEPTED,
        PaperStatus.REJECTED,
        PaperStatus.PUBLISHED,
    }
)

# Statuses from which a DOI may be assigned explicitly
DOI_ELIGIBLE_STATUSES = frozenset({PaperStatus.ACCEPTED, PaperStatus.PUBLISHED})


def required_permission(target: PaperStatus) -> Permission:
    """Permission an actor needs to move a paper into ``target``."""
    if target == PaperStatus.PUBLISHED:
        return Permission.PAPER_PUBLISH
    # UNDER_REVIEW stays on paper:review; REVIEWER holds no paper:update
    if target in (PaperStatus.REJECTED, PaperStatus.UNDER_REVIEW):
        return Permission.PAPER_REVIEW
    return Permission.PAPER_UPDATE


def is_listed_transition(current: PaperStatus, target: PaperStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def is_transition_allowed(
    current: PaperStatus, target: PaperStatus, actor_role: UserRole
) -> bool:
    """Listed transitions are allowed for everyone; a DEAN may force any."""
    return is_listed_transition(current, target) or is_dean(actor_role)


def should_notify(status: PaperStatus) -> bool:
    return status in NOTIFY_STATUSES
