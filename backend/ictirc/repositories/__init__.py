"""Repository layer for data access."""

from ictirc.repositories.user_repository import UserRepository
from ictirc.repositories.category_repository import CategoryRepository
from ictirc.repositories.paper_repository import PaperRepository
from ictirc.repositories.doi_sequence_repository import DoiSequenceRepository
from ictirc.repositories.audit_log_repository import AuditLogRepository
from ictirc.repositories.invite_repository import InviteRepository
from ictirc.repositories.conference_repository import ConferenceRepository
from ictirc.repositories.volume_repository import VolumeRepository
from ictirc.repositories.issue_repository import IssueRepository
from ictirc.repositories.archived_paper_repository import ArchivedPaperRepository
from ictirc.repositories.review_repository import ReviewRepository

__all__ = [
    "UserRepository",
    "CategoryRepository",
    "PaperRepository",
    "DoiSequenceRepository",
    "AuditLogRepository",
    "InviteRepository",
    "ConferenceRepository",
    "VolumeRepository",
    "IssueRepository",
    "ArchivedPaperRepository",
    "ReviewRepository",
]
