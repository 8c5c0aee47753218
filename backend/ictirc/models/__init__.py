"""Database models."""

from ictirc.models.user import User
from ictirc.models.category import Category
from ictirc.models.paper import Author, Paper, PaperAuthor
from ictirc.models.conference import Conference
from ictirc.models.volume import Volume
from ictirc.models.issue import Issue
from ictirc.models.archived_paper import ArchivedPaper, ArchivedPaperAuthor
from ictirc.models.doi_sequence import DoiSequence
from ictirc.models.audit_log import AuditLog
from ictirc.models.invite_token import InviteToken
from ictirc.models.review import PaperComment, ReviewerAssignment

__all__ = [
    "User",
    "Category",
    "Author",
    "Paper",
    "PaperAuthor",
    "Conference",
    "Volume",
    "Issue",
    "ArchivedPaper",
    "ArchivedPaperAuthor",
    "DoiSequence",
    "AuditLog",
    "InviteToken",
    "ReviewerAssignment",
    "PaperComment",
]
