"""Enumerations shared by models, policy tables and schemas."""

from enum import StrEnum


class UserRole(StrEnum):
    AUTHOR = "AUTHOR"
    REVIEWER = "REVIEWER"
    EDITOR = "EDITOR"
    DEAN = "DEAN"


class PaperStatus(StrEnum):
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class InviteStatus(StrEnum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
