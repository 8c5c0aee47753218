"""Manuscript intake: validate, persist, upload, link authors."""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Optional
from uuid import UUID

from ictirc.clients.email_client import SubmissionConfirmationEmail
from ictirc.clients.storage_client import StorageClient
from ictirc.exceptions import StorageUploadError, ValidationError
from ictirc.models.paper import Paper
from ictirc.repositories.category_repository import CategoryRepository
from ictirc.repositories.paper_repository import PaperRepository
from ictirc.schemas.submissions import PaperSubmission
from ictirc.services.audit_service import AuditAction, AuditService
from ictirc.utils.logger import get_logger

log = get_logger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    }
)


@dataclass(frozen=True)
class ManuscriptFile:
    filename: str
    content_type: str
    content: bytes


@dataclass
class SubmissionOutcome:
    paper: Paper
    notification: Optional[SubmissionConfirmationEmail] = None


class SubmissionService:
    def __init__(
        self,
        paper_repository: PaperRepository,
        category_repository: CategoryRepository,
        storage_client: StorageClient,
        audit_service: AuditService,
        max_upload_bytes: int = 50 * 1024 * 1024,
    ):
        self.paper_repository = paper_repository
        self.category_repository = category_repository
        self.storage_client = storage_client
        self.audit_service = audit_service
        self.max_upload_bytes = max_upload_bytes

    def _validate_file(self, file: Optional[ManuscriptFile]) -> ManuscriptFile:
        if file is None or not file.content:
            raise ValidationError("Manuscript file is required")
        if file.content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                "Only PDF and DOCX files are accepted",
                details={"content_type": file.content_type},
            )
        if len(file.content) > self.max_upload_bytes:
            raise ValidationError(
                "File size must be less than 50MB",
                details={"size": len(file.content), "max_size": self.max_upload_bytes},
            )
        return file

    async def submit_paper(
        self,
        data: PaperSubmission,
        file: Optional[ManuscriptFile],
        submitter_id: Optional[UUID] = None,
        ip_address: Optional[str] = None,
    ) -> SubmissionOutcome:
        """
        Create a SUBMITTED paper and store its manuscript.

        The paper row is created first so its id can key the storage path.
        If the upload fails the row is removed again and StorageUploadError
        is raised.
        """
        file = self._validate_file(file)

        if await self.category_repository.get_by_id(data.category_id) is None:
            raise ValidationError("Invalid category selected", details={"category_id": str(data.category_id)})

        paper = await self.paper_repository.create(
            title=data.title,
            abstract=data.abstract,
            keywords=data.keywords,
            category_id=data.category_id,
            submitter_id=submitter_id,
        )

        filename = PurePath(file.filename).name or "manuscript"
        storage_path = f"papers/{paper.id}/{filename}"
        upload = await self.storage_client.upload_to_hot_storage(
            file.content,
            storage_path,
            content_type=file.content_type,
            upsert=False,
        )
        if not upload.success:
            await self.paper_repository.delete(paper.id)
            raise StorageUploadError(f"File upload failed: {upload.error}")

        try:
            await self._link_and_audit(paper, data, upload.url, ip_address)
        except Exception:
            # The paper row rolls back with the request; the object would not
            await self.storage_client.delete_from_hot_storage(storage_path)
            raise
        log.info("paper submitted", paper_id=str(paper.id), authors=len(data.authors))

        first_author = data.authors[0]
        notification = SubmissionConfirmationEmail(
            to=str(first_author.email),
            paper_title=paper.title,
            author_name=first_author.name,
            submission_id=str(paper.id),
            submitted_at=datetime.now(timezone.utc),
        )
        return SubmissionOutcome(paper=paper, notification=notification)

    async def _link_and_audit(
        self,
        paper: Paper,
        data: PaperSubmission,
        file_url: Optional[str],
        ip_address: Optional[str],
    ) -> None:
        await self.paper_repository.set_raw_file_url(paper, file_url)

        for order, author_data in enumerate(data.authors):
            author = await self.paper_repository.upsert_author(
                name=author_data.name,
                email=str(author_data.email),
                affiliation=author_data.affiliation,
            )
            await self.paper_repository.add_author(
                paper_id=paper.id,
                author_id=author.id,
                order=order,
                is_corresponding_author=order == 0,
            )

        await self.audit_service.record(
            AuditAction.SUBMIT_PAPER,
            target_id=str(paper.id),
            target_type="Paper",
            details={"title": paper.title, "authors": len(data.authors)},
            ip_address=ip_address,
        )
