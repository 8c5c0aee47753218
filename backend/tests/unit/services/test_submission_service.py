"""Tests for SubmissionService."""

import pytest
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from ictirc.exceptions import StorageUploadError, ValidationError
from ictirc.schemas.submissions import PaperSubmission
from ictirc.services.audit_service import AuditAction
from ictirc.services.submission_service import ManuscriptFile, SubmissionService


@pytest.fixture
def mock_category_repository():
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=Mock(id=uuid4(), name="Networking"))
    return repo


@pytest.fixture
def submission_service(
    mock_paper_repository, mock_category_repository, mock_storage_client, mock_audit_service
):
    return SubmissionService(
        paper_repository=mock_paper_repository,
        category_repository=mock_category_repository,
        storage_client=mock_storage_client,
        audit_service=mock_audit_service,
        max_upload_bytes=1024,
    )


@pytest.fixture
def submission():
    return PaperSubmission(
        title="Adaptive Routing in Campus Mesh Networks",
        abstract="This paper studies adaptive routing strategies for campus mesh networks. " * 2,
        keywords=["mesh", "routing", "campus"],
        category_id=uuid4(),
        authors=[
            {"name": "Maria Santos", "email": "maria@example.com", "affiliation": "ISUFST"},
            {"name": "Jose Reyes", "email": "jose@example.com", "affiliation": "WVSU"},
        ],
    )


@pytest.fixture
def pdf():
    return ManuscriptFile(filename="../paper.pdf", content_type="application/pdf", content=b"%PDF-1.7")


@pytest.fixture
def created_paper(mock_paper_repository, make_paper):
    paper = make_paper()
    mock_paper_repository.create.return_value = paper
    mock_paper_repository.upsert_author = AsyncMock(
        side_effect=lambda name, email, affiliation: Mock(id=uuid4(), email=email)
    )
    return paper


class TestSubmitPaper:
    @pytest.mark.asyncio
    async def test_happy_path(
        self, submission_service, submission, pdf, created_paper,
        mock_paper_repository, mock_storage_client, mock_audit_service,
    ):
        outcome = await submission_service.submit_paper(submission, pdf, ip_address="1.2.3.4")

        assert outcome.paper is created_paper
        path = mock_storage_client.upload_to_hot_storage.call_args.args[1]
        assert path == f"papers/{created_paper.id}/paper.pdf"
        mock_paper_repository.set_raw_file_url.assert_called_once_with(
            created_paper, "https://storage.example.com/papers/x.pdf"
        )
        assert mock_audit_service.record.call_args.args[0] == AuditAction.SUBMIT_PAPER

    @pytest.mark.asyncio
    async def test_first_author_is_corresponding(
        self, submission_service, submission, pdf, created_paper, mock_paper_repository
    ):
        await submission_service.submit_paper(submission, pdf)

        calls = mock_paper_repository.add_author.call_args_list
        assert [c.kwargs["order"] for c in calls] == [0, 1]
        assert [c.kwargs["is_corresponding_author"] for c in calls] == [True, False]

    @pytest.mark.asyncio
    async def test_confirmation_addressed_to_first_author(
        self, submission_service, submission, pdf, created_paper
    ):
        outcome = await submission_service.submit_paper(submission, pdf)

        assert outcome.notification.to == "maria@example.com"
        assert outcome.notification.submission_id == str(created_paper.id)

    @pytest.mark.asyncio
    async def test_upload_failure_removes_paper(
        self, submission_service, submission, pdf, created_paper,
        mock_paper_repository, mock_storage_client, mock_audit_service,
    ):
        mock_storage_client.upload_to_hot_storage.return_value = Mock(
            success=False, url=None, error="bucket unavailable"
        )

        with pytest.raises(StorageUploadError) as exc_info:
            await submission_service.submit_paper(submission, pdf)

        assert "bucket unavailable" in exc_info.value.message
        mock_paper_repository.delete.assert_called_once_with(created_paper.id)
        mock_paper_repository.add_author.assert_not_called()
        mock_audit_service.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_after_upload_removes_stored_object(
        self, submission_service, submission, pdf, created_paper,
        mock_paper_repository, mock_storage_client, mock_audit_service,
    ):
        mock_paper_repository.add_author.side_effect = RuntimeError("connection reset")

        with pytest.raises(RuntimeError):
            await submission_service.submit_paper(submission, pdf)

        mock_storage_client.delete_from_hot_storage.assert_called_once_with(
            f"papers/{created_paper.id}/paper.pdf"
        )
        mock_audit_service.record.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_keeps_stored_object(
        self, submission_service, submission, pdf, created_paper, mock_storage_client
    ):
        await submission_service.submit_paper(submission, pdf)

        mock_storage_client.delete_from_hot_storage.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_unsupported_content_type(
        self, submission_service, submission, mock_paper_repository
    ):
        image = ManuscriptFile(filename="paper.png", content_type="image/png", content=b"png")

        with pytest.raises(ValidationError) as exc_info:
            await submission_service.submit_paper(submission, image)

        assert exc_info.value.message == "Only PDF and DOCX files are accepted"
        mock_paper_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, submission_service, submission):
        big = ManuscriptFile(filename="big.pdf", content_type="application/pdf", content=b"x" * 2048)

        with pytest.raises(ValidationError):
            await submission_service.submit_paper(submission, big)

    @pytest.mark.asyncio
    async def test_requires_file(self, submission_service, submission):
        with pytest.raises(ValidationError) as exc_info:
            await submission_service.submit_paper(submission, None)

        assert exc_info.value.message == "Manuscript file is required"

    @pytest.mark.asyncio
    async def test_unknown_category(
        self, submission_service, submission, pdf, mock_category_repository, mock_paper_repository
    ):
        mock_category_repository.get_by_id.return_value = None

        with pytest.raises(ValidationError) as exc_info:
            await submission_service.submit_paper(submission, pdf)

        assert exc_info.value.message == "Invalid category selected"
        mock_paper_repository.create.assert_not_called()


class TestPaperSubmissionSchema:
    def test_duplicate_author_email_rejected(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            PaperSubmission(
                title="Adaptive Routing in Campus Mesh Networks",
                abstract="x" * 120,
                keywords="mesh, routing, campus",
                category_id=uuid4(),
                authors=[
                    {"name": "Maria Santos", "email": "maria@example.com", "affiliation": "ISUFST"},
                    {"name": "M. Santos", "email": "Maria@Example.com", "affiliation": "ISUFST"},
                ],
            )

        assert "Duplicate author email: maria@example.com" in str(exc_info.value)