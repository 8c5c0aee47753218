"""Tests for ArchiveService."""

import pytest
from unittest.mock import AsyncMock, Mock
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from ictirc.exceptions import AuthorizationError, ConflictError, ResourceNotFoundError
from ictirc.models.enums import UserRole
from ictirc.services.archive_service import ArchiveService
from ictirc.services.audit_service import AuditAction


@pytest.fixture
def conference_repository():
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.count_issues = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def volume_repository():
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.find_by_number = AsyncMock(return_value=None)
    repo.count_issues = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def issue_repository():
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.find_by_number = AsyncMock(return_value=None)
    repo.count_papers = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def archived_paper_repository():
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.search = AsyncMock(return_value=([], 0))
    return repo


@pytest.fixture
def archive_service(
    mock_async_session,
    conference_repository,
    volume_repository,
    issue_repository,
    archived_paper_repository,
    mock_audit_service,
):
    return ArchiveService(
        session=mock_async_session,
        conference_repository=conference_repository,
        volume_repository=volume_repository,
        issue_repository=issue_repository,
        archived_paper_repository=archived_paper_repository,
        audit_service=mock_audit_service,
    )


def _entity(**fields):
    entity = Mock()
    entity.id = uuid4()
    for key, value in fields.items():
        setattr(entity, key, value)
    return entity


class TestVolumes:
    @pytest.mark.asyncio
    async def test_create_volume(
        self, archive_service, actor_lookup, make_user, volume_repository, mock_audit_service
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        volume_repository.create.return_value = _entity(volume_number=3, year=2024)

        volume = await archive_service.create_volume("editor", {"volume_number": 3, "year": 2024})

        assert volume.volume_number == 3
        assert mock_audit_service.record.call_args.args[0] == AuditAction.CREATE_VOLUME

    @pytest.mark.asyncio
    async def test_duplicate_volume_number_and_year(
        self, archive_service, actor_lookup, make_user, volume_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        volume_repository.find_by_number.return_value = _entity()

        with pytest.raises(ConflictError) as exc_info:
            await archive_service.create_volume("editor", {"volume_number": 3, "year": 2024})

        assert exc_info.value.message == "Volume 3 for year 2024 already exists"
        volume_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_skips_uniqueness_when_key_unchanged(
        self, archive_service, actor_lookup, make_user, volume_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        volume = _entity(volume_number=1, year=2023)
        volume_repository.get_by_id.return_value = volume
        volume_repository.update.return_value = volume

        await archive_service.update_volume("editor", volume.id, {"title": "Renamed"})

        volume_repository.find_by_number.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_volume_with_issues_restricted(
        self, archive_service, actor_lookup, make_user, volume_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)
        volume_repository.get_by_id.return_value = _entity(volume_number=1, year=2023)
        volume_repository.count_issues.return_value = 2

        with pytest.raises(ConflictError) as exc_info:
            await archive_service.delete_volume("dean", "volume")

        assert exc_info.value.details == {"issue_count": 2}
        volume_repository.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_editor_cannot_delete_volume(self, archive_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(AuthorizationError):
            await archive_service.delete_volume("editor", "volume")


class TestIssues:
    @pytest.mark.asyncio
    async def test_create_issue_requires_volume(self, archive_service, actor_lookup, make_user):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)

        with pytest.raises(ResourceNotFoundError):
            await archive_service.create_issue("editor", {"volume_id": uuid4(), "issue_number": 1})

    @pytest.mark.asyncio
    async def test_duplicate_issue_number(
        self, archive_service, actor_lookup, make_user, volume_repository, issue_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        volume = _entity()
        volume_repository.get_by_id.return_value = volume
        issue_repository.find_by_number.return_value = _entity()

        with pytest.raises(ConflictError) as exc_info:
            await archive_service.create_issue("editor", {"volume_id": volume.id, "issue_number": 2})

        assert exc_info.value.message == "Issue 2 already exists for this volume"

    @pytest.mark.asyncio
    async def test_delete_issue_with_papers_restricted(
        self, archive_service, actor_lookup, make_user, issue_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.DEAN)
        issue_repository.get_by_id.return_value = _entity(volume_id=uuid4(), issue_number=1)
        issue_repository.count_papers.return_value = 5

        with pytest.raises(ConflictError):
            await archive_service.delete_issue("dean", "issue")

        issue_repository.delete.assert_not_called()


class TestConferences:
    @pytest.mark.asyncio
    async def test_delete_conference_with_linked_issues(
        self, archive_service, actor_lookup, make_user, conference_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        conference_repository.get_by_id.return_value = _entity(name="ICTIRC 2024")
        conference_repository.count_issues.return_value = 1

        with pytest.raises(ConflictError):
            await archive_service.delete_conference("editor", "conference")

    @pytest.mark.asyncio
    async def test_list_is_public(self, archive_service, conference_repository):
        conference_repository.list_conferences.return_value = []

        await archive_service.list_conferences(published_only=True)

        conference_repository.list_conferences.assert_called_once_with(published_only=True)


class TestBatchCreate:
    @pytest.mark.asyncio
    async def test_partial_failure_keeps_successful_items(
        self, archive_service, actor_lookup, make_user, issue_repository, archived_paper_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        good_issue = _entity()

        async def _get_issue(issue_id):
            return good_issue if issue_id == good_issue.id else None

        issue_repository.get_by_id = AsyncMock(side_effect=_get_issue)
        archived_paper_repository.create = AsyncMock(
            side_effect=lambda **kw: _entity(title=kw["title"], issue_id=kw["issue_id"])
        )

        result = await archive_service.batch_create_archived_papers(
            "editor",
            [
                {"title": "First", "issue_id": good_issue.id, "authors": []},
                {"title": "Orphan", "issue_id": uuid4(), "authors": []},
                {"title": "Third", "issue_id": good_issue.id, "authors": []},
            ],
        )

        assert [p.title for p in result.created] == ["First", "Third"]
        assert len(result.errors) == 1
        assert result.errors[0].title == "Orphan"
        assert result.errors[0].error == "Issue not found"
        assert result.success is False

    @pytest.mark.asyncio
    async def test_database_error_reported_per_item(
        self, archive_service, actor_lookup, make_user, issue_repository, archived_paper_repository
    ):
        actor_lookup.get_by_id.return_value = make_user(UserRole.EDITOR)
        issue_repository.get_by_id.return_value = _entity()
        archived_paper_repository.create = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate doi"))
        )

        result = await archive_service.batch_create_archived_papers(
            "editor", [{"title": "Dup", "issue_id": uuid4(), "authors": []}]
        )

        assert result.created == []
        assert result.errors[0].error == "Failed to create archived paper"

    @pytest.mark.asyncio
    async def test_uploader_recorded(
        self, archive_service, actor_lookup, make_user, issue_repository, archived_paper_repository
    ):
        editor = make_user(UserRole.EDITOR)
        actor_lookup.get_by_id.return_value = editor
        issue_repository.get_by_id.return_value = _entity()
        archived_paper_repository.create.return_value = _entity(title="T", issue_id=uuid4())

        await archive_service.create_archived_paper(
            "editor", {"title": "T", "issue_id": uuid4(), "authors": [{"name": "A"}]}
        )

        kwargs = archived_paper_repository.create.call_args.kwargs
        assert kwargs["uploader_id"] == editor.id
        assert kwargs["authors"] == [{"name": "A"}]
