"""Integration tests for InviteService against PostgreSQL."""

import asyncio
import uuid

import pytest
from sqlalchemy import delete, func, select

from ictirc.exceptions import ConflictError
from ictirc.factories.service_factories import get_invite_service
from ictirc.models.audit_log import AuditLog
from ictirc.models.enums import InviteStatus, UserRole
from ictirc.models.invite_token import InviteToken
from ictirc.models.user import User
from ictirc.repositories.user_repository import UserRepository


@pytest.fixture
async def committed_editor(async_session_factory):
    """An EDITOR row visible to independent sessions; removed afterwards."""
    user_id = uuid.uuid4()
    async with async_session_factory() as session:
        await UserRepository(session).create(
            user_id=user_id, email=f"editor-{user_id.hex[:8]}@example.com", role=UserRole.EDITOR
        )
        await session.commit()

    yield user_id

    async with async_session_factory() as session:
        await session.execute(delete(AuditLog).where(AuditLog.actor_id == user_id))
        await session.execute(delete(InviteToken).where(InviteToken.invited_by_id == user_id))
        await session.execute(delete(User).where(User.id == user_id))
        await session.commit()


class TestConcurrentInvites:
    @pytest.mark.asyncio
    async def test_only_one_pending_invite_per_email(self, async_session_factory, committed_editor):
        email = f"invitee-{uuid.uuid4().hex[:8]}@example.com"

        async def invite() -> str:
            async with async_session_factory() as session:
                try:
                    await get_invite_service(session).create_invite(committed_editor, email)
                except ConflictError:
                    await session.rollback()
                    return "conflict"
                await session.commit()
                return "ok"

        results = await asyncio.gather(invite(), invite())

        assert sorted(results) == ["conflict", "ok"]
        async with async_session_factory() as session:
            pending = await session.execute(
                select(func.count())
                .select_from(InviteToken)
                .where(InviteToken.email == email, InviteToken.status == InviteStatus.PENDING)
            )
            assert pending.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_expired_invite_does_not_block_a_new_one(
        self, async_session_factory, committed_editor
    ):
        email = f"invitee-{uuid.uuid4().hex[:8]}@example.com"
        async with async_session_factory() as session:
            first = await get_invite_service(session).create_invite(committed_editor, email)
            await session.commit()

        async with async_session_factory() as session:
            stored = await session.get(InviteToken, first.id)
            stored.expires_at = stored.created_at
            await session.commit()

        async with async_session_factory() as session:
            second = await get_invite_service(session).create_invite(committed_editor, email)
            await session.commit()

        async with async_session_factory() as session:
            assert (await session.get(InviteToken, first.id)).status == InviteStatus.EXPIRED
            assert (await session.get(InviteToken, second.id)).status == InviteStatus.PENDING
