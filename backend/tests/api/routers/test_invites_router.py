"""Tests for invitation router."""

import uuid

from ictirc.exceptions import ConflictError, InviteExpiredError
from ictirc.models.enums import InviteStatus, UserRole


class TestInvitesRouter:
    def test_create_invite_returns_token(
        self, client, mock_invite_service, sample_invite, mock_identity
    ):
        sample_invite.status = InviteStatus.PENDING
        mock_invite_service.create_invite.return_value = sample_invite

        response = client.post(
            "/api/v1/invites", json={"email": "new.reviewer@example.com", "role": "REVIEWER"}
        )

        assert response.status_code == 201
        assert response.json()["invite"]["token"] == "invite-token-abc"
        call = mock_invite_service.create_invite.call_args
        assert call.args == (mock_identity.id, "new.reviewer@example.com", UserRole.REVIEWER)

    def test_create_invite_rejects_bad_email(self, client):
        response = client.post("/api/v1/invites", json={"email": "not-an-email"})

        assert response.status_code == 422

    def test_duplicate_invite(self, client, mock_invite_service):
        mock_invite_service.create_invite.side_effect = ConflictError(
            "Pending invite already exists for this email"
        )

        response = client.post("/api/v1/invites", json={"email": "dup@example.com"})

        assert response.status_code == 409

    def test_accept_invite(self, client, mock_invite_service, sample_user, mock_identity):
        mock_invite_service.accept_invite.return_value = sample_user

        response = client.post("/api/v1/invites/accept", json={"token": "invite-token-abc"})

        assert response.status_code == 200
        mock_invite_service.accept_invite.assert_called_once_with("invite-token-abc", mock_identity.id)

    def test_expired_invite_commits_status_change(
        self, client, mock_invite_service, mock_db_session
    ):
        mock_invite_service.accept_invite.side_effect = InviteExpiredError()

        response = client.post("/api/v1/invites/accept", json={"token": "old"})

        assert response.status_code == 409
        assert response.json()["code"] == "INVITE_EXPIRED"
        mock_db_session.commit.assert_called_once()

    def test_expire_sweep(self, client, mock_invite_service):
        mock_invite_service.expire_overdue_invites.return_value = 4

        response = client.post("/api/v1/invites/expire")

        assert response.json() == {"success": True, "expired": 4}

    def test_cancel_invite(self, client, mock_invite_service):
        invite_id = uuid.uuid4()

        response = client.delete(f"/api/v1/invites/{invite_id}")

        assert response.status_code == 200
        assert mock_invite_service.cancel_invite.call_args.args[1] == invite_id
