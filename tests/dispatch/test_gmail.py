"""Tests for the Gmail dispatcher."""

from __future__ import annotations

import base64
import email
from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from outreach.dispatch.gmail import GmailDispatcher
from outreach.domain.errors import TransportFailure
from outreach.domain.models import DispatchRequest


def _request() -> DispatchRequest:
    return DispatchRequest(
        recipient_emails=["a@x.com", "b@x.com"],
        subject="Spring launch",
        body="Hello from us",
    )


class TestGmailDispatcher:
    """Tests for GmailDispatcher."""

    def test_build_message_headers(self) -> None:
        dispatcher = GmailDispatcher(MagicMock(), "team@example.com")
        payload = dispatcher.build_message(_request())

        message = email.message_from_bytes(base64.urlsafe_b64decode(payload["raw"]))
        assert message["To"] == "a@x.com, b@x.com"
        assert message["From"] == "team@example.com"
        assert message["Subject"] == "Spring launch"
        assert "Hello from us" in message.get_payload()

    @pytest.mark.anyio()
    async def test_dispatch_sends_once(self) -> None:
        service = MagicMock()
        service.users.return_value.messages.return_value.send.return_value.execute.return_value = {
            "id": "msg-1",
            "threadId": "thr-1",
        }
        dispatcher = GmailDispatcher(service, "team@example.com")

        result = await dispatcher.dispatch(_request())

        assert result["id"] == "msg-1"
        send = service.users.return_value.messages.return_value.send
        send.assert_called_once()
        assert send.call_args.kwargs["userId"] == "me"

    def test_http_error_becomes_transport_failure(self) -> None:
        service = MagicMock()
        resp = MagicMock(status=403, reason="Forbidden")
        service.users.return_value.messages.return_value.send.return_value.execute.side_effect = (
            HttpError(resp, b'{"error": {"message": "Insufficient Permission"}}')
        )
        dispatcher = GmailDispatcher(service, "team@example.com")

        with pytest.raises(TransportFailure) as exc_info:
            dispatcher.send(_request())

        assert exc_info.value.collaborator == "gmail"
        assert exc_info.value.status_code == 403
