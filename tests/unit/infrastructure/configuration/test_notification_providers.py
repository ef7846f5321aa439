"""Unit tests for notification channel connectivity probes."""

import json
from unittest import mock

import aiosmtplib
import httpx
import pytest
import respx

from providerhub.infrastructure.configuration.providers.notification import (
    EmailChannelProvider,
    SmsChannelProvider,
    TelegramChannelProvider,
    WebhookChannelProvider,
    WhatsAppChannelProvider,
)
from providerhub.infrastructure.configuration.providers.notification.webhook import sign_payload

EMAIL_VALUES = {
    "host": "smtp.example.com",
    "port": "587",
    "username": "mailer",
    "password": "smtp-password",
    "from_email": "noreply@example.com",
    "use_tls": "true",
}


def _smtp_mock() -> mock.MagicMock:
    smtp = mock.MagicMock()
    smtp.__aenter__.return_value = smtp
    smtp.__aexit__.return_value = False
    smtp.starttls = mock.AsyncMock()
    smtp.login = mock.AsyncMock()
    return smtp


class TestEmailChannelProvider:
    @pytest.mark.asyncio
    async def test_starttls_login(self):
        smtp = _smtp_mock()

        with mock.patch(
            "providerhub.infrastructure.configuration.providers.notification.email.aiosmtplib.SMTP",
            return_value=smtp,
        ) as smtp_cls:
            success, detail = await EmailChannelProvider().check(EMAIL_VALUES)

        assert success is True
        assert detail == "SMTP login to smtp.example.com:587 succeeded"
        assert smtp_cls.call_args.kwargs["use_tls"] is False
        smtp.starttls.assert_awaited_once()
        smtp.login.assert_awaited_once_with("mailer", "smtp-password")

    @pytest.mark.asyncio
    async def test_implicit_tls_on_465(self):
        smtp = _smtp_mock()

        with mock.patch(
            "providerhub.infrastructure.configuration.providers.notification.email.aiosmtplib.SMTP",
            return_value=smtp,
        ) as smtp_cls:
            success, _ = await EmailChannelProvider().check({**EMAIL_VALUES, "port": "465"})

        assert success is True
        assert smtp_cls.call_args.kwargs["use_tls"] is True
        smtp.starttls.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authentication_failure(self):
        smtp = _smtp_mock()
        smtp.login.side_effect = aiosmtplib.SMTPAuthenticationError(535, "Authentication failed")

        with mock.patch(
            "providerhub.infrastructure.configuration.providers.notification.email.aiosmtplib.SMTP",
            return_value=smtp,
        ):
            success, detail = await EmailChannelProvider().check(EMAIL_VALUES)

        assert success is False
        assert detail.startswith("SMTP connection failed")

    @pytest.mark.asyncio
    async def test_non_numeric_port(self):
        success, detail = await EmailChannelProvider().check({**EMAIL_VALUES, "port": "smtp"})

        assert success is False
        assert "must be a number" in detail


class TestSmsChannelProvider:
    VALUES = {"username": "skebby-user", "password": "skebby-pass"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_login_success(self):
        route = respx.get(host="api.skebby.it", path="/API/v1.0/REST/login").respond(
            200, text="USER_KEY;SESSION_KEY"
        )

        success, _ = await SmsChannelProvider().check(self.VALUES)

        assert success is True
        assert route.calls.last.request.url.params["username"] == "skebby-user"

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_credentials(self):
        respx.get(host="api.skebby.it", path="/API/v1.0/REST/login").respond(401)

        success, detail = await SmsChannelProvider().check(self.VALUES)

        assert success is False
        assert detail == "SMS gateway rejected the credentials"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_body(self):
        respx.get(host="api.skebby.it", path="/API/v1.0/REST/login").respond(200, text="OK")

        success, detail = await SmsChannelProvider().check(self.VALUES)

        assert success is False
        assert "unexpected response" in detail


class TestWhatsAppChannelProvider:
    VALUES = {"account_sid": "AC123", "auth_token": "twilio-token", "from_number": "+390000000"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_active_account(self):
        respx.get("https://api.twilio.com/2010-04-01/Accounts/AC123.json").respond(
            200, json={"sid": "AC123", "status": "active"}
        )

        success, detail = await WhatsAppChannelProvider().check(self.VALUES)

        assert success is True
        assert detail == "Twilio account is active"

    @pytest.mark.asyncio
    @respx.mock
    async def test_suspended_account(self):
        respx.get("https://api.twilio.com/2010-04-01/Accounts/AC123.json").respond(
            200, json={"sid": "AC123", "status": "suspended"}
        )

        success, detail = await WhatsAppChannelProvider().check(self.VALUES)

        assert success is False
        assert "suspended" in detail

    @pytest.mark.asyncio
    @respx.mock
    async def test_bad_token(self):
        respx.get("https://api.twilio.com/2010-04-01/Accounts/AC123.json").respond(
            401, json={"code": 20003, "message": "Authenticate"}
        )

        success, detail = await WhatsAppChannelProvider().check(self.VALUES)

        assert success is False
        assert detail == "Twilio authentication failed: Authenticate"


class TestTelegramChannelProvider:
    GET_ME = "https://api.telegram.org/bot123456:ABC-token/getMe"
    VALUES = {"bot_token": "123456:ABC-token", "bot_username": "@AcmeNotifyBot"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_valid_token(self):
        respx.get(self.GET_ME).respond(
            200, json={"ok": True, "result": {"id": 123456, "is_bot": True, "username": "AcmeNotifyBot"}}
        )

        success, detail = await TelegramChannelProvider().check(self.VALUES)

        assert success is True
        assert detail == "Connected to bot @AcmeNotifyBot"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unauthorized_token(self):
        respx.get(self.GET_ME).respond(
            401, json={"ok": False, "error_code": 401, "description": "Unauthorized"}
        )

        success, detail = await TelegramChannelProvider().check(self.VALUES)

        assert success is False
        assert detail == "Telegram rejected the bot token: Unauthorized"

    @pytest.mark.asyncio
    @respx.mock
    async def test_username_mismatch(self):
        respx.get(self.GET_ME).respond(
            200, json={"ok": True, "result": {"id": 123456, "username": "OtherBot"}}
        )

        success, detail = await TelegramChannelProvider().check(self.VALUES)

        assert success is False
        assert "@OtherBot" in detail

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self):
        respx.get(self.GET_ME).mock(side_effect=httpx.ConnectError("connection refused"))

        success, detail = await TelegramChannelProvider().check({"bot_token": "123456:ABC-token"})

        assert success is False
        assert detail.startswith("Connectivity error to Telegram")


class TestWebhookChannelProvider:
    @pytest.mark.asyncio
    @respx.mock
    async def test_signed_ping(self):
        route = respx.post("https://hooks.example.com/notify").respond(204)

        success, _ = await WebhookChannelProvider().check(
            {"url": "https://hooks.example.com/notify", "signing_secret": "whsec"}
        )

        assert success is True
        request = route.calls.last.request
        assert json.loads(request.content) == {"event": "ping"}
        assert request.headers["X-Signature"] == sign_payload("whsec", request.content)

    @pytest.mark.asyncio
    @respx.mock
    async def test_unsigned_ping(self):
        route = respx.post("https://hooks.example.com/notify").respond(200)

        success, _ = await WebhookChannelProvider().check({"url": "https://hooks.example.com/notify"})

        assert success is True
        assert "X-Signature" not in route.calls.last.request.headers

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self):
        respx.post("https://hooks.example.com/notify").respond(500)

        success, detail = await WebhookChannelProvider().check({"url": "https://hooks.example.com/notify"})

        assert success is False
        assert "500" in detail

    @pytest.mark.asyncio
    async def test_invalid_scheme(self):
        success, detail = await WebhookChannelProvider().check({"url": "ftp://hooks.example.com"})

        assert success is False
        assert "http://" in detail
