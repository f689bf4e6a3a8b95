# tests/services/test_mailer.py
import aiosmtplib
import pytest

from task_tracker.config import Settings
from task_tracker.services.mailer import SMTPTransport, TransportError


@pytest.fixture
def smtp_settings():
    return Settings(
        SMTP_HOST="smtp.example.com",
        SMTP_PORT=2525,
        SMTP_USER="reminders@example.com",
        SMTP_PASSWORD="secret",
    )


def test_transport_reads_injected_settings(smtp_settings):
    transport = SMTPTransport(smtp_settings)

    assert transport.hostname == "smtp.example.com"
    assert transport.port == 2525
    assert transport.from_email == "reminders@example.com"
    assert transport.start_tls is True
    assert transport.use_tls is False


def test_implicit_tls_disables_starttls():
    transport = SMTPTransport(Settings(SMTP_USER="a@example.com", SMTP_USE_TLS=True))
    assert transport.use_tls is True
    assert transport.start_tls is False


@pytest.mark.asyncio
async def test_send_returns_message_id(monkeypatch, smtp_settings):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))
        return {}, "OK"

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    transport = SMTPTransport(smtp_settings)
    message_id = await transport.send("owner@example.com", "Reminder", "<p>Hi</p>")

    assert len(calls) == 1
    message, kwargs = calls[0]
    assert message["To"] == "owner@example.com"
    assert message["From"] == "reminders@example.com"
    assert message["Message-ID"] == message_id
    assert kwargs["hostname"] == "smtp.example.com"
    assert kwargs["port"] == 2525


@pytest.mark.asyncio
async def test_send_wraps_smtp_errors(monkeypatch, smtp_settings):
    async def failing_send(message, **kwargs):
        raise aiosmtplib.SMTPException("mailbox unavailable")

    monkeypatch.setattr(aiosmtplib, "send", failing_send)

    with pytest.raises(TransportError, match="mailbox unavailable"):
        await SMTPTransport(smtp_settings).send("owner@example.com", "Reminder", "<p>Hi</p>")


@pytest.mark.asyncio
async def test_send_wraps_connection_errors(monkeypatch, smtp_settings):
    async def refused(message, **kwargs):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(aiosmtplib, "send", refused)

    with pytest.raises(TransportError):
        await SMTPTransport(smtp_settings).send("owner@example.com", "Reminder", "<p>Hi</p>")


@pytest.mark.asyncio
async def test_unconfigured_transport_fails():
    transport = SMTPTransport(Settings(SMTP_USER=None, SMTP_FROM=None))

    with pytest.raises(TransportError, match="not configured"):
        await transport.send("owner@example.com", "Reminder", "<p>Hi</p>")
