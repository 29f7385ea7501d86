from __future__ import annotations

import smtplib
from unittest import mock

import pytest

from resume_chat.clients.mailer import Mailer, MailerError
from resume_chat.config import Settings


def configured_settings(port=587) -> Settings:
    return Settings(
        email_host="smtp.test",
        email_port=port,
        email_user="bot@example.com",
        email_pass="hunter2",
    )


def test_send_uses_starttls_when_offered():
    with mock.patch("resume_chat.clients.mailer.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        server.has_extn.return_value = True

        Mailer(configured_settings()).send("jane@example.com", "Hello", "Body", html="<p>Body</p>")

    smtp_cls.assert_called_once_with("smtp.test", 587, timeout=20)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("bot@example.com", "hunter2")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "jane@example.com"
    assert message["Subject"] == "Hello"
    assert message["From"] == "MCP Server <bot@example.com>"
    assert message.is_multipart()


def test_send_uses_implicit_tls_on_port_465():
    with mock.patch("resume_chat.clients.mailer.smtplib.SMTP_SSL") as smtp_ssl:
        server = smtp_ssl.return_value.__enter__.return_value

        Mailer(configured_settings(port=465)).send("jane@example.com", "Hi", "Body")

    server.send_message.assert_called_once()


def test_send_without_configuration_raises():
    with pytest.raises(MailerError, match="not configured"):
        Mailer(Settings()).send("jane@example.com", "Hi", "Body")


def test_send_wraps_smtp_errors():
    with mock.patch("resume_chat.clients.mailer.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        server.has_extn.return_value = False
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"denied")

        with pytest.raises(MailerError):
            Mailer(configured_settings()).send("jane@example.com", "Hi", "Body")


def test_notify_skips_when_unconfigured():
    with mock.patch("resume_chat.clients.mailer.smtplib.SMTP") as smtp_cls:
        assert Mailer(Settings()).notify("jane@example.com", "Hi", "Body") is False
    smtp_cls.assert_not_called()


def test_notify_upload_reports_failure_without_raising():
    mailer = Mailer(configured_settings())
    with mock.patch.object(mailer, "send", side_effect=MailerError("boom")) as send:
        assert mailer.notify_upload("jane@example.com", "jane.pdf") is False

    recipient, subject, body = send.call_args.args[:3]
    assert subject == "CV Processed: jane.pdf"
    assert "jane.pdf" in body
