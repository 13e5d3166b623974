from typing import Any

from fastapi_mail import MessageType
import pytest

from src.core.email_service import dependencies as email_dependencies
from src.core.email_service import fastapi_mailer
from src.core.email_service.recording_mailer import RecordingMailer
from src.core.email_service.service import EmailService
from tests.email.mocks import FailingMailer


@pytest.mark.asyncio
async def test_send_email_valid(
    email_service: EmailService, recording_mailer: RecordingMailer
) -> None:
    await email_service.send_email(
        subject="Hello", recipients=["user@example.com"], body="Text body"
    )

    message = recording_mailer.check_message()
    assert message is not None
    assert message.subject == "Hello"
    assert message.recipients == ["user@example.com"]
    assert message.body == "Text body"
    assert message.subtype == MessageType.plain.value


@pytest.mark.asyncio
async def test_send_email_recipient_as_string(
    email_service: EmailService, recording_mailer: RecordingMailer
) -> None:
    await email_service.send_email(
        subject="Single", recipients="string@example.com", body="x"
    )

    message = recording_mailer.check_message()
    assert message is not None
    assert message.recipients == ["string@example.com"]


@pytest.mark.asyncio
async def test_send_email_skips_invalid_recipients(
    email_service: EmailService, recording_mailer: RecordingMailer
) -> None:
    await email_service.send_email(
        subject="Mixed",
        recipients=["valid@example.com", "invalid-email", "also@valid.com"],
        body="x",
    )

    message = recording_mailer.check_message()
    assert message is not None
    assert message.recipients == ["valid@example.com", "also@valid.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize("recipients", [[], ["bad-email", "another-bad"]])
async def test_send_email_without_valid_recipients(
    email_service: EmailService,
    recording_mailer: RecordingMailer,
    recipients: list[str],
) -> None:
    with pytest.raises(ValueError, match="No valid recipient emails provided."):
        await email_service.send_email(subject="None", recipients=recipients, body="x")

    assert recording_mailer.check_message() is None


@pytest.mark.asyncio
async def test_send_email_reraises_transport_errors() -> None:
    mailer = FailingMailer()

    with pytest.raises(ConnectionRefusedError):
        await EmailService(mailer).send_email(
            subject="Down", recipients="user@example.com", body="x"
        )

    assert mailer.attempts == 1


@pytest.mark.asyncio
async def test_recording_mailer_keeps_only_last_message() -> None:
    mailer = RecordingMailer()

    await mailer.send_message("first", ["a@example.com"], "1")
    await mailer.send_message("second", ["b@example.com"], "2")

    message = mailer.check_message()
    assert message is not None
    assert message.subject == "second"
    assert mailer.sent_count == 2
    assert mailer.check_message() is None


@pytest.mark.asyncio
async def test_fastapi_mailer_sends_plain_message(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    sent: list[Any] = []

    class FakeFastMail:
        def __init__(self, config: Any) -> None:
            self.config = config

        async def send_message(self, message: Any) -> None:
            sent.append(message)

    monkeypatch.setattr(fastapi_mailer, "FastMail", FakeFastMail)
    mailer = fastapi_mailer.FastAPIMailer(config=object())  # type: ignore[arg-type]

    await mailer.send_message("Subject", ["user@example.com"], "Body")

    assert len(sent) == 1
    assert sent[0].subject == "Subject"
    assert sent[0].body == "Body"
    assert [getattr(r, "email", r) for r in sent[0].recipients] == [
        "user@example.com"
    ]


def test_get_mailer_records_under_testing() -> None:
    email_dependencies.get_mailer.cache_clear()
    try:
        assert isinstance(email_dependencies.get_mailer(), RecordingMailer)
        assert isinstance(email_dependencies.get_email_service(), EmailService)
    finally:
        email_dependencies.get_mailer.cache_clear()


def test_get_mailer_disabled_without_transport(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    app_config = email_dependencies.config.app.model_copy(update={"TESTING": False})
    broadcasting = email_dependencies.config.broadcasting.model_copy(
        update={"EMAIL_SERVER": ""}
    )
    fake_config = email_dependencies.config.model_copy(
        update={"app": app_config, "broadcasting": broadcasting}
    )
    monkeypatch.setattr(email_dependencies, "config", fake_config)
    email_dependencies.get_mailer.cache_clear()
    try:
        assert email_dependencies.get_mailer() is None
        assert email_dependencies.get_email_service() is None
    finally:
        email_dependencies.get_mailer.cache_clear()
