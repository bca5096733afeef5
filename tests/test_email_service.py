import base64

import pytest

from email_agent.mailer import (
    APP_PASSWORD_HINT,
    Attachment,
    EmailConfig,
    EmailConfigError,
    EmailData,
    EmailService,
    plain_text_to_html,
)

from conftest import FakeSMTP, FakeTransportFactory


def gmail_config(**overrides):
    values = {"service": "gmail", "user": "jane@gmail.com", "password": "abcdefghijklmnop"}
    values.update(overrides)
    return EmailConfig(**values)


def test_valid_gmail_config_has_no_errors():
    assert gmail_config().validation_errors() == []


@pytest.mark.parametrize("password", ["short", "abcd efgh ijkl mnop", "abcdefghijklmnopq"])
def test_gmail_requires_an_app_password(password):
    errors = gmail_config(password=password).validation_errors()

    assert errors == [APP_PASSWORD_HINT]


def test_malformed_sender_address_is_rejected():
    config = EmailConfig(service="outlook", user="not-an-address", password="secret")

    with pytest.raises(EmailConfigError) as excinfo:
        config.validate()

    assert "Sender email address is not valid" in excinfo.value.errors


def test_smtp_settings_per_service():
    assert gmail_config().smtp_settings().port == 465
    assert EmailConfig(service="outlook").smtp_settings().host == "smtp-mail.outlook.com"

    custom = EmailConfig(service="smtp", host="mail.example.com", port=2525, secure=True).smtp_settings()
    assert (custom.host, custom.port, custom.use_ssl) == ("mail.example.com", 2525, True)


def test_from_dict_accepts_string_port():
    config = EmailConfig.from_dict({"service": "SMTP", "user": " a@b.co ", "password": "x", "port": "587"})

    assert config.service == "smtp"
    assert config.user == "a@b.co"
    assert config.port == 587


def test_plain_text_to_html_escapes_and_breaks_lines():
    html = plain_text_to_html("Dear <Bob>,\n\nLine one\nLine two")

    assert html == "<p>Dear &lt;Bob&gt;,</p><p>Line one<br>Line two</p>"


def test_send_builds_multipart_message_with_attachment(mail_config):
    transport = FakeTransportFactory()
    service = EmailService(gmail_config(), mail_config, transport)
    pdf = base64.b64encode(b"%PDF-1.4 resume").decode("ascii")

    result = service.send_email(EmailData(
        to="hr@acme.com",
        subject="Application",
        body="Dear Bob,\n\nHello.",
        attachments=[Attachment(filename="resume.pdf", content=pdf)],
    ))

    assert result.success
    assert result.message_id.endswith("@gmail.com>")
    message = transport.smtp.sent[0]
    assert message["To"] == "hr@acme.com"
    assert message.get_body(("plain",)).get_content().startswith("Dear Bob,")
    assert "<p>Dear Bob,</p>" in message.get_body(("html",)).get_content()
    attachment = next(message.iter_attachments())
    assert attachment.get_filename() == "resume.pdf"
    assert attachment.get_content() == b"%PDF-1.4 resume"
    assert transport.smtp.closed


def test_authentication_failure_is_reported_not_raised(mail_config):
    transport = FakeTransportFactory(FakeSMTP(fail_login=True))
    service = EmailService(gmail_config(), mail_config, transport)

    result = service.send_email(EmailData(to="hr@acme.com", subject="Hi", body="Body"))

    assert not result.success
    assert "App Password" in result.error


def test_transport_error_is_reported(mail_config):
    transport = FakeTransportFactory(FakeSMTP(fail_send_to={"hr@acme.com"}))
    service = EmailService(gmail_config(), mail_config, transport)

    result = service.send_email(EmailData(to="hr@acme.com", subject="Hi", body="Body"))

    assert not result.success
    assert result.error


def test_invalid_config_never_opens_a_connection(mail_config):
    transport = FakeTransportFactory()
    service = EmailService(gmail_config(password="wrong"), mail_config, transport)

    result = service.send_email(EmailData(to="hr@acme.com", subject="Hi", body="Body"))

    assert not result.success
    assert transport.settings == []


def test_bad_attachment_is_reported(mail_config):
    service = EmailService(gmail_config(), mail_config, FakeTransportFactory())

    result = service.send_email(EmailData(
        to="hr@acme.com",
        subject="Hi",
        body="Body",
        attachments=[Attachment(filename="resume.pdf", content="***not base64***")],
    ))

    assert not result.success
    assert "base64" in result.error
