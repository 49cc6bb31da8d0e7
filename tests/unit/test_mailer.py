"""
Unit tests for mail dispatch.
"""

import logging

from flowgraph.mailer import EmailTemplate, StubMailer


class TestEmailTemplate:
    """Tests for EmailTemplate."""

    def test_from_metadata(self):
        template = EmailTemplate.from_metadata({"subject": "Alert", "body": "Hi {{name}}"})
        assert template.subject == "Alert"
        assert template.body == "Hi {{name}}"

    def test_from_invalid_metadata(self):
        assert EmailTemplate.from_metadata(None) == EmailTemplate()
        assert EmailTemplate.from_metadata({"subject": 1, "body": None}) == EmailTemplate()


class TestStubMailer:
    """Tests for StubMailer."""

    def test_send_renders_and_records(self):
        mailer = StubMailer()

        receipt = mailer.send(
            "alice@example.com",
            "Alert for {{city}}",
            "Temperature is {{temperature}}°C",
            {"city": "Sydney", "temperature": 25.5},
        )

        assert receipt["to"] == "alice@example.com"
        assert receipt["from"] == "weather-alerts@checkbox.com"
        assert receipt["subject"] == "Alert for Sydney"
        assert receipt["body"] == "Temperature is 25.5°C"
        assert receipt["variables"] == {"city": "Sydney", "temperature": 25.5}

        message = mailer.outbox[0]
        assert message["To"] == "alice@example.com"
        assert message["Subject"] == "Alert for Sydney"
        assert message.get_payload(decode=True).decode("utf-8") == "Temperature is 25.5°C"

    def test_custom_from_address(self):
        mailer = StubMailer(from_address="alerts@example.com")
        receipt = mailer.send("bob@example.com", "s", "b", {})

        assert receipt["from"] == "alerts@example.com"
        assert mailer.outbox[0]["From"] == "alerts@example.com"

    def test_logs_instead_of_sending(self, caplog):
        mailer = StubMailer()
        with caplog.at_level(logging.DEBUG, logger="flowgraph.mailer.stub"):
            mailer.send("bob@example.com", "Weather Alert", "body", {})

        assert "[STUB EMAIL] Would send: To=bob@example.com, Subject=Weather Alert" in caplog.text
