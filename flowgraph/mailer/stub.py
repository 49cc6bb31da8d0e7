import logging
from email.mime.text import MIMEText
from typing import Any, Mapping

from flowgraph.core.models import utcnow
from flowgraph.mailer.base import Mailer
from flowgraph.template import render_template

logger = logging.getLogger(__name__)


class StubMailer(Mailer):
    """Builds the message but never sends it"""

    def __init__(self, from_address: str = "weather-alerts@checkbox.com"):
        self.from_address = from_address
        self.outbox: list[MIMEText] = []

    def build_message(self, to: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body, "plain", "utf-8")
        msg["From"] = self.from_address
        msg["To"] = to
        msg["Subject"] = subject
        return msg

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        variables: Mapping[str, Any],
    ) -> dict[str, Any]:
        rendered_subject = render_template(subject, variables)
        rendered_body = render_template(body, variables)

        self.outbox.append(self.build_message(to, rendered_subject, rendered_body))
        logger.debug(f"[STUB EMAIL] Would send: To={to}, Subject={rendered_subject}")

        return {
            "to": to,
            "from": self.from_address,
            "subject": rendered_subject,
            "body": rendered_body,
            "variables": dict(variables),
            "timestamp": utcnow().isoformat(),
        }
