"""Mail dispatch for email nodes."""

from flowgraph.mailer.base import EmailTemplate, Mailer, MailerError
from flowgraph.mailer.stub import StubMailer

__all__ = ["EmailTemplate", "Mailer", "MailerError", "StubMailer"]
