from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class EmailTemplate:
    """Subject and body with {{name}} placeholders"""

    subject: str = ""
    body: str = ""

    @classmethod
    def from_metadata(cls, raw: Any) -> "EmailTemplate":
        if not isinstance(raw, dict):
            return cls()
        subject = raw.get("subject")
        body = raw.get("body")
        return cls(
            subject=subject if isinstance(subject, str) else "",
            body=body if isinstance(body, str) else "",
        )


class MailerError(Exception):
    """Raised by a mailer when a message cannot be dispatched"""

    pass


class Mailer(ABC):
    """Base class for mail dispatchers"""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        variables: Mapping[str, Any],
    ) -> dict[str, Any]:
        """
        Render subject and body with variables and dispatch.

        Returns a receipt with the rendered subject and body. Transports raise
        MailerError (or an OSError from the socket layer) when delivery fails.
        """
        pass
