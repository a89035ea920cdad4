"""
Email delivery over SMTP.

Sends a single plain-text message per notification using STARTTLS (port
587 by default, implicit TLS on 465). Without host, login, password and
recipient the notifier is a no-op.
"""

import smtplib
from email.message import EmailMessage
from typing import Optional

from .base import Notifier
from ..errors import DeliveryError, ErrorCode


class EmailNotifier(Notifier):
    """SMTP email channel."""

    channel = "email"

    def __init__(
        self,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        recipient: str = "",
        sender: str = "",
        timeout: float = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.recipient = recipient
        self.sender = sender or user
        self.timeout = timeout

    def is_configured(self) -> bool:
        return all([self.host, self.user, self.password, self.recipient])

    def build_message(self, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg.set_content(body)
        return msg

    def notify(self, title: str, message: str, url: Optional[str] = None) -> bool:
        """
        Send one email with title as subject.

        The summary already carries its Link: line, so url is not appended.

        Raises:
            DeliveryError: On authentication, SMTP or socket failure
        """
        if not self.is_configured():
            return False

        msg = self.build_message(title, message)

        try:
            if self.port == 465:
                server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                if self.port != 465:
                    server.starttls()
                server.login(self.user, self.password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            raise DeliveryError(ErrorCode.DELIVERY_AUTH_FAILED, f"SMTP login failed: {e.smtp_code}")
        except smtplib.SMTPException as e:
            raise DeliveryError(ErrorCode.DELIVERY_SEND_FAILED, str(e))
        except OSError as e:
            raise DeliveryError(ErrorCode.DELIVERY_NETWORK_ERROR, str(e))

        return True
