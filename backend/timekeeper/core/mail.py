# backend/timekeeper/core/mail.py

from typing import Protocol

import structlog

from timekeeper.core.config import settings
from timekeeper.models.user import User

logger = structlog.get_logger()


class MailService(Protocol):
    async def send_activation_mail(self, email: str, token: str, name: str) -> None: ...

    async def send_reset_password_mail(self, user: User) -> None: ...


class LoggingMailService:
    """
    Default MailService: renders the mail and logs it instead of delivering it.
    `sent` keeps every rendered mail (handy for local runs and tests).
    """

    def __init__(self, sender: str = settings.MAIL_SENDER, frontend_url: str = settings.FRONTEND_URL):
        self.sender = sender
        self.frontend_url = frontend_url.rstrip("/")
        self.sent: list[dict] = []

    async def send_activation_mail(self, email: str, token: str, name: str) -> None:
        body = (
            f"Hello {name},\n\n"
            f"Activate your account: {self.frontend_url}/activate?name={name}&token={token}\n"
        )
        self._deliver(email, "Activate your Timekeeper account", body)

    async def send_reset_password_mail(self, user: User) -> None:
        body = (
            f"Hello {user.name},\n\n"
            f"Reset your password: {self.frontend_url}/reset-password"
            f"?name={user.name}&token={user.reset_password_token}\n"
        )
        self._deliver(user.email, "Reset your Timekeeper password", body)

    def _deliver(self, to: str, subject: str, body: str) -> None:
        self.sent.append({"from": self.sender, "to": to, "subject": subject, "body": body})
        logger.info("mail_sent", to=to, subject=subject)
