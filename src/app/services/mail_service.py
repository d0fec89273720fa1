import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class MailResult(BaseModel):
    """Outcome of a single send attempt"""

    success: bool
    error: Optional[str] = None


class IMailService(ABC):
    """Outbound mail capability - application layer"""

    @abstractmethod
    async def send(
        self, to: str, subject: str, template: str, context: Dict[str, Any]
    ) -> MailResult:
        """
        Render a template and deliver it.

        Implementations report delivery problems in the MailResult instead of
        raising, and bound every network call with a timeout.
        """
        pass


async def send_notification(
    mail_service: IMailService,
    to: str,
    subject: str,
    template: str,
    context: Dict[str, Any],
) -> bool:
    """
    Best-effort delivery: failures are logged and reported as False, never raised.
    """
    try:
        result = await mail_service.send(to, subject, template, context)
    except Exception:
        logger.exception("Unexpected error sending '%s' mail", template)
        return False

    if not result.success:
        logger.error("Failed to send '%s' mail: %s", template, result.error)
        return False
    return True
