"""
Mail delivery backends.

Both render Jinja2 templates from the templates/ directory next to this
module. ConsoleMailService logs the rendered mail instead of sending it and is
meant for development and tests; FastMailService delivers over SMTP.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import Environment, FileSystemLoader, TemplateError

from src.app.services.mail_service import IMailService, MailResult

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(template).render(**context)


class ConsoleMailService(IMailService):
    def __init__(self, renderer: Optional[TemplateRenderer] = None):
        self.renderer = renderer or TemplateRenderer()

    async def send(
        self, to: str, subject: str, template: str, context: Dict[str, Any]
    ) -> MailResult:
        try:
            body = self.renderer.render(template, context)
        except TemplateError as e:
            return MailResult(success=False, error=f"Template rendering failed: {e}")

        logger.info("Console mail to %s: %s (%d chars)", to, subject, len(body))
        logger.debug("Console mail body:\n%s", body)
        return MailResult(success=True)


class FastMailService(IMailService):
    def __init__(self, config: ConnectionConfig, renderer: Optional[TemplateRenderer] = None):
        self.fastmail = FastMail(config)
        self.renderer = renderer or TemplateRenderer()

    @classmethod
    def from_config(cls, app_config) -> "FastMailService":
        config = ConnectionConfig(
            MAIL_USERNAME=app_config.MAIL_USERNAME or "",
            MAIL_PASSWORD=app_config.MAIL_PASSWORD or "",
            MAIL_FROM=app_config.MAIL_FROM,
            MAIL_FROM_NAME=app_config.MAIL_FROM_NAME,
            MAIL_PORT=app_config.MAIL_PORT,
            MAIL_SERVER=app_config.MAIL_SERVER,
            MAIL_STARTTLS=app_config.MAIL_STARTTLS,
            MAIL_SSL_TLS=app_config.MAIL_SSL_TLS,
            USE_CREDENTIALS=bool(app_config.MAIL_USERNAME and app_config.MAIL_PASSWORD),
            VALIDATE_CERTS=True,
            TIMEOUT=app_config.MAIL_TIMEOUT,
        )
        return cls(config)

    async def send(
        self, to: str, subject: str, template: str, context: Dict[str, Any]
    ) -> MailResult:
        try:
            body = self.renderer.render(template, context)
        except TemplateError as e:
            return MailResult(success=False, error=f"Template rendering failed: {e}")

        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=body,
            subtype=MessageType.html,
        )
        try:
            await self.fastmail.send_message(message)
        except Exception as e:
            logger.warning("SMTP delivery of '%s' failed: %s", template, e)
            return MailResult(success=False, error=str(e))

        logger.info("Sent '%s' mail", template)
        return MailResult(success=True)
