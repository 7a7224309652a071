"""
SMTP mail sender for order notifications

Builds text messages, with an optional HTML alternative, using ``email.message``
and delivers them with ``aiosmtplib`` (STARTTLS or direct SSL). Notification
jobs run in worker threads, so each send drives its own event loop.
Without an SMTP host the message is written to the log instead, which is the
development default.
"""

import asyncio
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Iterable, Optional
import aiosmtplib
from marketplace.logger import get_logger

logger = get_logger("marketplace.services.notifications.mail")


class SmtpMailSender:
    """SMTP delivery, called from notification workers"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        use_ssl: bool = False,
        sender_alias: str = "Marketplace Orders",
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.sender_alias = sender_alias
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'SmtpMailSender':
        port = int(config.get('SMTP_PORT', 587))
        return cls(
            host=config.get('SMTP_HOST'),
            port=port,
            username=config.get('SMTP_USER'),
            password=config.get('SMTP_PASS'),
            use_tls=config.get('SMTP_USE_TLS', True),
            use_ssl=port == 465,
            sender_alias=config.get('MAIL_SENDER_ALIAS', 'Marketplace Orders'),
        )

    @property
    def from_address(self) -> str:
        return formataddr((self.sender_alias, self.username or 'no-reply@localhost'))

    def build_message(self, recipients: Iterable[str], subject: str, body: str, html: Optional[str] = None) -> EmailMessage:
        message = EmailMessage()
        message['From'] = self.from_address
        message['To'] = ', '.join(recipients)
        message['Subject'] = subject
        message['Date'] = formatdate(localtime=True)
        message['Message-ID'] = make_msgid()
        message.set_content(body)
        if html:
            message.add_alternative(html, subtype='html')
        return message

    async def deliver(self, message: EmailMessage) -> None:
        # use_tls in aiosmtplib means implicit SSL on connect
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username or None,
            password=self.password or None,
            use_tls=self.use_ssl,
            start_tls=self.use_tls and not self.use_ssl,
            timeout=self.timeout,
        )

    def send(self, recipients: Iterable[str], subject: str, body: str, html: Optional[str] = None) -> bool:
        """
        Send one message to all recipients.

        Returns True on delivery (or when logged in place of delivery),
        False when the transport failed. Transport errors are logged here.
        """
        recipients = [r for r in recipients if r]
        if not recipients:
            logger.debug(f"No recipients for '{subject}', skipping")
            return False

        message = self.build_message(recipients, subject, body, html)

        if not self.host:
            logger.info(f"SMTP_HOST not configured, logging mail instead: to={recipients} subject='{subject}'")
            logger.debug(body)
            return True

        try:
            asyncio.run(self.deliver(message))
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {recipients}: {type(e).__name__}: {e}")
            return False

        logger.info(f"Mail sent: '{subject}' to {len(recipients)} recipient(s)")
        return True
