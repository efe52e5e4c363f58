"""Sends verification and password reset email over SMTP."""

import logging
import smtplib
from email.message import EmailMessage

from ..domain import MailResult

logger = logging.getLogger(__name__)

TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2>{heading}</h2>
  <p>{intro}</p>
  <p><a href="{url}">{action}</a></p>
  <p>If you didn't request this, please ignore this email.</p>
  <p>Or copy and paste this link in your browser:<br>{url}</p>
</div>
"""


class MailDispatcher(object):
    """A session with an SMTP service.

    Connections are opened per message; the dispatcher itself is shared by
    every request and holds no open socket between sends.
    """

    def __init__(self, host: str = "localhost", port: int = 1025,
                 sender: str = '"No Reply" <no-reply@example.com>',
                 timeout: float = 30) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._timeout = timeout

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port,
                            timeout=self._timeout)

    def verify(self) -> bool:
        """Check that the SMTP service answers."""
        try:
            with self._new_connection() as conn:
                conn.noop()
        except (OSError, smtplib.SMTPException) as e:
            logger.warning('Mail server %s:%s unreachable: %s',
                           self._host, self._port, e)
            return False
        return True

    def _message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message['From'] = self._sender
        message['To'] = to
        message['Subject'] = subject
        message.set_content(html, subtype='html')
        return message

    def send(self, to: str, subject: str, html: str) -> MailResult:
        """Send one message. Failures are reported, not raised."""
        if not to:
            return MailResult(False, 'Missing required parameter: to')
        try:
            with self._new_connection() as conn:
                conn.send_message(self._message(to, subject, html))
        except (OSError, smtplib.SMTPException) as e:
            logger.error('Error sending email: %s', e)
            return MailResult(False, str(e) or 'Failed to send email')
        logger.info('Email "%s" sent', subject)
        return MailResult(True, 'Email sent successfully')

    def send_verification_email(self, to: str, url: str) -> MailResult:
        if not url:
            return MailResult(False, 'Missing required parameter: url')
        html = TEMPLATE.format(
            heading='Email Verification',
            intro='Thank you for registering! Please verify your email address.',
            action='Verify Email',
            url=url,
        )
        return self.send(to, 'Verify Your Email', html)

    def send_password_reset_email(self, to: str, url: str) -> MailResult:
        if not url:
            return MailResult(False, 'Missing required parameter: url')
        html = TEMPLATE.format(
            heading='Password Reset',
            intro='A password reset was requested for your account.',
            action='Reset Password',
            url=url,
        )
        return self.send(to, 'Reset Your Password', html)
