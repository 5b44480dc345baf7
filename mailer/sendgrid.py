"""Weekly report delivery over the SendGrid v3 mail API."""

import base64
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from mailer.templates import generate_email_html, generate_email_text
from models.parcel import CleanedSale, DateRange
from utils.output_writer import cleaned_sales_to_csv_string, generate_filename

logger = logging.getLogger(__name__)


class SendGridMailer:
    """Send report and test emails through SendGrid."""

    API_URL = "https://api.sendgrid.com/v3/mail/send"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        config: Dict[str, Any],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize mailer.

        Args:
            config: Full configuration dictionary (reads the "email" section)
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.config = config
        email = config.get("email", {})
        self.api_key = email.get("sendgrid_api_key", "")
        self.email_to = email.get("to", "")
        self.email_from = email.get("from", "")
        self.county_name = config.get("county_name", "")
        self.transport = transport

    @property
    def recipients(self) -> List[str]:
        """EMAIL_TO may hold several comma-separated addresses."""
        return [address.strip() for address in self.email_to.split(",") if address.strip()]

    def is_configured(self) -> bool:
        return bool(self.api_key and self.recipients)

    def build_report_message(
        self, sales: List[CleanedSale], date_range: DateRange
    ) -> Dict[str, Any]:
        """SendGrid v3 payload for the weekly report, CSV attached."""
        csv_content = cleaned_sales_to_csv_string(sales)
        attachment_name = generate_filename(
            f"new_homeowners_{self.county_name.lower().replace(' ', '_')}",
            date_range.label,
            "csv",
        )

        return {
            "personalizations": [{"to": [{"email": address} for address in self.recipients]}],
            "from": {"email": self.email_from},
            "subject": (
                f"New Homeowners Report - {self.county_name} County - {date_range.label}"
            ),
            "content": [
                {"type": "text/plain", "value": generate_email_text(sales, date_range, self.county_name)},
                {
                    "type": "text/html",
                    "value": generate_email_html(
                        sales, date_range, self.county_name, self.config.get("email", {})
                    ),
                },
            ],
            "attachments": [
                {
                    "content": base64.b64encode(csv_content.encode("utf-8")).decode("ascii"),
                    "filename": attachment_name,
                    "type": "text/csv",
                    "disposition": "attachment",
                }
            ],
        }

    def build_test_message(self) -> Dict[str, Any]:
        sent_at = datetime.now().isoformat(timespec="seconds")
        return {
            "personalizations": [{"to": [{"email": address} for address in self.recipients]}],
            "from": {"email": self.email_from},
            "subject": "New Homeowners Extractor - Test Email",
            "content": [
                {
                    "type": "text/plain",
                    "value": (
                        "This is a test email from the New Homeowners Extractor. If you "
                        "received this, your email configuration is working correctly."
                    ),
                },
                {
                    "type": "text/html",
                    "value": (
                        '<div style="font-family: sans-serif; padding: 20px;">'
                        '<h2 style="color: #059669;">✅ Email Configuration Test</h2>'
                        "<p>This is a test email from the New Homeowners Extractor.</p>"
                        "<p>If you received this, your email configuration is working correctly.</p>"
                        f'<p style="color: #6b7280; font-size: 12px;">Sent at: {sent_at}</p>'
                        "</div>"
                    ),
                },
            ],
        }

    async def _send(self, message: Dict[str, Any]) -> bool:
        """POST a message. Failures are logged and reported as False."""
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=httpx.Timeout(self.DEFAULT_TIMEOUT, connect=10.0),
            ) as client:
                response = await client.post(
                    self.API_URL,
                    json=message,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.TimeoutException as e:
            logger.error(f"SendGrid request timed out: {e}")
            return False
        except httpx.HTTPError as e:
            logger.error(f"SendGrid request failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(
                f"SendGrid rejected the message ({response.status_code}): {response.text[:500]}"
            )
            return False

        return True

    async def send_report(self, sales: List[CleanedSale], date_range: DateRange) -> bool:
        if not self.api_key:
            logger.warning("SendGrid API key not configured - skipping email")
            return False
        if not self.recipients:
            logger.warning("Email recipient not configured - skipping email")
            return False

        sent = await self._send(self.build_report_message(sales, date_range))
        if sent:
            logger.info(f"Report email sent to {self.email_to} ({len(sales)} sales)")
        return sent

    async def send_test(self) -> bool:
        if not self.is_configured():
            logger.warning("Email not configured - cannot send test")
            return False

        sent = await self._send(self.build_test_message())
        if sent:
            logger.info(f"Test email sent successfully to {self.email_to}")
        return sent


async def send_report_email(
    config: Dict[str, Any],
    sales: List[CleanedSale],
    date_range: DateRange,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Send the weekly report. Returns False (never raises) on failure."""
    return await SendGridMailer(config, transport).send_report(sales, date_range)


async def send_test_email(
    config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None
) -> bool:
    """Send a configuration test email."""
    return await SendGridMailer(config, transport).send_test()
