"""Email delivery of the weekly report."""

from .sendgrid import SendGridMailer, send_report_email, send_test_email

__all__ = ["SendGridMailer", "send_report_email", "send_test_email"]
