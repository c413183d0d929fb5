"""Verification-code delivery providers."""

from user_register.providers.mail.base import MailSender, format_code

__all__ = ["MailSender", "format_code"]
