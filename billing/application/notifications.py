"""
Reminder delivery. The ledger only produces reminder text; this module hands
it to Django's mail framework. The configured backend decides what actually
happens to the message (console by default, locmem under the test runner).
"""

import logging

from django.conf import settings
from django.core.mail import send_mail

from billing.domain.account import REMINDER_SUBJECT

logger = logging.getLogger(__name__)


def email_reminder(account, text):
    send_mail(
        subject=REMINDER_SUBJECT,
        message=text,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[account.email],
    )
    logger.info("Reminder sent: account=%s email=%s", account.id, account.email)
