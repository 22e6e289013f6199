import logging
import os
from typing import Any, Dict

import emails
from emails.template import JinjaTemplate

from learnvow.core.config import settings

logger = logging.getLogger(__name__)

SMTP_OK_CODES = (250, 252)


class TemplateRenderError(Exception):
    pass


def _smtp_options() -> Dict[str, Any]:
    options = {
        "host": settings.EMAIL_HOST,
        "port": settings.EMAIL_PORT,
        "tls": settings.EMAIL_USE_TLS,
        "ssl": settings.EMAIL_USE_SSL,
    }
    # Anonymous relays get neither user nor password
    if settings.EMAIL_USERNAME:
        options["user"] = settings.EMAIL_USERNAME
        options["password"] = settings.EMAIL_PASSWORD or ""
    return options


def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """
    Sends one HTML email over SMTP.

    Without EMAIL_HOST / EMAIL_FROM_ADDRESS the message is only logged and
    counts as sent, which is how development and test environments run.
    """
    if not settings.EMAIL_HOST or not settings.EMAIL_FROM_ADDRESS:
        logger.info(f"Email not sent (SMTP not configured) [To: {to_email}, Subject: {subject}]")
        logger.debug(f"Body:\n{html_content[:500]}...")
        return True

    message = emails.Message(
        subject=subject,
        html=html_content,
        mail_from=(settings.EMAIL_FROM_NAME, settings.EMAIL_FROM_ADDRESS),
    )

    logger.info(f"Sending email to {to_email} via {settings.EMAIL_HOST}:{settings.EMAIL_PORT}")
    try:
        response = message.send(to=to_email, smtp=_smtp_options())
    except Exception as e:
        logger.error(f"Exception during email sending to {to_email}: {e}", exc_info=True)
        return False

    if response is not None and response.status_code in SMTP_OK_CODES:
        logger.info(f"Email '{subject}' delivered to {to_email} (SMTP {response.status_code}).")
        return True

    logger.error(
        f"Failed to send email to {to_email}. SMTP Response: "
        f"{response.status_code if response is not None else 'none'}. "
        f"Error: {response.error if response is not None else 'N/A'}"
    )
    return False


def render_email_template(template_name: str, context: Dict[str, Any]) -> str:
    """Renders `template_name` from EMAILS_TEMPLATES_DIR with Jinja2."""
    template_file_path = os.path.join(settings.EMAILS_TEMPLATES_DIR, template_name)

    try:
        with open(template_file_path, "r", encoding="utf-8") as f:
            template_str = f.read()
    except FileNotFoundError as e:
        logger.error(f"Email template not found: {template_file_path}")
        raise TemplateRenderError(f"Email template '{template_name}' not found.") from e

    try:
        return JinjaTemplate(template_str).render(**context)
    except Exception as e:
        logger.error(f"Error rendering email template '{template_name}': {e}", exc_info=True)
        raise TemplateRenderError(f"Error rendering email template '{template_name}'.") from e


def send_templated_email(to_email: str, subject: str, html_template_name: str, context: Dict[str, Any]) -> bool:
    context = {
        "APP_NAME": settings.PROJECT_NAME,
        "APP_FRONTEND_URL": settings.APP_FRONTEND_URL,
        **context,
    }
    try:
        html_content = render_email_template(template_name=html_template_name, context=context)
    except TemplateRenderError:
        logger.error(f"Not sending '{subject}' to {to_email}: template '{html_template_name}' failed to render.")
        return False

    return send_email(to_email=to_email, subject=subject, html_content=html_content)


# --- Storefront notifications ---
# Both are best effort: a mail failure is logged and never fails the caller.

def send_welcome_email(user) -> bool:
    try:
        return send_templated_email(
            to_email=user.email,
            subject="Welcome to LearnVow!",
            html_template_name="welcome.html",
            context={"user_name": user.name or user.email},
        )
    except Exception as e:
        logger.error(f"Failed to send welcome email to {user.email}: {e}", exc_info=True)
        return False


def send_purchase_receipt(purchase) -> bool:
    book = purchase.book
    try:
        return send_templated_email(
            to_email=purchase.user.email,
            subject=f"Your LearnVow receipt: {book.title}",
            html_template_name="purchase_receipt.html",
            context={
                "user_name": purchase.user.name or purchase.user.email,
                "book_title": book.title,
                "book_author": book.author,
                "price_paid": f"{purchase.price_paid} {purchase.currency}",
            },
        )
    except Exception as e:
        logger.error(f"Failed to send purchase receipt for purchase {purchase.id}: {e}", exc_info=True)
        return False
