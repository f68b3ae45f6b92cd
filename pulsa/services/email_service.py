import logging
import emails # Library for composing and sending emails
from emails.template import JinjaTemplate # For HTML templating
from typing import Dict, Any, Optional
import os

from pulsa.core.config import Settings, settings # For email server configuration

logger = logging.getLogger(__name__)


class TemplateRenderError(Exception):
    """Raised when an email template is missing or fails to render."""


def send_email(to_email: str, subject: str, html_content: str, app_settings: Optional[Settings] = None) -> bool:
    """
    Sends an email using configured SMTP settings.
    When SMTP is not configured the message is logged and skipped.
    Without app_settings the environment-wide settings are used.
    """
    cfg = app_settings or settings
    if not cfg.EMAIL_HOST or not cfg.EMAIL_FROM_ADDRESS:
        logger.info(f"Email SKIPPED (SMTP not configured) [To: {to_email}, Subject: {subject}]")
        logger.debug(f"Body:\n{html_content[:500]}...")
        return True

    message = emails.Message(
        subject=subject,
        html=html_content,
        mail_from=(cfg.EMAIL_FROM_NAME, cfg.EMAIL_FROM_ADDRESS)
    )

    smtp_options = {
        "host": cfg.EMAIL_HOST,
        "port": cfg.EMAIL_PORT,
        "tls": cfg.EMAIL_USE_TLS,
        "ssl": cfg.EMAIL_USE_SSL,
        "user": cfg.EMAIL_USERNAME,
        "password": cfg.EMAIL_PASSWORD
    }
    smtp_options = {k: v for k, v in smtp_options.items() if v is not None}
    if not smtp_options.get("user"):
        smtp_options.pop("user", None)
        smtp_options.pop("password", None)

    logger.info(f"Attempting to send email to {to_email} via {cfg.EMAIL_HOST}:{cfg.EMAIL_PORT}")
    try:
        response = message.send(to=to_email, smtp=smtp_options)
    except Exception as e:
        logger.error(f"Exception during email sending to {to_email}: {e}", exc_info=True)
        return False

    if response and response.status_code in [250, 252]: # Typical SMTP success codes
        logger.info(f"Email sent successfully to {to_email}. Subject: '{subject}'.")
        return True
    logger.error(f"Failed to send email to {to_email}. SMTP Response: {response.status_code if response else 'No response'}. Error: {response.error if response else 'N/A'}")
    return False

def render_email_template(template_name: str, context: Dict[str, Any], app_settings: Optional[Settings] = None) -> str:
    """Renders an HTML template from EMAILS_TEMPLATES_DIR with Jinja2."""
    cfg = app_settings or settings
    template_file_path = os.path.join(cfg.EMAILS_TEMPLATES_DIR, template_name)

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

def send_templated_email(
    to_email: str,
    subject: str,
    html_template_name: str,
    context: Dict[str, Any],
    app_settings: Optional[Settings] = None
) -> bool:
    """Renders an HTML email template and sends it. Returns False if rendering or sending fails."""
    logger.info(f"Preparing templated email. To: {to_email}, Subject: '{subject}', Template: {html_template_name}")
    cfg = app_settings or settings

    context.setdefault("APP_NAME", cfg.PROJECT_NAME)
    context.setdefault("APP_FRONTEND_URL", cfg.APP_FRONTEND_URL)

    try:
        html_content = render_email_template(
            template_name=html_template_name, context=context, app_settings=cfg
        )
    except TemplateRenderError:
        logger.error(f"Aborting email to {to_email} due to template error for '{html_template_name}'.")
        return False

    return send_email(to_email=to_email, subject=subject, html_content=html_content, app_settings=cfg)
