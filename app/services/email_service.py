import smtplib
from pathlib import Path
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger
from app.core.config import settings

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


# Helper to get template
def get_template(template_name):
    return _env.get_template(template_name)


# Helper to send email via SMTP
def send_email_via_smtp(to_email, subject, html_content) -> bool:
    """
    Returns False when no SMTP host is configured (nothing sent).
    Delivery failures are logged and re-raised to the caller.
    """
    if not settings.SMTP_HOST:
        logger.warning(f"SMTP host not configured. Skipping email to {to_email}.")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_content, "html"))

    logger.info(f"Connecting to SMTP: {settings.SMTP_HOST}:{settings.SMTP_PORT}")

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            server.ehlo()

            # TLS on submission ports only; local catchers (1025) run plain
            if settings.SMTP_PORT in [587, 2525]:
                server.starttls()
                server.ehlo()

            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)

            server.sendmail(settings.EMAILS_FROM_EMAIL, to_email, msg.as_string())
    except (smtplib.SMTPException, OSError):
        logger.exception(f"Failed to send email to {to_email}")
        raise

    logger.success(f"Email sent successfully to {to_email}")
    return True


# ---------------------------------------------------------
# VERIFICATION CODE (change password)
# ---------------------------------------------------------
def send_verification_code_email(email: str, code: str, name: str | None = None) -> bool:
    template = get_template("verification_code.html")
    html_content = template.render(
        name=name or email,
        code=code,
        expires_in_minutes=settings.VERIFICATION_CODE_TTL_MINUTES,
        app_name=settings.EMAILS_FROM_NAME,
        login_url=f"{settings.FRONTEND_URL}/login",
    )
    return send_email_via_smtp(email, "Your Password Change Verification Code", html_content)
