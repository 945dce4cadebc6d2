"""
Account email templates.

- Email verification OTP (registration and resend)
- Password reset OTP
"""

from html import escape

from libs.common.emails.client import EmailClient

_CODE_STYLE = (
    "font-size: 28px; letter-spacing: 6px; font-weight: 700; "
    "margin: 16px 0; color: #0f172a;"
)


def _otp_html(heading: str, intro: str, otp: str, ttl_minutes: int, outro: str = "") -> str:
    outro_html = f"<p>{escape(outro)}</p>" if outro else ""
    return (
        f"<h1>{escape(heading)}</h1>"
        f"<p>{escape(intro)}</p>"
        f'<p style="{_CODE_STYLE}">{escape(otp)}</p>'
        f"<p>OTP is valid for {ttl_minutes} minutes.</p>"
        f"{outro_html}"
    )


async def send_verification_email(
    client: EmailClient, to_email: str, name: str, otp: str, ttl_minutes: int
) -> None:
    """Send the account verification OTP. Raises EmailDeliveryError."""
    intro = "Thank you for registering. Please use the following OTP to verify your account:"
    body = (
        f"Hi {name},\n\n{intro}\n\n{otp}\n\n"
        f"OTP is valid for {ttl_minutes} minutes.\n"
    )
    await client.send(
        to_email=to_email,
        subject="Email Verification",
        body=body,
        html_body=_otp_html("Email Verification", intro, otp, ttl_minutes),
    )


async def send_password_reset_email(
    client: EmailClient, to_email: str, name: str, otp: str, ttl_minutes: int
) -> None:
    """Send the password reset OTP. Raises EmailDeliveryError."""
    intro = (
        "You have requested a password reset. "
        "Please use the following OTP to reset your password:"
    )
    outro = "If you did not request this, please ignore this email."
    body = (
        f"Hi {name},\n\n{intro}\n\n{otp}\n\n"
        f"OTP is valid for {ttl_minutes} minutes.\n{outro}\n"
    )
    await client.send(
        to_email=to_email,
        subject="Password Reset",
        body=body,
        html_body=_otp_html("Password Reset", intro, otp, ttl_minutes, outro),
    )
