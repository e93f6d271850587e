"""HTML bodies for staff onboarding and password-reset emails.

Every interpolated value is HTML-escaped.
"""

from html import escape

from config.settings import settings

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="margin:0;padding:24px;background:#f4f5f7;font-family:Arial,sans-serif;color:#1f2937;">
  <div style="max-width:560px;margin:0 auto;background:#ffffff;border-radius:8px;padding:32px;">
    <h2 style="margin-top:0;">{title}</h2>
    {body}
    <p style="margin-top:32px;font-size:12px;color:#6b7280;">
      This is an automated message from {app_name}. Please do not reply.
    </p>
  </div>
</body>
</html>
"""


def _render(title: str, body: str) -> str:
    return _LAYOUT.format(title=escape(title), body=body, app_name=escape(settings.APP_NAME))


def welcome_subject() -> str:
    return f"Welcome to {settings.APP_NAME}"


def welcome_email_html(
    name: str, email: str, temporary_password: str, panel_url: str | None = None
) -> str:
    url = escape(panel_url or settings.ADMIN_PANEL_URL, quote=True)
    body = f"""
    <p>Hello {escape(name)},</p>
    <p>An account has been created for you. Use these credentials to sign in:</p>
    <table style="border-collapse:collapse;margin:16px 0;">
      <tr><td style="padding:4px 12px 4px 0;color:#6b7280;">Email</td>
          <td style="padding:4px 0;"><strong>{escape(email)}</strong></td></tr>
      <tr><td style="padding:4px 12px 4px 0;color:#6b7280;">Temporary password</td>
          <td style="padding:4px 0;"><code>{escape(temporary_password)}</code></td></tr>
    </table>
    <p><a href="{url}" style="background:#2563eb;color:#ffffff;padding:10px 18px;
       border-radius:6px;text-decoration:none;">Open the admin panel</a></p>
    <p>Please change your password after your first login.</p>
    """
    return _render(welcome_subject(), body)


def otp_subject() -> str:
    return "Your password reset code"


def otp_email_html(name: str, otp: str, valid_minutes: int) -> str:
    body = f"""
    <p>Hello {escape(name)},</p>
    <p>Use the code below to reset your password:</p>
    <p style="font-size:32px;letter-spacing:8px;font-weight:bold;margin:24px 0;">{escape(otp)}</p>
    <p>The code expires in {int(valid_minutes)} minutes. If you did not request
       a password reset you can ignore this email.</p>
    """
    return _render(otp_subject(), body)
