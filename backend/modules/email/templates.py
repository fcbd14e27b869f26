"""
Email bodies.
"""

from datetime import datetime, timezone
from html import escape

PASSWORD_RESET_SUBJECT = "Reset Your PLPG Password"

_PASSWORD_RESET_TEXT = """\
You have requested to reset your password for your PLPG account.

Click the link below to reset your password:
{reset_url}

This link will expire in 1 hour.

If you did not request a password reset, please ignore this email.
Your password will remain unchanged.

Best regards,
The PLPG Team"""

_PASSWORD_RESET_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Reset Your Password</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="font-size: 24px;">Reset Your Password</h1>
  <p>You have requested to reset your password for your PLPG account.</p>
  <p>
    <a href="{reset_url}" style="display: inline-block; background: #4F46E5; color: white; padding: 14px 28px; text-decoration: none; border-radius: 6px; font-weight: 600;">Reset Password</a>
  </p>
  <p style="color: #666; font-size: 14px;">Or copy and paste this link into your browser:</p>
  <p style="color: #4F46E5; word-break: break-all; font-size: 14px;">{reset_url}</p>
  <p style="color: #999; font-size: 12px;">
    <strong>This link will expire in 1 hour.</strong><br>
    If you did not request a password reset, please ignore this email.
    Your password will remain unchanged.
  </p>
  <p style="text-align: center; color: #999; font-size: 12px;">&copy; {year} PLPG - Personalized Learning Path Generator</p>
</body>
</html>"""


def password_reset_text(reset_url: str) -> str:
    return _PASSWORD_RESET_TEXT.format(reset_url=reset_url)


def password_reset_html(reset_url: str) -> str:
    return _PASSWORD_RESET_HTML.format(
        reset_url=escape(reset_url, quote=True),
        year=datetime.now(timezone.utc).year,
    )
