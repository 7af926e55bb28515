import logging
from datetime import datetime
from html import escape

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _format_date(value):
    return value.strftime("%B %d, %Y") if value else "Pending"


def _certificate_email_html(certificate):
    name = escape(certificate.user_full_name)
    course = escape(certificate.course_title)
    credential = escape(certificate.get_certificate_type_display())
    number = escape(certificate.certificate_number)
    verify_url = escape(certificate.verification_url)
    year = datetime.now().year

    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Your Skillvergence Certificate</title>
</head>
<body style="margin:0;padding:0;background:#F7FAFF;color:#1F2937;font-family:Segoe UI,Arial,sans-serif;">
  <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="padding:24px 12px;">
    <tr>
      <td align="center">
        <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="max-width:560px;background:#FFFFFF;border:2px solid #3366CC;border-radius:14px;">
          <tr>
            <td style="padding:28px 24px 12px;text-align:center;">
              <div style="font-size:24px;font-weight:800;letter-spacing:.3px;color:#3366CC;">SKILLVERGENCE</div>
            </td>
          </tr>
          <tr>
            <td style="padding:0 24px 10px;text-align:center;">
              <div style="font-size:20px;font-weight:700;">Congratulations, {name}</div>
            </td>
          </tr>
          <tr>
            <td style="padding:0 24px 16px;text-align:center;color:#4B5563;font-size:15px;line-height:1.6;">
              You have earned the <strong>{credential}</strong> credential for completing
              <strong>{course}</strong>.
            </td>
          </tr>
          <tr>
            <td style="padding:0 24px 16px;text-align:center;color:#4B5563;font-size:14px;line-height:1.6;">
              Certificate number: <strong>{number}</strong><br>
              Issued: {_format_date(certificate.issued_date)}<br>
              Instructor: {escape(certificate.instructor_name)}
            </td>
          </tr>
          <tr>
            <td style="padding:8px 24px 26px;text-align:center;">
              <a href="{verify_url}" style="color:#3366CC;font-size:14px;">Verify this credential</a>
            </td>
          </tr>
          <tr>
            <td style="padding:14px 24px;border-top:1px solid #E5E7EB;text-align:center;color:#6B7280;font-size:12px;">
              &copy; {year} Skillvergence
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def send_certificate_email(certificate):
    """
    Send the congratulation email for an issued certificate.

    Errors propagate so the caller can record the delivery outcome.
    """
    subject = f"Your Skillvergence Certificate: {certificate.course_title}"

    plain_message = (
        f"Congratulations, {certificate.user_full_name}!\n\n"
        f"You have earned the {certificate.get_certificate_type_display()} credential "
        f"for completing {certificate.course_title}.\n\n"
        f"Certificate number: {certificate.certificate_number}\n"
        f"Issued: {_format_date(certificate.issued_date)}\n"
        f"Verify at: {certificate.verification_url}\n\n"
        "Skillvergence"
    )

    send_mail(
        subject=subject,
        message=plain_message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[certificate.user_email],
        html_message=_certificate_email_html(certificate),
        fail_silently=False,
    )

    logger.info(
        "Certificate email for %s sent to %s",
        certificate.certificate_number,
        certificate.user_email,
    )
