# services_notify.py — outgoing email for form notifications and the newsletter
import os, smtplib, logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from flask import current_app, has_app_context
from jinja2 import Environment, select_autoescape
from markupsafe import Markup, escape

FROM_EMAIL    = os.getenv("FROM_EMAIL", "alnwickcommunityc@gmail.com")
PRIMARY_EMAIL = os.getenv("PRIMARY_EMAIL", FROM_EMAIL)  # forms land in the center's own inbox
FROM_NAME     = os.getenv("FROM_NAME", "Alnwick Community Center")
CENTER_ADDRESS = os.getenv("CENTER_ADDRESS", "2146 Big Springs Road, Maryville, TN 37801")

# off = storage-only mode: submissions are saved, emails only logged
EMAIL_SENDING_ENABLED = os.getenv("EMAIL_SENDING_ENABLED", "false").lower() in ("1", "true", "yes")

SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", FROM_EMAIL)
SMTP_PASS = os.getenv("SMTP_PASS") or os.getenv("EMAIL_PASSWORD", "")
SMTP_TIMEOUT = 10

NEWSLETTER_TEXT = "This is the text version of the newsletter. Please view in HTML for the best experience."

_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))

NEWSLETTER_TEMPLATE = _env.from_string("""<!DOCTYPE html>
<html>
<head>
  <title>{{ subject }}</title>
  <style>
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #1d4ed8; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background-color: #f9fafb; }
    .footer { text-align: center; padding: 10px; font-size: 12px; color: #6b7280; }
  </style>
</head>
<body>
  <div class="header"><h1>{{ subject }}</h1></div>
  <div class="content">{{ body }}</div>
  <div class="footer">
    <p>{{ center }}</p>
    <p>{{ address }}</p>
    <p>This email was sent to you because you subscribed to our newsletter.</p>
    {% if unsubscribe_url %}<p><a href="{{ unsubscribe_url }}">Unsubscribe</a></p>{% endif %}
  </div>
</body>
</html>
""")

FORM_TEMPLATE = _env.from_string("""<html>
  <head>
    <style>
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; }
      h1 { color: #3a5a78; margin-bottom: 20px; }
      table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
      td { text-align: left; padding: 8px; border: 1px solid #ddd; }
      .footer { font-size: 12px; color: #777; border-top: 1px solid #ddd; padding-top: 10px; }
    </style>
  </head>
  <body>
    <div class="container">
      <h1>New Form Submission</h1>
      <p>A new form submission has been received from the {{ center }} website:</p>
      <table>
        <tbody>
        {% for label, value in rows %}
          <tr><td style="font-weight: bold;">{{ label }}</td><td>{{ value }}</td></tr>
        {% endfor %}
        </tbody>
      </table>
      <div class="footer"><p>This is an automated message from the {{ center }} website.</p></div>
    </div>
  </body>
</html>
""")

def _log():
    return current_app.logger if has_app_context() else logging.getLogger(__name__)

def _sending_enabled() -> bool:
    if has_app_context():
        return bool(current_app.config.get("EMAIL_SENDING_ENABLED", EMAIL_SENDING_ENABLED))
    return EMAIL_SENDING_ENABLED

def _smtp_settings():
    cfg = current_app.config if has_app_context() else {}
    return (cfg.get("SMTP_HOST", SMTP_HOST), int(cfg.get("SMTP_PORT", SMTP_PORT)),
            cfg.get("SMTP_USER", SMTP_USER), cfg.get("SMTP_PASS", SMTP_PASS))

def humanize_key(key: str) -> str:
    """subscribeToNewsletter / event_type -> 'Subscribe To Newsletter' / 'Event Type'"""
    out = []
    for ch in key.replace("_", " "):
        if ch.isupper() and out and out[-1] != " ":
            out.append(" ")
        out.append(ch)
    return " ".join(w[:1].upper() + w[1:] for w in "".join(out).split())

def _format_value(v):
    if isinstance(v, bool):
        return "Yes" if v else "No"
    if v is None:
        return ""
    if isinstance(v, (list, tuple)):
        return ", ".join(str(x) for x in v)
    return v

def create_html_email_body(form_data: dict) -> str:
    rows = [(humanize_key(k), _format_value(v)) for k, v in (form_data or {}).items()]
    return FORM_TEMPLATE.render(rows=rows, center=FROM_NAME)

def create_newsletter_html(subject: str, content: str, unsubscribe_url: str = None) -> str:
    body = Markup("<br>").join(escape(line) for line in (content or "").split("\n"))
    return NEWSLETTER_TEMPLATE.render(subject=subject, body=body, center=FROM_NAME,
                                      address=CENTER_ADDRESS, unsubscribe_url=unsubscribe_url)

def send_email_notification(subject: str, text: str, html: str = None, to: str = None) -> bool:
    """
    Sends one email (to PRIMARY_EMAIL unless `to` is given).
    Never raises: SMTP problems are logged and reported as False.
    """
    recipient = to or PRIMARY_EMAIL
    log = _log()
    log.info("[EMAIL] subject=%r to=%s", subject, recipient)

    if not _sending_enabled():
        log.info("[EMAIL] sending disabled (storage-only mode); nothing sent")
        return True

    host, port, user, pwd = _smtp_settings()
    if not (host and pwd):
        log.error("[EMAIL] SMTP not configured (SMTP_HOST / SMTP_PASS)")
        return False

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"]    = f'"{FROM_NAME}" <{FROM_EMAIL}>'
        msg["To"]      = recipient
        msg.attach(MIMEText(text or "", "plain", "utf-8"))
        msg.attach(MIMEText(html or text or "", "html", "utf-8"))

        with smtplib.SMTP(host, port, timeout=SMTP_TIMEOUT) as s:
            s.starttls()
            s.login(user, pwd)
            s.sendmail(FROM_EMAIL, [recipient], msg.as_string())
        log.info("[EMAIL] sent to %s", recipient)
        return True
    except (smtplib.SMTPException, OSError) as e:
        log.warning("[EMAIL] error sending to %s: %s", recipient, e)
        return False

def send_newsletter(subject: str, content: str, subscribers, test_email: str = None,
                    unsubscribe_url_for=None) -> bool:
    """
    Test mode (test_email set): one copy to test_email only.
    Otherwise one copy per subscriber; a failing address is logged and skipped.
    False when there is nobody to send to.
    """
    log = _log()
    if test_email:
        log.info("[NEWSLETTER] test send to %s subject=%r", test_email, subject)
        html = create_newsletter_html(subject, content)
        return send_email_notification(subject, NEWSLETTER_TEXT, html, to=test_email)

    subscribers = list(subscribers or [])
    if not subscribers:
        log.info("[NEWSLETTER] no subscribers to send to")
        return False

    log.info("[NEWSLETTER] sending to %d subscribers subject=%r", len(subscribers), subject)
    sent = 0
    for email in subscribers:
        url = unsubscribe_url_for(email) if unsubscribe_url_for else None
        html = create_newsletter_html(subject, content, unsubscribe_url=url)
        if send_email_notification(subject, NEWSLETTER_TEXT, html, to=email):
            sent += 1
        else:
            log.warning("[NEWSLETTER] skipped %s", email)
    log.info("[NEWSLETTER] delivered %d/%d", sent, len(subscribers))
    return True
