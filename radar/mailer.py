"""Email digests for high-impact items and customer pulse.

SMTP when SMTP_HOST and SMTP_USER are configured, otherwise the message is
written to the local outbox directory (development). Sending is best
effort: failures are logged and reported as False, never raised.
"""
import html
import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path

logger = logging.getLogger(__name__)

_FOOTER = """\
<hr style="border: 1px solid #eee; margin-top: 20px" />
<p style="font-size: 11px; color: #999;">Check your <a href="{dashboard}" style="color: #0056b3;">Dashboard</a> \
for full details.<br/>&copy; {year} Dept. OASIS, Apotek Alpro Indonesia</p>"""


def _footer(config) -> str:
    return _FOOTER.format(dashboard=html.escape(config.dashboard_url), year=datetime.now().year)


def render_strategic_alert(items: list[dict], config) -> tuple[str, str]:
    """Returns (subject, html) for persisted market_trends rows."""
    cards = []
    for item in items:
        score = round(float(item.get("sentiment_score") or 0) * 10, 1)
        cards.append(f"""
<div style="margin-bottom: 20px; padding: 15px; background: #fff8f8; border-left: 4px solid #d9381e; border-radius: 4px;">
  <span style="font-size: 10px; font-weight: bold; background: #d9381e; color: #fff; padding: 3px 6px; border-radius: 3px;">
    {html.escape(str(item.get("source_type", "")))} (Score: {score:g}/10)
  </span>
  <h4 style="margin: 10px 0 5px 0;">
    <a href="{html.escape(item.get("source_url") or "#")}" style="color: #0056b3; text-decoration: none;">{html.escape(item.get("title") or "")}</a>
  </h4>
  <p style="font-size: 13px; color: #555; margin: 0 0 10px 0;">{html.escape(item.get("summary") or "")}</p>
</div>""")

    body = f"""
<div style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #d9381e;">Critical Intelligence Alert</h2>
  <p>The Alpro Intelligence Hub has detected <strong>{len(items)}</strong> new high-impact market events \
(Score &gt; {config.score_threshold}) in the last scan.</p>
  <hr style="border: 1px solid #eee;" />
  {"".join(cards)}
  {_footer(config)}
</div>"""
    subject = f"[Alpro Hub] {len(items)} Critical Strategic Alerts Detected"
    return subject, body


def count_review_categories(reviews: list[dict]) -> dict[str, int]:
    counts = {"POSITIVE": 0, "STOK_ISSUE": 0, "SERVICE_ISSUE": 0, "NEUTRAL": 0}
    for r in reviews:
        cat = r.get("sentiment_category") or "NEUTRAL"
        counts[cat] = counts.get(cat, 0) + 1
    return counts


def render_customer_pulse(reviews: list[dict], config) -> tuple[str, str]:
    counts = count_review_categories(reviews)
    body = f"""
<div style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #0ea5e9;">Customer Pulse Update</h2>
  <p>The Alpro Intelligence Hub has just processed <strong>{len(reviews)}</strong> new customer reviews.</p>
  <div style="background: #f0f9ff; padding: 15px; border-radius: 8px; margin: 20px 0;">
    <h3 style="margin-top: 0; color: #0284c7;">Summary Breakdown:</h3>
    <ul style="list-style: none; padding: 0;">
      <li><strong style="color: #16a34a;">Positive:</strong> {counts["POSITIVE"]} reviews</li>
      <li><strong style="color: #dc2626;">Stock Issues:</strong> {counts["STOK_ISSUE"]} reviews</li>
      <li><strong style="color: #ea580c;">Service Issues:</strong> {counts["SERVICE_ISSUE"]} reviews</li>
    </ul>
  </div>
  <p style="font-size: 13px;">If you see high numbers in Stock or Service issues, please review immediately on the dashboard.</p>
  {_footer(config)}
</div>"""
    subject = f"[Alpro Hub] Daily Customer Pulse Update: {len(reviews)} New Reviews"
    return subject, body


def _write_outbox(subject: str, html_body: str, config) -> Path:
    outbox = Path(config.outbox_dir)
    outbox.mkdir(parents=True, exist_ok=True)
    path = outbox / f"{datetime.now().strftime('%Y%m%d-%H%M%S-%f')}.html"
    path.write_text(f"<!-- To: {config.alert_receiver} | Subject: {subject} -->\n{html_body}", encoding="utf-8")
    return path


def send_email(subject: str, html_body: str, config) -> bool:
    if not (config.smtp_host and config.smtp_user):
        path = _write_outbox(subject, html_body, config)
        logger.warning("No SMTP config; email saved to %s", path)
        return True

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = config.alert_sender
    msg["To"] = config.alert_receiver
    msg.attach(MIMEText(html_body, "html", "utf-8"))

    smtp_cls = smtplib.SMTP_SSL if config.smtp_secure else smtplib.SMTP
    with smtp_cls(config.smtp_host, config.smtp_port, timeout=30) as server:
        if not config.smtp_secure:
            server.starttls()
        server.login(config.smtp_user, config.smtp_password or "")
        server.sendmail(msg["From"], [config.alert_receiver], msg.as_string())
    return True


def send_strategic_alert(items: list[dict], config) -> bool:
    if not items:
        return False
    try:
        subject, body = render_strategic_alert(items, config)
        send_email(subject, body, config)
    except Exception as e:
        logger.error("Failed to send Strategic Alert email: %s", e)
        return False
    logger.info("Strategic Alert email sent to %s", config.alert_receiver)
    return True


def send_customer_pulse_alert(reviews: list[dict], config) -> bool:
    if not reviews:
        return False
    try:
        subject, body = render_customer_pulse(reviews, config)
        send_email(subject, body, config)
    except Exception as e:
        logger.error("Failed to send Customer Pulse email: %s", e)
        return False
    logger.info("Customer Pulse email sent to %s", config.alert_receiver)
    return True
