"""
Unit tests for email digests.
"""
from unittest.mock import MagicMock, patch

from radar import mailer

ITEMS = [{"source_type": "PRODUCT_SAFETY", "title": "Obat <X> ditarik", "summary": "Recall | Rekomendasi: tarik stok",
          "sentiment_score": 0.9, "source_url": "https://n/1"}]


class TestRender:

    def test_strategic_alert(self, config):
        subject, body = mailer.render_strategic_alert(ITEMS, config)

        assert subject == "[Alpro Hub] 1 Critical Strategic Alerts Detected"
        assert "PRODUCT_SAFETY (Score: 9/10)" in body
        assert "Obat &lt;X&gt; ditarik" in body
        assert 'href="https://n/1"' in body

    def test_customer_pulse_counts(self, config):
        reviews = [{"sentiment_category": "POSITIVE"}, {"sentiment_category": "STOK_ISSUE"},
                   {"sentiment_category": "STOK_ISSUE"}]

        subject, body = mailer.render_customer_pulse(reviews, config)

        assert "3 New Reviews" in subject
        assert "Stock Issues:</strong> 2 reviews" in body


class TestSend:

    def test_empty_input_sends_nothing(self, config):
        assert mailer.send_strategic_alert([], config) is False
        assert mailer.send_customer_pulse_alert([], config) is False

    def test_outbox_without_smtp(self, config, tmp_path):
        assert mailer.send_strategic_alert(ITEMS, config)

        files = list((tmp_path / "outbox").glob("*.html"))
        assert len(files) == 1
        assert "Critical Strategic Alerts" in files[0].read_text(encoding="utf-8")

    def test_smtp(self, config):
        config = config.model_copy(update={"smtp_host": "smtp.example", "smtp_user": "u", "smtp_password": "p"})
        server = MagicMock()

        with patch("radar.mailer.smtplib.SMTP") as smtp:
            smtp.return_value.__enter__.return_value = server
            assert mailer.send_customer_pulse_alert([{"sentiment_category": "POSITIVE"}], config)

        smtp.assert_called_once_with("smtp.example", 587, timeout=30)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("u", "p")
        assert server.sendmail.call_args[0][1] == [config.alert_receiver]

    def test_smtp_failure_is_logged_not_raised(self, config):
        config = config.model_copy(update={"smtp_host": "smtp.example", "smtp_user": "u"})

        with patch("radar.mailer.smtplib.SMTP", side_effect=OSError("unreachable")):
            assert mailer.send_strategic_alert(ITEMS, config) is False
