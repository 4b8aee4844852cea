"""
Unit tests for the feed parser.
"""
from datetime import datetime, timezone

from radar.rss_parser import parse

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
  <title>Google News</title>
  <item>
    <title><![CDATA[  BPOM Tarik Obat X dari Peredaran  ]]></title>
    <link>https://news.example/obat-x</link>
    <pubDate>Mon, 12 Oct 2026 08:00:00 GMT</pubDate>
    <source url="https://detik.com">detikHealth</source>
  </item>
  <item>
    <link>https://news.example/untitled</link>
  </item>
  <item>
    <title>Wabah DBD Meningkat</title>
    <link>https://news.example/dbd</link>
  </item>
</channel>
</rss>
"""


class TestParse:

    def test_extracts_fields_and_skips_untitled(self):
        items = parse(RSS, "BPOM Siaran Pers")

        assert [i.title for i in items] == ["BPOM Tarik Obat X dari Peredaran", "Wabah DBD Meningkat"]
        first = items[0]
        assert first.link == "https://news.example/obat-x"
        assert first.source_label == "BPOM Siaran Pers"
        assert first.publisher == "detikHealth"
        assert first.published_at == datetime(2026, 10, 12, 8, 0, tzinfo=timezone.utc)

    def test_missing_source_and_date(self):
        item = parse(RSS, "Kemenkes Rilis")[1]

        assert item.publisher == "Kemenkes Rilis"
        assert item.published_at is None

    def test_garbage_yields_nothing(self):
        assert parse("<html>not a feed</html>", "X") == []
        assert parse("", "X") == []

    def test_bytes_honour_declared_encoding(self):
        raw = ('<?xml version="1.0" encoding="ISO-8859-1"?><rss version="2.0"><channel><title>t</title>'
               '<item><title>Peringatan BPOM: obat pereda nyeri édition</title></item>'
               '</channel></rss>').encode("iso-8859-1")

        assert parse(raw, "X")[0].title == "Peringatan BPOM: obat pereda nyeri édition"

    def test_path_like_text_is_not_opened(self, tmp_path):
        path = tmp_path / "feed.xml"
        path.write_text(RSS, encoding="utf-8")

        assert parse(str(path), "X") == []
