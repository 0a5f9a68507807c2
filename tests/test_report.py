# File: tests/test_report.py
import json
from datetime import datetime, timezone
from pathlib import Path

from conftest import make_record
from sitemap_checker.models import Outcome, ResultSet
from sitemap_checker.report import render_html, render_json, summarize
from sitemap_checker.report.html_report import format_datetime

TEMPLATES = Path(__file__).resolve().parent.parent / "templates"


def sample_set() -> ResultSet:
    return ResultSet(
        cached_at=datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc),
        results=[
            make_record("http://old.example.com/a"),
            make_record("http://old.example.com/b", Outcome.MISSING, title="<b>bold</b>"),
            make_record("http://old.example.com/c", Outcome.REDIRECTED_CHAIN),
            make_record("http://old.example.com/d", Outcome.MISSING, last_modified=datetime(2023, 9, 9)),
        ],
    )


def test_summarize_counts_outcomes():
    summary = summarize(sample_set().results)
    assert summary.to_dict() == {
        "total": 4,
        "present": 1,
        "present_different_content": 0,
        "redirected_once": 0,
        "redirected_chain": 1,
        "missing": 2,
    }


def test_summarize_empty():
    assert summarize([]).total == 0


def test_format_datetime():
    assert format_datetime(None) == ""
    assert format_datetime(datetime(2024, 1, 2, 3, 4)) == "2024-01-02 03:04"


def test_render_json(tmp_path):
    path = render_json(sample_set(), tmp_path / "nested" / "report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data) == ["cachedAt", "summary", "results"]
    assert data["cachedAt"] == "2024-03-01T12:30:00+00:00"
    assert len(data["results"]) == 4
    assert data["summary"]["missing"] == 2


def test_render_html_escapes_titles(tmp_path):
    path = render_html(sample_set(), TEMPLATES, tmp_path / "report.html")
    html = path.read_text(encoding="utf-8")
    assert "Cached at 2024-03-01 12:30" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "<b>bold</b>" not in html
    assert 'class="RedirectedChain"' in html
    assert "2023-09-09" in html
