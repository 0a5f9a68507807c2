"""sitemap_checker.report: outcome summary plus JSON and HTML reports used by the CLI."""

from sitemap_checker.report.html_report import render_html
from sitemap_checker.report.json_report import render_json
from sitemap_checker.report.summary import StatusSummary, summarize

__all__ = ["render_json", "render_html", "StatusSummary", "summarize"]
