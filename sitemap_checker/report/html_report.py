# File: sitemap_checker/report/html_report.py
"""sitemap_checker.report.html_report: HTML report rendered with Jinja2."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from sitemap_checker.models import ResultSet
from sitemap_checker.report.summary import summarize

TEMPLATE_NAME = "report.html.j2"


def format_datetime(value: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Jinja2 filter ``dt``: empty string for missing timestamps."""
    return value.strftime(fmt) if value is not None else ""


def build_environment(template_dir: Union[Path, str]) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["dt"] = format_datetime
    return env


def render_html(
    result_set: ResultSet,
    template_dir: Union[Path, str],
    output_path: Union[Path, str],
) -> Path:
    """Render the migration report and save it at *output_path*.

    Args:
        result_set: cached comparison results.
        template_dir: directory holding ``report.html.j2``.
        output_path: path of the resulting HTML file; parents are created.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    html_path = render_html(result_set, 'templates', 'reports/migration.html')
    ```
    """
    template = build_environment(template_dir).get_template(TEMPLATE_NAME)
    html_content = template.render(
        cached_at=result_set.cached_at,
        summary=summarize(result_set.results),
        results=result_set.results,
    )

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html_content, encoding="utf-8")
    return output
