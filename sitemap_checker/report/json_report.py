# sitemap_checker/report/json_report.py

"""
JSON report: the cached result set with its outcome counts up front.
"""
import json
from pathlib import Path

from sitemap_checker.models import ResultSet
from sitemap_checker.report.summary import summarize


def render_json(result_set: ResultSet, output_path: Path | str) -> Path:
    """
    Write ``{"cachedAt", "summary", "results"}`` to *output_path*.

    :param result_set: cached comparison results
    :param output_path: JSON file to create; parent directories are created
    :return: Path of the saved file
    """
    wire = result_set.to_dict()
    data = {
        'cachedAt': wire['cachedAt'],
        'summary': summarize(result_set.results).to_dict(),
        'results': wire['results'],
    }

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding='utf-8')
    return output
