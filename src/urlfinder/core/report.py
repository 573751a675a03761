"""Scan report and its JSON, CSV and HTML renderings."""

from __future__ import annotations

import csv
import html
import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .models import CrawlResult

LIST_SEPARATOR = ", "

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>URLFinder Report</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; }}
        table {{ border-collapse: collapse; width: 100%; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
        tr:nth-child(even) {{ background-color: #f9f9f9; }}
    </style>
</head>
<body>
    <h1>URLFinder Scan Results</h1>
    <table>
        <tr>
            <th>URL</th>
            <th>Status</th>
            <th>Content Type</th>
            <th>Found URLs</th>
            <th>JS URLs</th>
            <th>Sensitive Info</th>
        </tr>
{rows}
    </table>
</body>
</html>
"""


def _row_values(result: CrawlResult) -> List[str]:
    return [
        result.url,
        str(result.status),
        result.content_type,
        LIST_SEPARATOR.join(result.urls),
        LIST_SEPARATOR.join(result.js_urls),
        LIST_SEPARATOR.join(result.sensitive_info),
    ]


@dataclass
class ScanReport:
    """Results of a run plus the follow-up URLs classified as new."""

    results: List[CrawlResult] = field(default_factory=list)
    follow_ups: List[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps([result.to_dict() for result in self.results], indent=4)

    def to_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for result in self.results:
            writer.writerow(_row_values(result))
        return buffer.getvalue()

    def to_html(self) -> str:
        rows = []
        for result in self.results:
            cells = "".join(f"<td>{html.escape(value)}</td>" for value in _row_values(result))
            rows.append(f"        <tr>{cells}</tr>")
        return HTML_TEMPLATE.format(rows="\n".join(rows))

    def save(self, output_dir: Path) -> Dict[str, Path]:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        paths = {
            "json": output_dir / "result.json",
            "csv": output_dir / "result.csv",
            "html": output_dir / "result.html",
        }
        paths["json"].write_text(self.to_json(), encoding="utf-8")
        paths["csv"].write_text(self.to_csv(), encoding="utf-8")
        paths["html"].write_text(self.to_html(), encoding="utf-8")
        return paths
