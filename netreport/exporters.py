"""
Export functionality for report summaries.

The PDF is the main output; these exporters give the same numbers in
machine-readable form.

Examples:
    Export to a dict / JSON:
        >>> from netreport import build_report, to_dict, to_json
        >>> report = build_report('traffic.pcap')
        >>> data = to_dict(report)
        >>> to_json(report, 'summary.json')

    Top lists as a pandas DataFrame:
        >>> from netreport import to_dataframe
        >>> df = to_dataframe(report, top_n=10)
        >>> print(df[df['section'] == 'dst_port'])
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any
import json

if TYPE_CHECKING:
    from netreport.report import OnePageReport


TOP_LIST_COLUMNS = ['section', 'rank', 'label', 'count', 'percent']


def to_dict(report: OnePageReport, top_n: int | None = None) -> dict[str, Any]:
    """
    Convert a report to a plain dictionary.

    Args:
        report: Report to export
        top_n: Entries per top list (default: the report's configured N)

    Returns:
        Dictionary of counters, time range, transport shares and top lists
    """
    data = report.summary(top_n)
    data['top'] = {
        section: [{'rank': rank, 'label': label, 'count': count, 'percent': pct}
                  for rank, (label, count, pct) in enumerate(entries, start=1)]
        for section, entries in data['top'].items()
    }
    return data


def to_json(report: OnePageReport, path: str | Path, top_n: int | None = None,
            indent: int = 2) -> None:
    """
    Export a report summary to a JSON file.

    Args:
        report: Report to export
        path: Output JSON file path
        top_n: Entries per top list (default: the report's configured N)
        indent: JSON indentation level (default: 2)
    """
    path = Path(path)
    data = to_dict(report, top_n=top_n)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, default=str)


def to_dataframe(report: OnePageReport, top_n: int | None = None) -> object:
    """
    Convert the report's top lists to a pandas DataFrame.

    One row per entry with columns section, rank, label, count, percent.

    Raises:
        ImportError: If pandas is not installed
    """
    try:
        import pandas as pd
    except ImportError:
        raise ImportError("pandas is required for DataFrame export. Install with: pip install pandas")

    rows = []
    for section, entries in to_dict(report, top_n=top_n)['top'].items():
        for entry in entries:
            rows.append({'section': section, **entry})

    return pd.DataFrame(rows, columns=TOP_LIST_COLUMNS)
