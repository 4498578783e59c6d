"""
Command line entry point: capture file in, one-page PDF out.

    netreport traffic.pcap -o out/ --json out/summary.json
"""

from __future__ import annotations

import argparse
import logging
import sys

from netreport import __title_version__
from netreport.core.reader import build_report
from netreport.exporters import to_json
from netreport.log_setup import configure_debug
from netreport.report import ReportConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netreport",
        description="Summarize a pcap/pcapng capture on a single PDF page",
    )
    parser.add_argument("pcap", help="Capture file to read")
    parser.add_argument("-o", "--outdir", default=".",
                        help="Directory the PDF is written to (default: current directory)")
    parser.add_argument("-f", "--filename", default=ReportConfig.filename,
                        help=f"PDF file name (default: {ReportConfig.filename})")
    parser.add_argument("--top-n", type=int, default=ReportConfig.histogram_show_top_n_text,
                        help="Rows of top entries under each histogram pair (default: %(default)s)")
    parser.add_argument("--limit", type=int, default=None,
                        help="Stop after this many packets")
    parser.add_argument("--json", metavar="PATH", default=None,
                        help="Also write the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=__title_version__)
    return parser


def print_summary(summary: dict) -> None:
    print(f"Input: {summary['source']}")
    print(f"Packets analyzed: {summary['packet_count']:,} ({summary['size']})")
    print("Transports: " + " ".join(
        f"{name} {value:.2f}%" for name, value in summary['transports'].items()))
    for section, entries in summary['top'].items():
        for rank, (label, count, pct) in enumerate(entries, start=1):
            print(f"  {section} {rank}. {label} - {count:,} ({pct}%)")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_debug(args.verbose)

    try:
        config = ReportConfig(filename=args.filename, histogram_show_top_n_text=args.top_n)
        config.validate()
    except ValueError as e:
        logger.error("%s", e)
        return 1

    try:
        report = build_report(args.pcap, config=config, limit=args.limit)
    except (OSError, ValueError) as e:
        logger.error("Cannot read %s: %s", args.pcap, e)
        return 1

    print_summary(report.summary())

    path = report.render(args.outdir)
    if path is None:
        logger.warning("No PDF written")
    else:
        logger.info("Report written to %s", path)

    if args.json:
        to_json(report, args.json)
        logger.info("Summary written to %s", args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
