"""
Basic usage example.

Reads a capture file, prints the headline numbers and writes the
one-page PDF next to it.
"""

from netreport import build_report, ReportConfig

config = ReportConfig(filename='traffic-report.pdf', histogram_show_top_n_text=5)
report = build_report('test/multi.pcap', config=config)

summary = report.summary()
print(f"Packets: {summary['packet_count']:,} ({summary['size']})")
for name, share in summary['transports'].items():
    print(f"  {name}: {share:.2f}%")

print("Top destination ports:")
for label, count, pct in summary['top']['dst_port']:
    print(f"  {label}: {count:,} ({pct}%)")

path = report.render('output')
if path is not None:
    print(f"Report written to {path}")
