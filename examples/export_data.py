"""
Export example.

Demonstrates exporting the report's numbers to different formats:
- DataFrame (pandas)
- JSON
"""

from netreport import build_report, to_dataframe, to_json

report = build_report('test/multi.pcap')

# === Export to DataFrame ===
df = to_dataframe(report, top_n=10)
print("Top lists:")
print(df)
print()

print("Destination ports only:")
print(df[df['section'] == 'dst_port'][['rank', 'label', 'count', 'percent']])
print()

# === Export to JSON ===
to_json(report, 'output/summary.json')
print("Exported to JSON: output/summary.json")
