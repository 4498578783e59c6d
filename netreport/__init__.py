"""
netreport - one-page visual summary of a packet capture.

Counts packets, bytes, ethertypes, addresses and TCP ports in a single
pass over a capture and lays the result out on one PDF page.

Example usage:
    from netreport import build_report

    report = build_report('traffic.pcap')
    print(report.summary()['size'])
    report.render('out/')
"""

__version__ = "0.1.0"
__title_version__ = f"netreport {__version__}"

from netreport.core.packet import (
    ETHERTYPE_ARP,
    ETHERTYPE_IP,
    ETHERTYPE_IPV6,
    PacketInfo,
    Timestamp,
)
from netreport.core.reader import PcapReader, build_report, link_to_packet_info
from netreport.protocols.classifier import Classification, classify
from netreport.report import OnePageReport, ReportConfig
from netreport.render.layout import RenderPass, RenderState, RenderStateError
from netreport.render.surface import PDF_AVAILABLE, Bounds, Surface, TextExtents
from netreport.formatting import comma_number_string, format_size
from netreport.exporters import to_dataframe, to_dict, to_json

__all__ = [
    # Main classes
    'OnePageReport',
    'ReportConfig',

    # Packets
    'PacketInfo',
    'Timestamp',
    'ETHERTYPE_ARP',
    'ETHERTYPE_IP',
    'ETHERTYPE_IPV6',
    'PcapReader',
    'build_report',
    'link_to_packet_info',
    'Classification',
    'classify',

    # Rendering
    'RenderPass',
    'RenderState',
    'RenderStateError',
    'PDF_AVAILABLE',
    'Bounds',
    'Surface',
    'TextExtents',

    # Formatting
    'comma_number_string',
    'format_size',

    # Exporters
    'to_dataframe',
    'to_dict',
    'to_json',
]
