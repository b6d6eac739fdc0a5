"""Transport stats adapter: WebRTC-style stats reports to NetworkSample"""

import logging
import time
from typing import Any, Dict, Iterable, Mapping, Optional

from streamcheck.models.samples import NetworkSample


logger = logging.getLogger(__name__)


class StatsReportError(Exception):
    """Exception raised for malformed stats reports"""
    pass


def _select_outbound(reports: Iterable[Mapping[str, Any]], kind: str) -> Optional[Mapping[str, Any]]:
    for report in reports:
        if report.get('type') == 'outbound-rtp' and report.get('kind', kind) == kind:
            return report
    return None


def _select_candidate_pair(reports: Iterable[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """Nominated pair if one reports an RTT, else the last pair that does."""
    chosen = None
    for report in reports:
        if report.get('type') != 'candidate-pair' or report.get('currentRoundTripTime') is None:
            continue
        if report.get('nominated'):
            return report
        chosen = report
    return chosen


def network_sample_from_reports(
    reports: Iterable[Mapping[str, Any]],
    timestamp: Optional[float] = None,
    kind: str = "video"
) -> NetworkSample:
    """Build a NetworkSample from one round of transport stats reports.

    The outbound RTP report of the requested media kind supplies byte, packet
    and frame counters; the active candidate pair supplies the round-trip
    time, reported in seconds and converted to milliseconds. Fields missing
    from the reports stay absent on the sample.

    Args:
        reports: Report dictionaries (``type``, ``kind``, ``bytesSent``, ...)
        timestamp: Poll time in seconds; defaults to the monotonic clock
        kind: Media kind of the outbound stream to read

    Returns:
        NetworkSample for this poll

    Raises:
        StatsReportError: If any report is not a mapping or a counter is not numeric
    """
    reports = list(reports)
    for report in reports:
        if not isinstance(report, Mapping):
            raise StatsReportError(f"Stats report must be a mapping, got {type(report).__name__}")

    outbound: Dict[str, Any] = dict(_select_outbound(reports, kind) or {})
    pair = _select_candidate_pair(reports)

    if not outbound:
        logger.debug(f"No outbound-rtp report for kind={kind}")

    try:
        rtt = pair.get('currentRoundTripTime') if pair else None
        return NetworkSample(
            bytes_sent=int(outbound.get('bytesSent', 0)),
            packets_sent=int(outbound.get('packetsSent', 0)),
            packets_lost=max(int(outbound.get('packetsLost', 0)), 0),
            round_trip_time_ms=float(rtt) * 1000 if rtt is not None else None,
            frames_per_second=_optional_float(outbound.get('framesPerSecond')),
            frames_sent=_optional_int(outbound.get('framesSent')),
            frames_dropped=_optional_int(outbound.get('framesDropped')),
            timestamp=time.monotonic() if timestamp is None else timestamp
        )
    except (TypeError, ValueError, AssertionError) as e:
        raise StatsReportError(f"Invalid counter in stats report: {e}") from e


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None
