"""Data models for raw samples pushed into the analyzers"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class NetworkSample:
    """One poll of outbound transport counters

    Counters are cumulative since the transport started. Optional fields are
    None when the transport did not report them in this poll.

    Attributes:
        bytes_sent: Cumulative payload bytes sent
        packets_sent: Cumulative packets sent
        packets_lost: Cumulative packets reported lost by the receiver
        round_trip_time_ms: Current round-trip time of the active transport pair
        frames_per_second: Encoder output frame rate
        frames_sent: Cumulative frames sent
        frames_dropped: Cumulative frames dropped before sending
        timestamp: Poll time in seconds (monotonic clock)
    """
    bytes_sent: int = 0
    packets_sent: int = 0
    packets_lost: int = 0
    round_trip_time_ms: Optional[float] = None
    frames_per_second: Optional[float] = None
    frames_sent: Optional[int] = None
    frames_dropped: Optional[int] = None
    timestamp: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        """Validate counter values"""
        assert self.bytes_sent >= 0, "bytes_sent must be non-negative"
        assert self.packets_sent >= 0, "packets_sent must be non-negative"
        assert self.packets_lost >= 0, "packets_lost must be non-negative"
        if self.round_trip_time_ms is not None:
            assert self.round_trip_time_ms >= 0, "round_trip_time_ms must be non-negative"
        if self.frames_per_second is not None:
            assert self.frames_per_second >= 0, "frames_per_second must be non-negative"
