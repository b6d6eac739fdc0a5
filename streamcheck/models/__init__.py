"""Data models and interfaces"""

from streamcheck.models.enums import AudioStatus, VideoStatus, NetworkStatus, OverallStatus
from streamcheck.models.samples import NetworkSample
from streamcheck.models.results import (
    AudioAnalysis,
    VideoAnalysis,
    NetworkAnalysis,
    QualityScore,
    DiagnosticSnapshot
)
from streamcheck.models.interfaces import (
    AudioSource,
    FrameSource,
    TransportStatsSource
)

__all__ = [
    # Enums
    "AudioStatus",
    "VideoStatus",
    "NetworkStatus",
    "OverallStatus",
    # Samples
    "NetworkSample",
    # Results
    "AudioAnalysis",
    "VideoAnalysis",
    "NetworkAnalysis",
    "QualityScore",
    "DiagnosticSnapshot",
    # Interfaces
    "AudioSource",
    "FrameSource",
    "TransportStatsSource",
]
