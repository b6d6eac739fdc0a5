"""Analysis modules for audio, video, and network quality"""

from streamcheck.analysis.audio import AudioAnalyzer, AudioProcessingError
from streamcheck.analysis.video import VideoAnalyzer, FrameFormatError, sample_luminance_grid
from streamcheck.analysis.network import NetworkAnalyzer, StabilityMetrics

__all__ = [
    'AudioAnalyzer',
    'AudioProcessingError',
    'VideoAnalyzer',
    'FrameFormatError',
    'sample_luminance_grid',
    'NetworkAnalyzer',
    'StabilityMetrics',
]
