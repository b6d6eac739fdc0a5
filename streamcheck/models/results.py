"""Data models for analysis results

Results are immutable: every analysis cycle produces fresh instances that
supersede the previous ones.
"""

from dataclasses import dataclass

from streamcheck.models.enums import AudioStatus, VideoStatus, NetworkStatus, OverallStatus


@dataclass(frozen=True)
class AudioAnalysis:
    """Result from audio analysis

    Attributes:
        rms: Root-mean-square amplitude of the frame [0, 1]
        clipping: Whether the clipped share exceeds the audible threshold
        clipping_percent: Share of samples at or above the clip level [0, 100]
        noise_floor: Low-percentile magnitude, an ambient noise proxy [0, 1]
        background_noise_percent: Share of noise-like samples [0, 100]
        status: Resolved microphone status
    """
    rms: float = 0.0
    clipping: bool = False
    clipping_percent: float = 0.0
    noise_floor: float = 0.0
    background_noise_percent: float = 0.0
    status: AudioStatus = AudioStatus.OK

    def __post_init__(self):
        """Validate result data"""
        assert 0.0 <= self.rms <= 1.0, "RMS must be in [0, 1]"
        assert 0.0 <= self.clipping_percent <= 100.0, "Clipping percent must be in [0, 100]"
        assert 0.0 <= self.noise_floor <= 1.0, "Noise floor must be in [0, 1]"
        assert 0.0 <= self.background_noise_percent <= 100.0, "Background noise percent must be in [0, 100]"


@dataclass(frozen=True)
class VideoAnalysis:
    """Result from video analysis

    Attributes:
        brightness: Mean grid-cell luminance [0, 255]
        uniformity_score: 1 - min(std_dev / 255, 1); 1 means perfectly even lighting
        uniformity_std_dev: Population std dev of grid-cell luminance
        fluctuation: Mean absolute deviation of recent frame brightness
        status: Resolved lighting status
    """
    brightness: float = 0.0
    uniformity_score: float = 0.0
    uniformity_std_dev: float = 0.0
    fluctuation: float = 0.0
    status: VideoStatus = VideoStatus.OK

    def __post_init__(self):
        """Validate result data"""
        assert 0.0 <= self.brightness <= 255.0, "Brightness must be in [0, 255]"
        assert 0.0 <= self.uniformity_score <= 1.0, "Uniformity score must be in [0, 1]"
        assert self.uniformity_std_dev >= 0, "Uniformity std dev must be non-negative"
        assert self.fluctuation >= 0, "Fluctuation must be non-negative"


@dataclass(frozen=True)
class NetworkAnalysis:
    """Result from network analysis

    The ``*_stability`` fields are dispersion or trend measures where lower
    means more stable; they are not 0-100 scores.

    Attributes:
        bitrate_kbps: Outbound bitrate over the last poll interval
        packet_loss: Cumulative loss percentage [0, 100]
        jitter_ms: Std dev of recent round-trip times
        latency_ms: Current round-trip time
        frames_per_second: Encoder frame rate
        frame_drop_ratio: Dropped / (sent + dropped) [0, 1]
        bitrate_stability: Std dev of the bitrate window
        loss_stability: Non-negative slope of recent packet loss
        jitter_stability: Std dev of the latency window
        rtt_stability: Std dev of the latency window
        stability_score: Weighted composite [0, 100]
        status: Resolved alarm level
    """
    bitrate_kbps: float = 0.0
    packet_loss: float = 0.0
    jitter_ms: float = 0.0
    latency_ms: float = 0.0
    frames_per_second: float = 0.0
    frame_drop_ratio: float = 0.0
    bitrate_stability: float = 0.0
    loss_stability: float = 0.0
    jitter_stability: float = 0.0
    rtt_stability: float = 0.0
    stability_score: int = 0
    status: NetworkStatus = NetworkStatus.GOOD

    def __post_init__(self):
        """Validate result data"""
        assert self.bitrate_kbps >= 0, "Bitrate must be non-negative"
        assert 0.0 <= self.packet_loss <= 100.0, "Packet loss must be in [0, 100]"
        assert self.jitter_ms >= 0, "Jitter must be non-negative"
        assert self.latency_ms >= 0, "Latency must be non-negative"
        assert self.frames_per_second >= 0, "Frames per second must be non-negative"
        assert 0.0 <= self.frame_drop_ratio <= 1.0, "Frame drop ratio must be in [0, 1]"
        for name in ('bitrate_stability', 'loss_stability', 'jitter_stability', 'rtt_stability'):
            assert getattr(self, name) >= 0, f"{name} must be non-negative"
        assert 0 <= self.stability_score <= 100, "Stability score must be in [0, 100]"


@dataclass(frozen=True)
class QualityScore:
    """Per-category and overall quality scores, all in [0, 100]"""
    audio_score: int
    video_score: int
    network_score: int
    overall_quality: int

    def __post_init__(self):
        """Validate scores"""
        for name in ('audio_score', 'video_score', 'network_score', 'overall_quality'):
            assert 0 <= getattr(self, name) <= 100, f"{name} must be in [0, 100]"


@dataclass(frozen=True)
class DiagnosticSnapshot:
    """Everything known about one analysis cycle

    Attributes:
        audio: Latest audio analysis
        video: Latest video analysis
        network: Latest network analysis
        quality_score: Composite numeric scores
        timestamp: Wall-clock time the snapshot was built (seconds since epoch)
        overall_status: Categorical readiness, resolved independently of the score
    """
    audio: AudioAnalysis
    video: VideoAnalysis
    network: NetworkAnalysis
    quality_score: QualityScore
    timestamp: float
    overall_status: OverallStatus

    def __post_init__(self):
        """Validate snapshot"""
        assert self.timestamp >= 0, "Timestamp must be non-negative"
