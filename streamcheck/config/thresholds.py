"""Tunable thresholds for the quality analyzers

Every numeric threshold the analyzers and the composite scorer use lives in
one of these dataclasses. Defaults are the current production values; any
field can be overridden from the YAML config (section named after the
analyzer) or by constructing the dataclass directly.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional

from streamcheck.config.config_loader import Config, config as global_config


def _from_section(cls, cfg: Optional[Config], section: str):
    cfg = cfg if cfg is not None else global_config
    overrides = {}
    for f in fields(cls):
        value = cfg.get(f"{section}.{f.name}")
        if value is not None:
            overrides[f.name] = value
    return cls(**overrides)


@dataclass
class AudioThresholds:
    """Audio loudness, clipping and noise thresholds

    Attributes:
        rms_low: Below this RMS the input is a "Too Quiet" candidate
        rms_optimal: Centre of the ideal speech range
        rms_high: Above this RMS the input is a "Too Loud" candidate
        clip_percent: Share of clipped samples (percent) that counts as audible clipping
        clip_level: Normalized magnitude at which a sample counts as clipped
        noise_sensitivity: Multiplier above the noise floor defining noise-like samples
        noise_ceiling: Upper magnitude bound for noise-like samples
        noise_floor_percentile: Percentile of magnitudes used as noise floor
        background_noise_percent: Share of noise-like samples (percent) that flags background noise
        edge_guard: Samples skipped at each end of the buffer for RMS
        rms_window: Capacity of the rolling RMS window
    """
    rms_low: float = 0.01
    rms_optimal: float = 0.08
    rms_high: float = 0.70
    clip_percent: float = 5.0
    clip_level: float = 0.95
    noise_sensitivity: float = 0.15
    noise_ceiling: float = 0.3
    noise_floor_percentile: float = 5.0
    background_noise_percent: float = 40.0
    edge_guard: int = 10
    rms_window: int = 512

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "AudioThresholds":
        return _from_section(cls, cfg, 'audio')


@dataclass
class VideoThresholds:
    """Lighting thresholds on the 0-255 luminance scale"""
    grid_size: int = 16
    brightness_low: float = 30.0
    brightness_high: float = 180.0
    uniformity_std_dev: float = 30.0
    fluctuation: float = 15.0
    history_size: int = 10

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "VideoThresholds":
        return _from_section(cls, cfg, 'video')


@dataclass
class NetworkThresholds:
    """Network alarm tiers, score normalization scales and stability weights

    Tiers run Critical < Poor < Moderate; a single metric crossing the worst
    tier decides the status on its own.
    """
    history_window: int = 10
    latency_window: int = 10
    loss_trend_span: int = 3

    # Status tiers
    bitrate_critical: float = 250.0
    bitrate_poor: float = 500.0
    bitrate_moderate: float = 1000.0
    latency_moderate: float = 100.0
    latency_poor: float = 200.0
    latency_critical: float = 300.0
    packet_loss_moderate: float = 1.0
    packet_loss_poor: float = 2.0
    jitter: float = 30.0
    min_fps_viable: float = 20.0
    min_fps_smooth: float = 24.0
    max_frame_drop_ratio: float = 0.10
    bitrate_stability: float = 200.0
    loss_stability: float = 1.0

    # Current-conditions normalization
    bitrate_optimal: float = 1500.0
    packet_loss_scale: float = 5.0
    latency_scale: float = 500.0
    fps_target: float = 30.0

    # Stability normalization
    bitrate_stability_scale: float = 500.0
    loss_stability_scale: float = 2.0
    jitter_stability_scale: float = 100.0
    rtt_stability_scale: float = 200.0

    # Stability component weights
    bitrate_stability_weight: float = 0.35
    loss_stability_weight: float = 0.30
    jitter_stability_weight: float = 0.20
    rtt_stability_weight: float = 0.15

    # Split between current conditions and stability
    current_weight: float = 0.4
    stability_weight: float = 0.6

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "NetworkThresholds":
        return _from_section(cls, cfg, 'network')


@dataclass
class ScoringWeights:
    """Category weights for the overall quality score"""
    video: float = 0.4
    audio: float = 0.4
    network: float = 0.2

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "ScoringWeights":
        cfg = cfg if cfg is not None else global_config
        weights: Dict[str, float] = cfg.get('scoring.weights', {})
        return cls(**{k: v for k, v in weights.items() if k in ('video', 'audio', 'network')})
