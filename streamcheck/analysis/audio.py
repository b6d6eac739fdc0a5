"""Audio Analysis Module

This module turns one frame of analyser byte data into a microphone quality
verdict. It measures loudness, clipping and background noise, and resolves
them to a single status through a fixed priority chain.

The analyzer keeps a rolling RMS window for callers that want a smoothed
trend; the status itself is always judged on the instantaneous frame.
"""

import logging
from typing import Optional, Sequence, Union
import numpy as np

from streamcheck.analysis.stats import SampleWindow, mean, percentile, trend_slope
from streamcheck.config.thresholds import AudioThresholds
from streamcheck.models.enums import AudioStatus
from streamcheck.models.results import AudioAnalysis


logger = logging.getLogger(__name__)

AudioBuffer = Union[np.ndarray, bytes, bytearray, Sequence[int]]


class AudioProcessingError(Exception):
    """Exception raised for structurally invalid audio buffers"""
    pass


class AudioAnalyzer:
    """Analyzes analyser byte frames to judge microphone signal quality.

    This class implements the audio analysis module that:
    1. Normalizes each byte of the frame to [-1, 1]
    2. Computes RMS loudness, skipping edge samples
    3. Measures the share of clipped samples
    4. Estimates the noise floor and the share of noise-like samples
    5. Keeps a rolling RMS window for smoothed trends
    6. Resolves a status: Clipping > Too Loud > Too Quiet > Background Noise > OK

    A missing frame is not an error: the analyzer abstains and reports a zeroed
    OK result. Reporting a missing device is the capture layer's job.

    Attributes:
        thresholds: Tunable loudness, clipping and noise thresholds
        rms_window: Rolling window of recent RMS values
        last_status: Status resolved on the previous frame
    """

    def __init__(self, thresholds: Optional[AudioThresholds] = None):
        """Initialize the audio analyzer with thresholds from config."""
        self.thresholds = thresholds or AudioThresholds.from_config()
        self.rms_window = SampleWindow(self.thresholds.rms_window)
        self.last_status: Optional[AudioStatus] = None

        logger.info(f"AudioAnalyzer initialized with rms_window={self.thresholds.rms_window}")

    def _normalize(self, buffer: AudioBuffer) -> np.ndarray:
        """Convert raw analyser bytes to floats in [-1, 1].

        Raises:
            AudioProcessingError: If the buffer is not one-dimensional
        """
        if isinstance(buffer, (bytes, bytearray)):
            raw = np.frombuffer(bytes(buffer), dtype=np.uint8)
        else:
            raw = np.asarray(buffer)

        if raw.ndim != 1:
            raise AudioProcessingError(f"Audio buffer must be one-dimensional, got shape {raw.shape}")

        return (raw.astype(np.float64) - 128.0) / 128.0

    def _calculate_rms(self, samples: np.ndarray) -> float:
        """RMS amplitude excluding ``edge_guard`` samples at each end, capped at 1."""
        guard = self.thresholds.edge_guard
        inner = samples[guard:len(samples) - guard]
        if inner.size == 0:
            return 0.0
        rms = float(np.sqrt(np.mean(inner * inner)))
        return min(rms, 1.0)

    def _detect_clipping(self, magnitudes: np.ndarray) -> float:
        """Percentage of samples at or above the clip level."""
        clipped = np.count_nonzero(magnitudes >= self.thresholds.clip_level)
        return clipped / magnitudes.size * 100.0

    def _estimate_noise_floor(self, magnitudes: np.ndarray) -> float:
        return percentile(magnitudes, self.thresholds.noise_floor_percentile)

    def _detect_background_noise(self, magnitudes: np.ndarray, noise_floor: float) -> float:
        """Percentage of samples sitting just above the noise floor.

        A sample is noise-like when its magnitude lies strictly between
        ``noise_floor * (1 + noise_sensitivity)`` and ``noise_ceiling``.
        """
        lower = noise_floor * (1 + self.thresholds.noise_sensitivity)
        noisy = np.count_nonzero((magnitudes > lower) & (magnitudes < self.thresholds.noise_ceiling))
        return noisy / magnitudes.size * 100.0

    def _resolve_status(self, rms: float, clipping_percent: float, background_noise_percent: float) -> AudioStatus:
        """Resolve the status; first matching rule wins."""
        t = self.thresholds
        if clipping_percent > t.clip_percent:
            return AudioStatus.CLIPPING
        if rms > t.rms_high:
            return AudioStatus.TOO_LOUD
        if rms < t.rms_low:
            return AudioStatus.TOO_QUIET
        if background_noise_percent > t.background_noise_percent and rms < t.rms_optimal:
            return AudioStatus.BACKGROUND_NOISE
        return AudioStatus.OK

    def analyze(self, buffer: Optional[AudioBuffer]) -> AudioAnalysis:
        """Analyze one frame of analyser data.

        Args:
            buffer: uint8 frequency-magnitude bytes for one FFT frame, or None
                    when no analyser is attached

        Returns:
            AudioAnalysis for this frame. A missing or empty buffer yields a
            zeroed result with status OK and leaves the RMS window untouched.

        Raises:
            AudioProcessingError: If the buffer is not one-dimensional
        """
        if buffer is None:
            return AudioAnalysis()

        samples = self._normalize(buffer)
        if samples.size == 0:
            return AudioAnalysis()

        magnitudes = np.abs(samples)

        rms = self._calculate_rms(samples)
        clipping_percent = self._detect_clipping(magnitudes)
        noise_floor = min(self._estimate_noise_floor(magnitudes), 1.0)
        background_noise_percent = self._detect_background_noise(magnitudes, noise_floor)

        self.rms_window.push(rms)

        status = self._resolve_status(rms, clipping_percent, background_noise_percent)
        if status != self.last_status:
            logger.info(f"Audio status changed: {self.last_status.value if self.last_status else None} -> {status.value}")
            self.last_status = status

        logger.debug(f"Audio analysis: rms={rms:.4f}, clipping={clipping_percent:.2f}%, "
                     f"noise_floor={noise_floor:.4f}, background={background_noise_percent:.1f}%")

        return AudioAnalysis(
            rms=rms,
            clipping=clipping_percent > self.thresholds.clip_percent,
            clipping_percent=clipping_percent,
            noise_floor=noise_floor,
            background_noise_percent=background_noise_percent,
            status=status
        )

    def smoothed_rms(self) -> float:
        """Mean RMS over the rolling window (0 before the first frame)."""
        return mean(self.rms_window)

    def rms_trend(self) -> float:
        """Slope of RMS across the rolling window; positive means getting louder."""
        return trend_slope(self.rms_window)

    def reset(self) -> None:
        """Drop all rolling state, e.g. when the input device changes."""
        self.rms_window.clear()
        self.last_status = None
        logger.info("AudioAnalyzer state reset")
