"""Network Analysis Module

This module converts periodic outbound transport counters into bitrate,
packet loss, latency and frame-drop metrics, tracks how stable each of them
has been over the last few seconds, and combines everything into a weighted
0-100 stability score and a discrete alarm level.

The score weights history (60%) over the instantaneous reading (40%), so a
single good poll cannot hide a jittery link and a single bad poll cannot sink
an otherwise steady one. The status is resolved independently from the
score: any metric crossing the critical tier raises the alarm on its own.

Absolute thresholds assume polls roughly every 500 ms; changing the cadence
without rescaling the window sizes changes what they mean.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from streamcheck.analysis.stats import SampleWindow, round_half_up, std_dev, trend_slope
from streamcheck.config.thresholds import NetworkThresholds
from streamcheck.models.enums import NetworkStatus
from streamcheck.models.results import NetworkAnalysis
from streamcheck.models.samples import NetworkSample


logger = logging.getLogger(__name__)


@dataclass
class _Baseline:
    """Counter values from the previous poll, needed for byte deltas"""
    bytes_sent: int
    timestamp: float


@dataclass
class StabilityMetrics:
    """Dispersion and trend measures over the rolling windows (lower is steadier)"""
    bitrate: float
    loss: float
    jitter: float
    rtt: float


class NetworkAnalyzer:
    """Analyzes transport counter polls to judge uplink quality.

    This class is stateful across polls: bitrate needs the previous byte
    count and poll time. Use one instance per monitored stream, called from
    one context at a time.

    Attributes:
        thresholds: Status tiers, normalization scales and weights
        bitrate_history: Recent bitrates (kbps)
        latency_history: Recent round-trip times (ms)
        packet_loss_history: Recent cumulative loss percentages
        fps_history: Recent encoder frame rates
        frame_drop_history: Recent frame drop ratios
    """

    def __init__(self, thresholds: Optional[NetworkThresholds] = None):
        self.thresholds = thresholds or NetworkThresholds.from_config()
        window = self.thresholds.history_window

        self.bitrate_history = SampleWindow(window)
        self.latency_history = SampleWindow(self.thresholds.latency_window)
        self.packet_loss_history = SampleWindow(window)
        self.fps_history = SampleWindow(window)
        self.frame_drop_history = SampleWindow(window)

        self._baseline: Optional[_Baseline] = None
        self.last_status: Optional[NetworkStatus] = None

        logger.info(f"NetworkAnalyzer initialized with history_window={window}, "
                    f"latency_window={self.thresholds.latency_window}")

    def _calculate_bitrate(self, sample: NetworkSample) -> Optional[float]:
        """Bitrate in kbps since the previous poll.

        Returns None when no rate can be measured: on the first poll, when no
        time has passed, or when the byte counter went backwards (transport
        restarted). In the last case the counter is re-baselined.
        """
        previous = self._baseline
        if previous is None:
            self._baseline = _Baseline(sample.bytes_sent, sample.timestamp)
            return None

        delta_seconds = sample.timestamp - previous.timestamp
        if delta_seconds <= 0:
            return None

        delta_bytes = sample.bytes_sent - previous.bytes_sent
        self._baseline = _Baseline(sample.bytes_sent, sample.timestamp)

        if delta_bytes < 0:
            logger.warning(f"bytes_sent went backwards ({previous.bytes_sent} -> {sample.bytes_sent}), "
                           f"re-baselining bitrate")
            return None

        return delta_bytes * 8 / delta_seconds / 1000

    @staticmethod
    def _calculate_packet_loss(sample: NetworkSample) -> float:
        if sample.packets_sent <= 0:
            return 0.0
        return min(sample.packets_lost / sample.packets_sent * 100.0, 100.0)

    @staticmethod
    def _calculate_frame_drop_ratio(sample: NetworkSample) -> float:
        if sample.frames_dropped is None or sample.frames_sent is None:
            return 0.0
        total = sample.frames_sent + sample.frames_dropped
        if total <= 0:
            return 0.0
        return sample.frames_dropped / total

    def _stability(self) -> StabilityMetrics:
        """Stability metrics from the rolling windows.

        Loss stability only counts increasing loss; jitter and RTT stability
        are both the dispersion of the latency window.
        """
        latency_dispersion = std_dev(self.latency_history)
        loss_trend = trend_slope(self.packet_loss_history, span=self.thresholds.loss_trend_span)
        return StabilityMetrics(
            bitrate=std_dev(self.bitrate_history),
            loss=max(0.0, loss_trend),
            jitter=latency_dispersion,
            rtt=latency_dispersion,
        )

    def calculate_stability_score(
        self,
        bitrate: float,
        packet_loss: float,
        latency: float,
        fps: float,
        frame_drop_ratio: float,
        stability: StabilityMetrics
    ) -> int:
        """Weighted 0-100 stability score.

        Pure with respect to its arguments. Current conditions (equal quarter
        weights for bitrate, loss, latency and fps) contribute 40%; the
        stability component (bitrate 0.35, loss 0.30, jitter 0.20, RTT 0.15)
        contributes 60%. Frame drops above the allowed ratio are subtracted
        as an explicit penalty before clamping.

        Args:
            bitrate: Current bitrate (kbps)
            packet_loss: Current loss percentage
            latency: Current round-trip time (ms)
            fps: Current encoder frame rate
            frame_drop_ratio: Current drop ratio [0, 1]
            stability: Stability metrics from the rolling windows

        Returns:
            Integer score in [0, 100]
        """
        t = self.thresholds

        bitrate_norm = min(bitrate / t.bitrate_optimal, 1.0)
        loss_norm = max(1.0 - packet_loss / t.packet_loss_scale, 0.0)
        latency_norm = max(1.0 - latency / t.latency_scale, 0.0)
        fps_norm = min(fps / t.fps_target, 1.0)
        current = 0.25 * (bitrate_norm + loss_norm + latency_norm + fps_norm)

        stability_component = (
            t.bitrate_stability_weight * max(1.0 - stability.bitrate / t.bitrate_stability_scale, 0.0) +
            t.loss_stability_weight * max(1.0 - stability.loss / t.loss_stability_scale, 0.0) +
            t.jitter_stability_weight * max(1.0 - stability.jitter / t.jitter_stability_scale, 0.0) +
            t.rtt_stability_weight * max(1.0 - stability.rtt / t.rtt_stability_scale, 0.0)
        )

        score = (t.current_weight * current + t.stability_weight * stability_component) * 100

        if frame_drop_ratio > t.max_frame_drop_ratio:
            score -= (frame_drop_ratio - t.max_frame_drop_ratio) * 100

        return round_half_up(max(0.0, min(100.0, score)))

    def _resolve_status(
        self,
        bitrate: float,
        packet_loss: float,
        latency: float,
        jitter: float,
        fps: float,
        frame_drop_ratio: float,
        stability: StabilityMetrics
    ) -> NetworkStatus:
        """Resolve the alarm level; the worst tier any metric reaches wins."""
        t = self.thresholds

        is_critical = (
            bitrate < t.bitrate_critical or
            packet_loss > t.packet_loss_poor or
            latency > t.latency_critical or
            fps < t.min_fps_viable or
            frame_drop_ratio > t.max_frame_drop_ratio
        )
        if is_critical:
            return NetworkStatus.CRITICAL

        is_unstable = (
            bitrate < t.bitrate_poor or
            packet_loss > t.packet_loss_moderate or
            latency > t.latency_poor or
            jitter > t.jitter or
            stability.bitrate > t.bitrate_stability or
            stability.loss > t.loss_stability
        )
        if is_unstable:
            return NetworkStatus.UNSTABLE

        is_moderate = (
            bitrate < t.bitrate_moderate or
            latency > t.latency_moderate or
            fps < t.min_fps_smooth
        )
        if is_moderate:
            return NetworkStatus.MODERATE

        return NetworkStatus.GOOD

    def analyze(self, sample: Optional[NetworkSample]) -> NetworkAnalysis:
        """Analyze one poll of transport counters.

        Args:
            sample: Counters for this poll, or None when no transport exists

        Returns:
            NetworkAnalysis for this poll. With no transport the result is
            zeroed with status Good and a stability score of 0.
        """
        if sample is None:
            return NetworkAnalysis()

        measured_bitrate = self._calculate_bitrate(sample)
        bitrate = measured_bitrate if measured_bitrate is not None else 0.0
        if measured_bitrate is not None:
            self.bitrate_history.push(measured_bitrate)

        latency = sample.round_trip_time_ms if sample.round_trip_time_ms is not None else 0.0
        if sample.round_trip_time_ms is not None:
            self.latency_history.push(latency)

        fps = sample.frames_per_second if sample.frames_per_second is not None else 0.0
        if sample.frames_per_second is not None:
            self.fps_history.push(fps)

        packet_loss = self._calculate_packet_loss(sample)
        self.packet_loss_history.push(packet_loss)

        frame_drop_ratio = self._calculate_frame_drop_ratio(sample)
        self.frame_drop_history.push(frame_drop_ratio)

        stability = self._stability()
        jitter = stability.jitter

        stability_score = self.calculate_stability_score(
            bitrate, packet_loss, latency, fps, frame_drop_ratio, stability
        )
        status = self._resolve_status(
            bitrate, packet_loss, latency, jitter, fps, frame_drop_ratio, stability
        )

        if status != self.last_status:
            logger.info(f"Network status changed: {self.last_status.value if self.last_status else None} -> {status.value}")
            self.last_status = status

        logger.debug(f"Network analysis: bitrate={bitrate:.0f}kbps, loss={packet_loss:.2f}%, "
                     f"rtt={latency:.0f}ms, jitter={jitter:.1f}ms, fps={fps:.0f}, "
                     f"drop={frame_drop_ratio:.3f}, score={stability_score}")

        return NetworkAnalysis(
            bitrate_kbps=bitrate,
            packet_loss=packet_loss,
            jitter_ms=jitter,
            latency_ms=latency,
            frames_per_second=fps,
            frame_drop_ratio=frame_drop_ratio,
            bitrate_stability=stability.bitrate,
            loss_stability=stability.loss,
            jitter_stability=stability.jitter,
            rtt_stability=stability.rtt,
            stability_score=stability_score,
            status=status
        )

    def reset(self) -> None:
        """Forget counters and history, e.g. when the transport is replaced."""
        for window in (self.bitrate_history, self.latency_history, self.packet_loss_history,
                       self.fps_history, self.frame_drop_history):
            window.clear()
        self._baseline = None
        self.last_status = None
        logger.info("NetworkAnalyzer state reset")
