"""Main Application Entry Point

This module composes the three analyzers and the composite scorer into one
diagnostic cycle, and provides an asyncio monitor that polls capture sources
on a fixed cadence. Running it as a script drives the monitor with synthetic
sources and logs every snapshot.

    python -m streamcheck.main [seconds]
"""

import asyncio
import logging
import sys
import time
from typing import Optional

import numpy as np

from streamcheck.analysis.audio import AudioAnalyzer, AudioBuffer
from streamcheck.analysis.video import VideoAnalyzer
from streamcheck.analysis.network import NetworkAnalyzer
from streamcheck.config.config_loader import config
from streamcheck.input.stats_reports import network_sample_from_reports
from streamcheck.models.interfaces import AudioSource, FrameSource, TransportStatsSource
from streamcheck.models.results import DiagnosticSnapshot
from streamcheck.models.samples import NetworkSample
from streamcheck.scoring.composite_scorer import CompositeScorer


logger = logging.getLogger(__name__)


class DiagnosticsEngine:
    """Runs one analysis cycle across audio, video and network.

    Each analyzer keeps its own rolling state; the engine only sequences the
    calls and hands the three results to the composite scorer.

    Attributes:
        audio_analyzer: Microphone analyzer
        video_analyzer: Camera lighting analyzer
        network_analyzer: Uplink analyzer
        scorer: Composite scorer
        latest_snapshot: Most recent snapshot (cached)
        cycle_budget_ms: Cycles slower than this are logged as warnings
    """

    def __init__(
        self,
        audio_analyzer: Optional[AudioAnalyzer] = None,
        video_analyzer: Optional[VideoAnalyzer] = None,
        network_analyzer: Optional[NetworkAnalyzer] = None,
        scorer: Optional[CompositeScorer] = None
    ):
        self.audio_analyzer = audio_analyzer or AudioAnalyzer()
        self.video_analyzer = video_analyzer or VideoAnalyzer()
        self.network_analyzer = network_analyzer or NetworkAnalyzer()
        self.scorer = scorer or CompositeScorer(rms_optimal=self.audio_analyzer.thresholds.rms_optimal)
        self.cycle_budget_ms = config.get('monitor.cycle_budget_ms', 30)

        self.latest_snapshot: Optional[DiagnosticSnapshot] = None

        logger.info("DiagnosticsEngine initialized")

    def run_cycle(
        self,
        audio_buffer: Optional[AudioBuffer],
        image: Optional[np.ndarray],
        network_sample: Optional[NetworkSample]
    ) -> DiagnosticSnapshot:
        """Analyze one sample per source and compose the snapshot.

        Args:
            audio_buffer: Analyser bytes for the current audio frame, or None
            image: Current camera frame, or None
            network_sample: Current transport counters, or None

        Returns:
            DiagnosticSnapshot for this cycle (also cached as latest_snapshot)
        """
        start = time.perf_counter()

        audio = self.audio_analyzer.analyze(audio_buffer)
        video = self.video_analyzer.analyze(image)
        network = self.network_analyzer.analyze(network_sample)
        snapshot = self.scorer.snapshot(audio, video, network)

        self.latest_snapshot = snapshot

        elapsed_ms = (time.perf_counter() - start) * 1000
        if elapsed_ms > self.cycle_budget_ms:
            logger.warning(f"Diagnostic cycle took {elapsed_ms:.1f}ms (budget {self.cycle_budget_ms}ms)")
        else:
            logger.debug(f"Diagnostic cycle completed in {elapsed_ms:.2f}ms")

        return snapshot

    def get_latest_snapshot(self) -> Optional[DiagnosticSnapshot]:
        """Most recent snapshot, or None before the first cycle."""
        return self.latest_snapshot

    def reset(self) -> None:
        """Clear all accumulated state, e.g. when the creator switches devices."""
        self.audio_analyzer.reset()
        self.video_analyzer.reset()
        self.network_analyzer.reset()
        self.latest_snapshot = None
        logger.info("DiagnosticsEngine state reset")


class DiagnosticsMonitor:
    """Polls capture sources and runs a diagnostic cycle on a fixed interval.

    Stopping is cooperative: cancel the task running ``start()`` or call
    ``stop()``. A failing cycle is logged and polling continues.

    Attributes:
        engine: Engine running each cycle
        interval: Seconds between cycles
        cycles: Number of completed cycles
    """

    def __init__(
        self,
        engine: DiagnosticsEngine,
        audio_source: Optional[AudioSource] = None,
        frame_source: Optional[FrameSource] = None,
        stats_source: Optional[TransportStatsSource] = None,
        interval: Optional[float] = None
    ):
        self.engine = engine
        self.audio_source = audio_source
        self.frame_source = frame_source
        self.stats_source = stats_source
        self.interval = interval if interval is not None else config.get('monitor.interval', 1.0)
        self.cycles = 0
        self._stop_event: Optional[asyncio.Event] = None

    async def poll_once(self) -> DiagnosticSnapshot:
        """Read every source once and run one cycle."""
        audio_buffer = self.audio_source.read_frequency_data() if self.audio_source else None
        image = self.frame_source.read_frame() if self.frame_source else None

        network_sample = None
        if self.stats_source:
            reports = await self.stats_source.get_stats()
            network_sample = network_sample_from_reports(reports)

        snapshot = self.engine.run_cycle(audio_buffer, image, network_sample)
        self.cycles += 1
        return snapshot

    async def start(self):
        """Poll until cancelled or stopped."""
        logger.info(f"Starting diagnostics monitor with interval={self.interval}s")
        self._stop_event = asyncio.Event()

        while not self._stop_event.is_set():
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                logger.info("Diagnostics monitor task cancelled")
                raise
            except Exception as e:
                logger.error(f"Error in diagnostic cycle: {e}", exc_info=True)

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        logger.info(f"Diagnostics monitor stopped after {self.cycles} cycles")

    def stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()


class SyntheticAudioSource(AudioSource):
    """Speech-level analyser frames with a little noise"""

    def __init__(self, fft_size: int = 2048, level: float = 0.08, seed: Optional[int] = None):
        self.fft_size = fft_size
        self.level = level
        self.rng = np.random.default_rng(seed)

    def read_frequency_data(self) -> np.ndarray:
        signal = self.rng.normal(0.0, self.level, self.fft_size)
        return np.clip(np.round(signal * 128 + 128), 0, 255).astype(np.uint8)


class SyntheticFrameSource(FrameSource):
    """Evenly lit mid-gray frames with slight sensor noise"""

    def __init__(self, width: int = 640, height: int = 480, level: int = 120, seed: Optional[int] = None):
        self.shape = (height, width, 3)
        self.level = level
        self.rng = np.random.default_rng(seed)

    def read_frame(self) -> np.ndarray:
        noise = self.rng.integers(-4, 5, self.shape)
        return np.clip(self.level + noise, 0, 255).astype(np.uint8)


class SyntheticStatsSource(TransportStatsSource):
    """Outbound video stream at a roughly constant bitrate"""

    def __init__(self, bitrate_kbps: float = 1800.0, rtt_ms: float = 40.0, seed: Optional[int] = None):
        self.bitrate_kbps = bitrate_kbps
        self.rtt_ms = rtt_ms
        self.rng = np.random.default_rng(seed)
        self.bytes_sent = 0
        self.packets_sent = 0
        self.frames_sent = 0
        self.last_poll = time.monotonic()

    async def get_stats(self):
        now = time.monotonic()
        elapsed = now - self.last_poll
        self.last_poll = now

        sent = int(self.bitrate_kbps * 1000 / 8 * elapsed * self.rng.uniform(0.95, 1.05))
        self.bytes_sent += sent
        self.packets_sent += max(sent // 1200, 1)
        self.frames_sent += int(30 * elapsed)

        return [
            {
                'type': 'outbound-rtp',
                'kind': 'video',
                'bytesSent': self.bytes_sent,
                'packetsSent': self.packets_sent,
                'packetsLost': 0,
                'framesPerSecond': 30,
                'framesSent': self.frames_sent,
                'framesDropped': 0,
            },
            {
                'type': 'candidate-pair',
                'nominated': True,
                'currentRoundTripTime': self.rng.normal(self.rtt_ms, 2.0) / 1000,
            },
        ]


def setup_logging() -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, str(config.get('logging.level', 'INFO')).upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


async def main_async(duration: float):
    """Run the monitor against synthetic sources for ``duration`` seconds."""
    engine = DiagnosticsEngine()
    monitor = DiagnosticsMonitor(
        engine,
        audio_source=SyntheticAudioSource(),
        frame_source=SyntheticFrameSource(),
        stats_source=SyntheticStatsSource()
    )

    task = asyncio.create_task(monitor.start(), name="diagnostics_monitor")
    deadline = time.monotonic() + duration
    last_reported = None

    while time.monotonic() < deadline:
        await asyncio.sleep(monitor.interval)
        snapshot = engine.get_latest_snapshot()
        if snapshot is not None and snapshot is not last_reported:
            last_reported = snapshot
            logger.info(
                f"overall={snapshot.overall_status.value} quality={snapshot.quality_score.overall_quality} "
                f"audio={snapshot.audio.status.value} video={snapshot.video.status.value} "
                f"network={snapshot.network.status.value} ({snapshot.network.bitrate_kbps:.0f}kbps)"
            )

    monitor.stop()
    await task


def main():
    """Main entry point."""
    setup_logging()
    try:
        config.validate()
        duration = float(sys.argv[1]) if len(sys.argv) > 1 else 10.0
        asyncio.run(main_async(duration))
    except KeyboardInterrupt:
        logger.info("Diagnostics terminated by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
