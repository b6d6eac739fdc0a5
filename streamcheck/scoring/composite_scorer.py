"""Composite Scorer

This module combines the latest audio, video and network analyses into a
single readiness verdict: a 0-100 overall quality score and a categorical
overall status.

The two are independent. The score is a continuous diagnostic
(weighted 40% video, 40% audio, 20% network); the status is an alarm level
resolved from the three categorical statuses through a severity lattice.
They can disagree, e.g. a Critical network with an otherwise perfect setup
still scores at least 80.

All methods are pure: the scorer holds configuration only.
"""

import logging
import time
from typing import Dict, Optional

from streamcheck.analysis.stats import round_half_up
from streamcheck.config.thresholds import AudioThresholds, ScoringWeights
from streamcheck.models.enums import AudioStatus, VideoStatus, NetworkStatus, OverallStatus
from streamcheck.models.results import (
    AudioAnalysis,
    VideoAnalysis,
    NetworkAnalysis,
    QualityScore,
    DiagnosticSnapshot
)


logger = logging.getLogger(__name__)


AUDIO_STATUS_SCORES: Dict[AudioStatus, float] = {
    AudioStatus.BACKGROUND_NOISE: 70,
    AudioStatus.TOO_QUIET: 50,
    AudioStatus.TOO_LOUD: 40,
    AudioStatus.CLIPPING: 0,
}

VIDEO_STATUS_SCORES: Dict[VideoStatus, float] = {
    VideoStatus.ADJUST_CAMERA: 70,
    VideoStatus.UNEVEN_LIGHTING: 60,
    VideoStatus.TOO_DARK: 50,
    VideoStatus.OVEREXPOSED: 40,
}

# Any of these forces an overall Critical
CRITICAL_STATUSES = frozenset({AudioStatus.TOO_LOUD, VideoStatus.TOO_DARK, NetworkStatus.CRITICAL})

# Any of these (and nothing critical) forces an overall Poor
POOR_STATUSES = frozenset({
    AudioStatus.TOO_QUIET,
    VideoStatus.OVEREXPOSED,
    AudioStatus.CLIPPING,
    NetworkStatus.UNSTABLE,
})


class CompositeScorer:
    """Turns three analyzer results into one score and one status.

    Attributes:
        weights: Category weights for the overall quality score
        rms_optimal: RMS the audio bonus is centred on
    """

    def __init__(self, weights: Optional[ScoringWeights] = None, rms_optimal: Optional[float] = None):
        self.weights = weights or ScoringWeights.from_config()
        self.rms_optimal = rms_optimal if rms_optimal is not None else AudioThresholds.from_config().rms_optimal

        logger.info(f"CompositeScorer initialized with weights video={self.weights.video}, "
                    f"audio={self.weights.audio}, network={self.weights.network}")

    def _raw_audio_score(self, audio: AudioAnalysis) -> float:
        if audio.status == AudioStatus.OK:
            return max(85.0, 100.0 - 500.0 * abs(audio.rms - self.rms_optimal))
        return float(AUDIO_STATUS_SCORES[audio.status])

    def audio_score(self, audio: AudioAnalysis) -> int:
        """Map an audio analysis to a 0-100 sub-score.

        OK earns a bonus for sitting near the optimal speech level:
        ``max(85, 100 - 500 * |rms - rms_optimal|)``.
        """
        return round_half_up(self._raw_audio_score(audio))

    def video_score(self, video: VideoAnalysis) -> int:
        """Map a video analysis to a 0-100 sub-score.

        OK earns a bonus for even lighting: ``85 + 15 * uniformity_score``.
        """
        if video.status == VideoStatus.OK:
            score = 85.0 + 15.0 * video.uniformity_score
        else:
            score = VIDEO_STATUS_SCORES[video.status]
        return round_half_up(score)

    def score(self, audio: AudioAnalysis, video: VideoAnalysis, network: NetworkAnalysis) -> QualityScore:
        """Compute the weighted overall quality score.

        Args:
            audio: Latest audio analysis
            video: Latest video analysis
            network: Latest network analysis; its stability score is used as-is

        The audio sub-score enters the weighting unrounded; video and network
        enter as their rounded sub-scores.

        Returns:
            QualityScore with the three sub-scores and the clamped overall score
        """
        raw_audio = self._raw_audio_score(audio)
        video_score = self.video_score(video)
        network_score = round_half_up(network.stability_score)

        overall = round_half_up(
            self.weights.video * video_score +
            self.weights.audio * raw_audio +
            self.weights.network * network_score
        )

        return QualityScore(
            audio_score=round_half_up(raw_audio),
            video_score=video_score,
            network_score=network_score,
            overall_quality=max(0, min(100, overall))
        )

    def overall_status(self, audio: AudioAnalysis, video: VideoAnalysis, network: NetworkAnalysis) -> OverallStatus:
        """Resolve the overall status from the three categorical statuses.

        Critical if any status is critical, else Poor if any is poor, else Good
        when every check is at its best, otherwise Moderate.
        """
        statuses = (audio.status, video.status, network.status)

        if any(s in CRITICAL_STATUSES for s in statuses):
            return OverallStatus.CRITICAL

        if any(s in POOR_STATUSES for s in statuses):
            return OverallStatus.POOR

        if statuses == (AudioStatus.OK, VideoStatus.OK, NetworkStatus.GOOD):
            return OverallStatus.GOOD

        return OverallStatus.MODERATE

    def snapshot(
        self,
        audio: AudioAnalysis,
        video: VideoAnalysis,
        network: NetworkAnalysis,
        timestamp: Optional[float] = None
    ) -> DiagnosticSnapshot:
        """Build an immutable snapshot of one analysis cycle."""
        quality_score = self.score(audio, video, network)
        overall_status = self.overall_status(audio, video, network)

        logger.debug(f"Composite score: overall={quality_score.overall_quality}, "
                     f"status={overall_status.value}")

        return DiagnosticSnapshot(
            audio=audio,
            video=video,
            network=network,
            quality_score=quality_score,
            timestamp=time.time() if timestamp is None else timestamp,
            overall_status=overall_status
        )
