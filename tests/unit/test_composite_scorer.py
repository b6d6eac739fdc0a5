"""Unit tests for the Composite Scorer"""

import pytest

from streamcheck.config.thresholds import ScoringWeights
from streamcheck.models.enums import AudioStatus, VideoStatus, NetworkStatus, OverallStatus
from streamcheck.models.results import AudioAnalysis, VideoAnalysis, NetworkAnalysis
from streamcheck.scoring.composite_scorer import CompositeScorer


@pytest.fixture
def scorer(scoring_weights):
    """Create a CompositeScorer with the default 40/40/20 weights"""
    return CompositeScorer(weights=scoring_weights, rms_optimal=0.08)


def audio(status=AudioStatus.OK, rms=0.08):
    return AudioAnalysis(rms=rms, status=status)


def video(status=VideoStatus.OK, uniformity=1.0):
    return VideoAnalysis(brightness=120.0, uniformity_score=uniformity, status=status)


def network(status=NetworkStatus.GOOD, score=100):
    return NetworkAnalysis(bitrate_kbps=1800.0, stability_score=score, status=status)


def test_default_weights(scorer):
    assert scorer.weights.video == 0.4
    assert scorer.weights.audio == 0.4
    assert scorer.weights.network == 0.2


@pytest.mark.parametrize("rms, expected", [
    (0.08, 100),
    (0.06, 90),
    (0.10, 90),
    (0.50, 85),
])
def test_audio_score_ok_bonus(scorer, rms, expected):
    """Test that OK audio earns more the closer it sits to the optimal level"""
    assert scorer.audio_score(audio(rms=rms)) == expected


@pytest.mark.parametrize("status, expected", [
    (AudioStatus.BACKGROUND_NOISE, 70),
    (AudioStatus.TOO_QUIET, 50),
    (AudioStatus.TOO_LOUD, 40),
    (AudioStatus.CLIPPING, 0),
])
def test_audio_score_by_status(scorer, status, expected):
    assert scorer.audio_score(audio(status=status)) == expected


@pytest.mark.parametrize("uniformity, expected", [
    (1.0, 100),
    (0.6, 94),
    (0.9, 99),
    (0.0, 85),
])
def test_video_score_ok_bonus(scorer, uniformity, expected):
    assert scorer.video_score(video(uniformity=uniformity)) == expected


@pytest.mark.parametrize("status, expected", [
    (VideoStatus.ADJUST_CAMERA, 70),
    (VideoStatus.UNEVEN_LIGHTING, 60),
    (VideoStatus.TOO_DARK, 50),
    (VideoStatus.OVEREXPOSED, 40),
])
def test_video_score_by_status(scorer, status, expected):
    assert scorer.video_score(video(status=status)) == expected


def test_perfect_setup_scores_100(scorer):
    result = scorer.score(audio(), video(), network())

    assert result.audio_score == 100
    assert result.video_score == 100
    assert result.network_score == 100
    assert result.overall_quality == 100


def test_weighted_overall_quality(scorer):
    result = scorer.score(audio(status=AudioStatus.TOO_QUIET), video(status=VideoStatus.TOO_DARK), network(score=60))

    # 0.4 * 50 + 0.4 * 50 + 0.2 * 60
    assert result.overall_quality == 52


def test_critical_network_with_perfect_setup_still_scores_high(scorer):
    result = scorer.score(audio(), video(), network(status=NetworkStatus.CRITICAL, score=0))
    status = scorer.overall_status(audio(), video(), network(status=NetworkStatus.CRITICAL, score=0))

    assert result.overall_quality == 80
    assert status == OverallStatus.CRITICAL


def test_overall_weights_unrounded_audio_score(scorer):
    """Test that the audio bonus enters the overall score before rounding"""
    result = scorer.score(audio(rms=0.0828), video(), network(status=NetworkStatus.CRITICAL, score=0))

    # 0.4 * 100 + 0.4 * 98.6 + 0.2 * 0 = 79.44
    assert result.audio_score == 99
    assert result.overall_quality == 79


def test_custom_weights():
    scorer = CompositeScorer(weights=ScoringWeights(video=0.0, audio=0.0, network=1.0), rms_optimal=0.08)
    result = scorer.score(audio(), video(), network(score=42))

    assert result.overall_quality == 42


def test_all_best_is_good(scorer):
    assert scorer.overall_status(audio(), video(), network()) == OverallStatus.GOOD


@pytest.mark.parametrize("a, v, n", [
    (AudioStatus.TOO_LOUD, VideoStatus.OK, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.TOO_DARK, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.OK, NetworkStatus.CRITICAL),
    (AudioStatus.CLIPPING, VideoStatus.TOO_DARK, NetworkStatus.UNSTABLE),
])
def test_critical_statuses(scorer, a, v, n):
    assert scorer.overall_status(audio(status=a), video(status=v), network(status=n)) == OverallStatus.CRITICAL


@pytest.mark.parametrize("a, v, n", [
    (AudioStatus.TOO_QUIET, VideoStatus.OK, NetworkStatus.GOOD),
    (AudioStatus.CLIPPING, VideoStatus.OK, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.OVEREXPOSED, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.OK, NetworkStatus.UNSTABLE),
    (AudioStatus.BACKGROUND_NOISE, VideoStatus.UNEVEN_LIGHTING, NetworkStatus.UNSTABLE),
])
def test_poor_statuses(scorer, a, v, n):
    assert scorer.overall_status(audio(status=a), video(status=v), network(status=n)) == OverallStatus.POOR


@pytest.mark.parametrize("a, v, n", [
    (AudioStatus.BACKGROUND_NOISE, VideoStatus.OK, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.UNEVEN_LIGHTING, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.ADJUST_CAMERA, NetworkStatus.GOOD),
    (AudioStatus.OK, VideoStatus.OK, NetworkStatus.MODERATE),
])
def test_moderate_statuses(scorer, a, v, n):
    assert scorer.overall_status(audio(status=a), video(status=v), network(status=n)) == OverallStatus.MODERATE


def test_snapshot_bundles_cycle(scorer):
    snapshot = scorer.snapshot(audio(), video(), network(), timestamp=1234.5)

    assert snapshot.timestamp == 1234.5
    assert snapshot.overall_status == OverallStatus.GOOD
    assert snapshot.quality_score.overall_quality == 100
    assert snapshot.audio == audio()


def test_snapshot_defaults_to_wall_clock(scorer):
    snapshot = scorer.snapshot(audio(), video(), network())
    assert snapshot.timestamp > 0
