"""Property-Based Test for Overall Status Resolution

This module tests Property 6: Severity lattice and score bounds.

Property 6: Severity lattice and score bounds
*For any* combination of audio, video and network results, the overall status
is Critical exactly when some check is at a critical level, Poor exactly when
some check is poor and none is critical, and Good only when every check is at
its best. The overall quality score always lies in [0, 100] and equals 100
when every check is at its best with perfect sub-scores.
"""

from hypothesis import given, strategies as st, settings

from streamcheck.config.thresholds import ScoringWeights
from streamcheck.models.enums import AudioStatus, VideoStatus, NetworkStatus, OverallStatus
from streamcheck.models.results import AudioAnalysis, VideoAnalysis, NetworkAnalysis
from streamcheck.scoring.composite_scorer import CompositeScorer, CRITICAL_STATUSES, POOR_STATUSES


audio_results = st.builds(
    AudioAnalysis,
    rms=st.floats(min_value=0.0, max_value=1.0),
    status=st.sampled_from(list(AudioStatus))
)
video_results = st.builds(
    VideoAnalysis,
    brightness=st.floats(min_value=0.0, max_value=255.0),
    uniformity_score=st.floats(min_value=0.0, max_value=1.0),
    status=st.sampled_from(list(VideoStatus))
)
network_results = st.builds(
    NetworkAnalysis,
    stability_score=st.integers(min_value=0, max_value=100),
    status=st.sampled_from(list(NetworkStatus))
)


def make_scorer():
    return CompositeScorer(weights=ScoringWeights(), rms_optimal=0.08)


# Feature: quality-diagnostics, Property 6: Severity lattice
@settings(max_examples=100, deadline=None)
@given(audio=audio_results, video=video_results, network=network_results)
def test_overall_status_follows_lattice(audio, video, network):
    status = make_scorer().overall_status(audio, video, network)
    statuses = {audio.status, video.status, network.status}

    if statuses & CRITICAL_STATUSES:
        assert status == OverallStatus.CRITICAL
    elif statuses & POOR_STATUSES:
        assert status == OverallStatus.POOR
    elif statuses == {AudioStatus.OK, VideoStatus.OK, NetworkStatus.GOOD}:
        assert status == OverallStatus.GOOD
    else:
        assert status == OverallStatus.MODERATE


# Feature: quality-diagnostics, Property 6: Score bounds
@settings(max_examples=100, deadline=None)
@given(audio=audio_results, video=video_results, network=network_results)
def test_overall_quality_is_bounded(audio, video, network):
    score = make_scorer().score(audio, video, network)

    for value in (score.audio_score, score.video_score, score.network_score, score.overall_quality):
        assert 0 <= value <= 100
        assert isinstance(value, int)

    low = min(score.audio_score, score.video_score, score.network_score)
    high = max(score.audio_score, score.video_score, score.network_score)
    assert low - 1 <= score.overall_quality <= high + 1


def test_best_case_scores_100():
    scorer = make_scorer()
    audio = AudioAnalysis(rms=0.08)
    video = VideoAnalysis(brightness=120.0, uniformity_score=1.0)
    network = NetworkAnalysis(bitrate_kbps=1500.0, stability_score=100)

    assert scorer.score(audio, video, network).overall_quality == 100
    assert scorer.overall_status(audio, video, network) == OverallStatus.GOOD
