"""Pytest configuration and fixtures"""

import pytest
from hypothesis import settings, Verbosity

from streamcheck.config.config_loader import Config
from streamcheck.config.thresholds import AudioThresholds, VideoThresholds, NetworkThresholds, ScoringWeights

# Register Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20, verbosity=Verbosity.normal)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)

# Use CI profile by default
settings.load_profile("ci")


@pytest.fixture
def empty_config():
    """Config with no values, so every threshold falls back to its default"""
    return Config(data={})


@pytest.fixture
def audio_thresholds(empty_config):
    return AudioThresholds.from_config(empty_config)


@pytest.fixture
def video_thresholds(empty_config):
    return VideoThresholds.from_config(empty_config)


@pytest.fixture
def network_thresholds(empty_config):
    return NetworkThresholds.from_config(empty_config)


@pytest.fixture
def scoring_weights(empty_config):
    return ScoringWeights.from_config(empty_config)
