"""Enumerations for analyzer and overall statuses

Enum values are the literal strings shown to the creator.
"""

from enum import Enum


class AudioStatus(Enum):
    """Microphone signal quality"""
    OK = "OK"
    TOO_QUIET = "Too Quiet"
    TOO_LOUD = "Too Loud"
    BACKGROUND_NOISE = "Background Noise"
    CLIPPING = "Clipping"


class VideoStatus(Enum):
    """Camera lighting quality"""
    OK = "OK"
    TOO_DARK = "Too Dark"
    OVEREXPOSED = "Overexposed"
    UNEVEN_LIGHTING = "Uneven Lighting"
    ADJUST_CAMERA = "Adjust Camera"  # flicker or unstable exposure


class NetworkStatus(Enum):
    """Uplink alarm level"""
    GOOD = "Good"
    MODERATE = "Moderate"
    UNSTABLE = "Unstable"
    CRITICAL = "Critical"


class OverallStatus(Enum):
    """Go-live readiness across all three checks"""
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    CRITICAL = "Critical"
