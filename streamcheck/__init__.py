"""StreamCheck: pre-broadcast audio, video and network quality diagnostics"""

__version__ = "0.1.0"
