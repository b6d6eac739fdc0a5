"""Boundary interfaces for capture collaborators

The diagnostics core never owns device handles; these interfaces describe
what a capture layer must provide so the monitor can poll it.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import numpy as np


class AudioSource(ABC):
    """Supplies frequency-magnitude data for one analysis frame"""

    @abstractmethod
    def read_frequency_data(self) -> Optional[np.ndarray]:
        """Read the current frame

        Returns:
            uint8 array of frequency magnitudes, or None if no analyser is attached
        """
        pass


class FrameSource(ABC):
    """Supplies the current camera frame as a pixel buffer"""

    @abstractmethod
    def read_frame(self) -> Optional[np.ndarray]:
        """Read the current frame

        Returns:
            (H, W, 3) RGB or (H, W, 4) RGBA uint8 array, or None if no frame yet
        """
        pass


class TransportStatsSource(ABC):
    """Supplies transport statistics reports from the active connection"""

    @abstractmethod
    async def get_stats(self) -> List[Dict[str, Any]]:
        """Collect one round of stats reports

        Returns:
            List of report dictionaries keyed like WebRTC stats
            (``type``, ``kind``, ``bytesSent``, ``currentRoundTripTime``, ...)
        """
        pass
