"""Video Analysis Module

This module judges camera lighting from a single frame plus a short history
of frame brightness. The frame is reduced to a grid of cell luminances
(ITU-R BT.709 luma), from which overall brightness, spatial uniformity and
temporal flicker are derived.
"""

import logging
import math
from typing import Optional, Sequence, Union
import numpy as np

from streamcheck.analysis.stats import SampleWindow, mean, std_dev, mean_absolute_deviation
from streamcheck.config.thresholds import VideoThresholds
from streamcheck.models.enums import VideoStatus
from streamcheck.models.results import VideoAnalysis


logger = logging.getLogger(__name__)

# ITU-R BT.709 luma coefficients for R, G, B
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])


class FrameFormatError(Exception):
    """Exception raised for pixel buffers that are not (H, W, 3|4) arrays"""
    pass


def sample_luminance_grid(image: np.ndarray, grid_size: int = 16) -> np.ndarray:
    """Reduce a frame to per-cell mean luminance over a grid_size x grid_size grid.

    Cell (gy, gx) starts at ``floor(gy * H / G), floor(gx * W / G)`` and spans
    ``ceil(H / G) x ceil(W / G)`` pixels, clipped to the frame, so neighbouring
    cells may share a row or column when the frame size is not a multiple of G.

    Args:
        image: (H, W, 3) RGB or (H, W, 4) RGBA array; alpha is ignored
        grid_size: Cells per side

    Returns:
        Flat array of grid_size * grid_size luminances in row-major order, or
        an empty array for a zero-sized frame

    Raises:
        FrameFormatError: If the array is not 3-D with 3 or 4 channels
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise FrameFormatError(f"Expected (H, W, 3) or (H, W, 4) pixel buffer, got shape {image.shape}")

    height, width = image.shape[:2]
    if height == 0 or width == 0:
        return np.empty(0)

    luma = image[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS

    block_h = height / grid_size
    block_w = width / grid_size
    cell_h = math.ceil(block_h)
    cell_w = math.ceil(block_w)

    cells = np.empty(grid_size * grid_size)
    for gy in range(grid_size):
        y = math.floor(gy * block_h)
        for gx in range(grid_size):
            x = math.floor(gx * block_w)
            cells[gy * grid_size + gx] = luma[y:y + cell_h, x:x + cell_w].mean()

    return np.clip(cells, 0.0, 255.0)


class VideoAnalyzer:
    """Analyzes frames to judge camera lighting.

    Status resolution, first match wins:
    Overexposed > Too Dark > Uneven Lighting > Adjust Camera (flicker) > OK.

    Attributes:
        thresholds: Tunable brightness, uniformity and flicker thresholds
        brightness_history: Frame-level brightness of the most recent frames
        last_status: Status resolved on the previous frame
    """

    def __init__(self, thresholds: Optional[VideoThresholds] = None):
        self.thresholds = thresholds or VideoThresholds.from_config()
        self.brightness_history = SampleWindow(self.thresholds.history_size)
        self.last_status: Optional[VideoStatus] = None

        logger.info(f"VideoAnalyzer initialized with grid_size={self.thresholds.grid_size}")

    def _resolve_status(self, brightness: float, std: float, fluctuation: float) -> VideoStatus:
        t = self.thresholds
        if brightness > t.brightness_high:
            return VideoStatus.OVEREXPOSED
        if brightness < t.brightness_low:
            return VideoStatus.TOO_DARK
        if std > t.uniformity_std_dev:
            return VideoStatus.UNEVEN_LIGHTING
        if fluctuation > t.fluctuation:
            return VideoStatus.ADJUST_CAMERA
        return VideoStatus.OK

    def analyze(self, image: Optional[np.ndarray]) -> VideoAnalysis:
        """Analyze one camera frame.

        Args:
            image: (H, W, 3) RGB or (H, W, 4) RGBA pixel buffer, or None when
                   no frame is available yet

        Returns:
            VideoAnalysis for this frame; a zeroed OK result when there is no frame

        Raises:
            FrameFormatError: If the pixel buffer has the wrong shape
        """
        if image is None:
            return VideoAnalysis()

        luminances = sample_luminance_grid(image, self.thresholds.grid_size)
        return self.analyze_grid(luminances)

    def analyze_grid(self, luminances: Union[np.ndarray, Sequence[float]]) -> VideoAnalysis:
        """Analyze a precomputed grid of cell luminances.

        Used directly by capture layers that already downsample on the GPU.
        """
        luminances = np.asarray(luminances, dtype=np.float64).ravel()
        if luminances.size == 0:
            return VideoAnalysis()

        brightness = min(max(mean(luminances), 0.0), 255.0)
        std = std_dev(luminances)
        uniformity_score = 1.0 - min(std / 255.0, 1.0)

        self.brightness_history.push(brightness)
        fluctuation = mean_absolute_deviation(self.brightness_history)

        status = self._resolve_status(brightness, std, fluctuation)
        if status != self.last_status:
            logger.info(f"Video status changed: {self.last_status.value if self.last_status else None} -> {status.value}")
            self.last_status = status

        logger.debug(f"Video analysis: brightness={brightness:.1f}, std={std:.2f}, "
                     f"fluctuation={fluctuation:.2f}")

        return VideoAnalysis(
            brightness=brightness,
            uniformity_score=uniformity_score,
            uniformity_std_dev=std,
            fluctuation=fluctuation,
            status=status
        )

    def reset(self) -> None:
        """Drop brightness history, e.g. when the camera changes."""
        self.brightness_history.clear()
        self.last_status = None
        logger.info("VideoAnalyzer state reset")
