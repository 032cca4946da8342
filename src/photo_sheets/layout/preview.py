"""Shrink factor so sheets fit the preview area."""

from __future__ import annotations

MIN_PREVIEW_SCALE = 0.35
DEFAULT_PADDING_PX = 8


def scale_for(
    container_width_px: float,
    page_width_px: float,
    padding: float = DEFAULT_PADDING_PX,
) -> float:
    """
    Uniform preview scale for a page inside a container.

    Never enlarges past 100% and never shrinks below MIN_PREVIEW_SCALE.
    A container that has not been measured yet (width <= 0) gets 1.0.

    Example:
        >>> scale_for(802, 1588)
        0.5
    """
    if container_width_px <= 0 or page_width_px <= 0:
        return 1.0
    scale = min(1.0, (container_width_px - padding) / page_width_px)
    return max(MIN_PREVIEW_SCALE, min(1.0, scale))
