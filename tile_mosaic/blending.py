"""Alpha blending of tile pixels over source pixels."""

from __future__ import annotations

import numpy as np


def blend(
    source: np.ndarray | tuple[int, ...],
    tile: np.ndarray | tuple[int, ...],
    opacity: int,
) -> np.ndarray:
    """Composite *tile* over *source* at *opacity* (0-255).

    With ``po = opacity / 255`` and ``so = 1 - po`` every colour channel is
    ``tile/255 * po + source/255 * so * (1 - po)`` and the alpha is
    ``1 - (1 - po) * (1 - so)``, each scaled to 0-255 and truncated.

    This is not standard source-over compositing: ``so`` is applied on top
    of ``1 - po`` and the alpha depends on opacity alone. Opacity 0 or 255
    only approximates a no-op or an overwrite, so callers should route
    those values to plain overwriting.

    Args:
        source:  (..., 3|4) pixel(s) underneath; alpha is ignored.
        tile:    (..., 3|4) pixel(s) on top, broadcastable to *source*.
        opacity: Tile opacity in 0..255.

    Returns:
        (..., 4) uint8 RGBA.
    """
    if not 0 <= opacity <= 255:
        msg = f"Opacity must be within 0..255, got {opacity}"
        raise ValueError(msg)

    po = opacity / 255.0
    so = 1.0 - po
    src = np.asarray(source, dtype=np.float64)[..., :3]
    top = np.asarray(tile, dtype=np.float64)[..., :3]

    rgb = (top / 255.0) * po + (src / 255.0) * so * (1.0 - po)
    alpha = 1.0 - (1.0 - po) * (1.0 - so)

    out = np.empty((*rgb.shape[:-1], 4), dtype=np.uint8)
    out[..., :3] = (rgb * 255.0).astype(np.uint8)  # astype truncates
    out[..., 3] = int(alpha * 255.0)
    return out
