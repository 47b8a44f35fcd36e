# -*- coding: utf-8 -*-
"""
Geometric Compensation - Slant range to ground range resampling with
layover and shadow classification.

``geo_compensate`` produces one ground range line from one slant range
line.  Each ground pixel is mapped through its terrain height to a
fractional slant range position and sampled there.  When a mask line is
supplied the same pass classifies each pixel:

- **Layover**: more than ``LayoverHitTable.capacity`` ground pixels land
  on the same slant range pixel.
- **Shadow**: the look value to the pixel is smaller than one already
  passed in the near-to-far sweep.
- **Invalid data**: the pixel maps outside the slant range extent that
  actually received data.

Isolated normal pixels between two layover (or two shadow) pixels take
their neighbours' class.

The sweep is vectorized.  The sequential running state of the scanline
algorithm (hit counts, running look maximum, last usable height, running
minimum slant position) is expressed as ranks and cumulative
reductions.

Dependencies
------------
numpy
scipy

Author
------
Duane Smalley, PhD
duane.d.smalley@gmail.com

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-13

Modified
--------
2026-03-02
"""

# Standard library
import logging
from dataclasses import dataclass
from typing import Dict, Optional

# Third-party
import numpy as np
from scipy.ndimage import map_coordinates

# Terrcorr internal
from terrcorr.exceptions import ValidationError
from terrcorr.geolocation.slant_range import GeometryModel
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.image_processing.deskew.resample import carry_forward_heights
from terrcorr.vocabulary import MaskValue

logger = logging.getLogger(__name__)

_INTERPOLATION_ORDERS = {
    'nearest': 0,
    'bilinear': 1,
}

# Starting value of the running look maximum; below any real look value.
_LOOK_FLOOR = -2.0


@dataclass
class MaskStatistics:
    """Pixel counts accumulated over one deskew run.

    Attributes
    ----------
    layover : int
        Pixels classified as layover.
    shadow : int
        Pixels classified as radar shadow.
    user_masked : int
        Pixels excluded by the user mask.
    total : int
        Lines x samples of the output.
    """

    layover: int = 0
    shadow: int = 0
    user_masked: int = 0
    total: int = 0

    def reset(self, total: int = 0) -> None:
        self.layover = 0
        self.shadow = 0
        self.user_masked = 0
        self.total = total

    def percent(self, count: int) -> float:
        """``count`` as a percentage of ``total``."""
        if self.total <= 0:
            return 0.0
        return 100.0 * count / self.total

    def to_dict(self) -> Dict[str, float]:
        return {
            'layover': self.layover,
            'shadow': self.shadow,
            'user_masked': self.user_masked,
            'total': self.total,
            'layover_percent': self.percent(self.layover),
            'shadow_percent': self.percent(self.shadow),
            'user_masked_percent': self.percent(self.user_masked),
        }

    def report(self) -> str:
        """Multi-line status report of the counts."""
        rows = (
            ('Layover Pixels', self.layover),
            ('Shadow Pixels', self.shadow),
            ('User Masked Pixels', self.user_masked),
        )
        lines = ["Mask Statistics:"]
        for label, count in rows:
            lines.append(
                f"{label:>18}: {count:9d}/{self.total} "
                f"({self.percent(count):f}%)"
            )
        return "\n".join(lines)


class LayoverHitTable:
    """Ground pixels that landed on each slant range pixel of a line.

    Keeps the first ``capacity`` ground pixels per slant pixel and the
    total hit count.  Owned by the caller and cleared, not reallocated,
    for every line.

    Parameters
    ----------
    sample_count : int
        Samples per line.
    capacity : int
        Hits recorded per slant pixel.  One more hit than this means
        layover.
    """

    def __init__(self, sample_count: int, capacity: int = 2) -> None:
        self.capacity = capacity
        self.hits = np.full((capacity, sample_count), -1, dtype=np.intp)
        self.counts = np.zeros(sample_count, dtype=np.intp)

    @property
    def sample_count(self) -> int:
        return self.counts.shape[0]

    def reset(self) -> None:
        self.hits.fill(-1)
        self.counts.fill(0)

    def record(self, sr_pixels: np.ndarray, gr_pixels: np.ndarray) -> np.ndarray:
        """Record hits in ground range order.

        Parameters
        ----------
        sr_pixels : np.ndarray
            Integer slant range pixel hit by each ground pixel.
        gr_pixels : np.ndarray
            The ground pixels, ascending.

        Returns
        -------
        np.ndarray
            1-based arrival order of each hit on its slant pixel.
        """
        n = len(sr_pixels)
        rank = np.zeros(n, dtype=np.intp)
        if n == 0:
            return rank
        order = np.argsort(sr_pixels, kind='stable')
        sorted_sr = sr_pixels[order]
        positions = np.arange(n)
        starts = np.r_[True, sorted_sr[1:] != sorted_sr[:-1]]
        group_start = np.maximum.accumulate(np.where(starts, positions, 0))
        rank[order] = positions - group_start + 1

        np.add.at(self.counts, sr_pixels, 1)
        kept = rank <= self.capacity
        self.hits[rank[kept] - 1, sr_pixels[kept]] = gr_pixels[kept]
        return rank


def _sample(in_line: np.ndarray, src: np.ndarray, interpolation: str) -> np.ndarray:
    """Sample ``in_line`` at fractional positions ``src`` in ``[1, ns-1)``."""
    if _INTERPOLATION_ORDERS[interpolation] == 1:
        return map_coordinates(
            in_line, src[np.newaxis, :], order=1, mode='nearest',
            prefilter=False,
        )
    x = np.floor(src).astype(np.intp)
    dx = src - x
    return np.where(dx <= 0.5, in_line[x], in_line[x + 1])


def _classify(
    model: GeometryModel,
    mask: np.ndarray,
    gr_pixels: np.ndarray,
    src: np.ndarray,
    heights: np.ndarray,
    hits: LayoverHitTable,
    stats: Optional[MaskStatistics],
) -> None:
    """Mark layover and shadow among the in-swath ground pixels."""
    if gr_pixels.size == 0:
        return
    normal = mask[gr_pixels] == MaskValue.NORMAL

    sr_pixels = np.floor(src).astype(np.intp)
    rank = hits.record(sr_pixels, gr_pixels)
    first_hits = rank <= hits.capacity
    crowded = hits.counts[sr_pixels] > hits.capacity

    looks = model.look_value(gr_pixels.astype(np.float64), heights)
    prior_max = np.maximum.accumulate(np.r_[_LOOK_FLOOR, looks[:-1]])
    hidden = looks < prior_max

    # Late hits are layover on arrival.  Early hits are tested for shadow
    # on arrival and become layover later only if still normal.
    layover = normal & (~first_hits | (crowded & ~hidden))
    shadow = normal & first_hits & hidden
    mask[gr_pixels[layover]] = MaskValue.LAYOVER
    mask[gr_pixels[shadow]] = MaskValue.SHADOW

    if stats is not None:
        stats.layover += int(np.count_nonzero(layover))
        stats.shadow += int(np.count_nonzero(shadow))


def _close_holes(mask: np.ndarray, stats: Optional[MaskStatistics]) -> None:
    """Promote single normal pixels flanked by two layover or two shadow."""
    ns = mask.shape[0]
    centre = mask[2:ns - 2]
    left = mask[1:ns - 3]
    right = mask[3:ns - 1]
    normal = centre == MaskValue.NORMAL
    to_layover = (normal & (left == MaskValue.LAYOVER)
                  & (right == MaskValue.LAYOVER))
    to_shadow = (normal & ~to_layover & (left == MaskValue.SHADOW)
                 & (right == MaskValue.SHADOW))
    centre[to_layover] = MaskValue.LAYOVER
    centre[to_shadow] = MaskValue.SHADOW
    if stats is not None:
        stats.layover += int(np.count_nonzero(to_layover))
        stats.shadow += int(np.count_nonzero(to_shadow))


def geo_compensate(
    model: GeometryModel,
    gr_dem: DemLine,
    in_line: np.ndarray,
    *,
    interpolation: str = 'bilinear',
    mask: Optional[np.ndarray] = None,
    hits: Optional[LayoverHitTable] = None,
    stats: Optional[MaskStatistics] = None,
    line: int = 0,
) -> np.ndarray:
    """Resample one slant range line into ground range.

    Parameters
    ----------
    model : GeometryModel
        Geometry tables of the image.
    gr_dem : DemLine
        Ground range heights for this line.
    in_line : np.ndarray
        Slant range samples, length ``model.sample_count``.
    interpolation : str
        ``'bilinear'`` or ``'nearest'`` (ties at half a pixel round
        down).
    mask : np.ndarray, optional
        Working mask line, updated in place.  ``USER_MASK`` and
        ``INVALID_DATA`` pixels are kept; every other pixel is reset to
        ``NORMAL`` and reclassified.  When None only resampling is done.
    hits : LayoverHitTable, optional
        Reusable hit table.  Cleared here.  Allocated when None.
    stats : MaskStatistics, optional
        Counters incremented for new layover and shadow pixels.
    line : int
        Line index, for log messages.

    Returns
    -------
    np.ndarray
        Ground range samples (float64).  Out-of-swath pixels are 0.

    Raises
    ------
    ValidationError
        If ``interpolation`` is unknown or ``in_line`` has the wrong
        length.
    """
    if interpolation not in _INTERPOLATION_ORDERS:
        raise ValidationError(
            f"interpolation must be one of "
            f"{sorted(_INTERPOLATION_ORDERS)}, got {interpolation!r}"
        )
    ns = model.sample_count
    in_line = np.asarray(in_line, dtype=np.float64)
    if in_line.shape != (ns,):
        raise ValidationError(
            f"Line {line}: expected {ns} samples, got shape {in_line.shape}"
        )

    out = np.zeros(ns, dtype=np.float64)
    grx = np.arange(ns, dtype=np.float64)
    valid = gr_dem.valid
    heights = gr_dem.heights

    # Pixels with a usable height
    sr = model.gr_to_sr(grx, np.where(valid, heights, 0.0))
    in_swath = valid & (sr >= 1) & (sr < ns - 1)
    gr_pixels = np.nonzero(in_swath)[0]
    src = sr[gr_pixels]
    out[gr_pixels] = _sample(in_line, src, interpolation)

    # Pixels without one borrow the last usable height to their left,
    # once data has started
    carried = carry_forward_heights(gr_dem)
    sr_carried = model.gr_to_sr(grx, carried)
    started = np.logical_or.accumulate(in_swath)
    fallback = (~valid & started & (sr_carried >= 0)
                & (sr_carried < ns - 1))
    fb_pixels = np.nonzero(fallback)[0]
    out[fb_pixels] = in_line[(sr_carried[fb_pixels] + 0.5).astype(np.intp)]

    # Far edge of the slant range data actually used
    used_sr = np.full(ns, -1.0)
    used_sr[gr_pixels] = src
    nonzero_fb = fb_pixels[out[fb_pixels] != 0.0]
    used_sr[nonzero_fb] = sr_carried[nonzero_fb]
    far = int(np.argmax(used_sr))
    max_sr = used_sr[far]
    max_height = heights[far] if valid[far] else carried[far]

    if mask is not None:
        if mask.shape != (ns,):
            raise ValidationError(
                f"Line {line}: mask has shape {mask.shape}, expected ({ns},)"
            )
        keep = ((mask == MaskValue.USER_MASK)
                | (mask == MaskValue.INVALID_DATA))
        mask[~keep] = MaskValue.NORMAL
        if hits is None:
            hits = LayoverHitTable(ns)
        hits.reset()
        _classify(model, mask, gr_pixels, src, heights[gr_pixels], hits, stats)
        _close_holes(mask, stats)

    # Near edge, swept right to left with its own carried heights
    carried_right = carry_forward_heights(gr_dem, reverse=True)
    edge_height = np.where(valid, heights, carried_right)
    edge_sr = np.where(valid, sr, model.gr_to_sr(grx, carried_right))
    candidate = np.where(edge_sr >= 0, edge_sr, np.inf)
    swept = candidate[::-1]
    running_min = np.minimum.accumulate(np.r_[ns - 1.0, swept[:-1]])
    updates = (swept < running_min)[::-1]
    edge_fill = updates & ~valid & (out == 0.0)
    out[edge_fill] = in_line[(edge_sr[edge_fill] + 0.5).astype(np.intp)]

    update_pixels = np.nonzero(updates)[0]
    if update_pixels.size:
        near = update_pixels[0]
        min_sr = edge_sr[near]
        min_height = edge_height[near]
    else:
        min_sr = ns - 1.0
        min_height = 0.0

    if mask is not None:
        if max_sr < 0:
            logger.debug("Line %d: no ground pixel maps into the swath", line)
            mask[:] = MaskValue.INVALID_DATA
            return out
        max_grx = int(np.floor(model.sr_to_gr(max_sr, max_height)))
        if 0 <= max_grx < ns - 1:
            mask[max_grx:] = MaskValue.INVALID_DATA
        min_grx = int(np.ceil(model.sr_to_gr(min_sr, min_height)))
        if 0 <= min_grx < ns - 1:
            head = mask[:min_grx + 1]
            head[out[:min_grx + 1] == 0.0] = MaskValue.INVALID_DATA

    return out
