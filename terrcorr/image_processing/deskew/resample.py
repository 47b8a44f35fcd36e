# -*- coding: utf-8 -*-
"""
DEM Resampling - Slant range to ground range conversion of height lines.

``dem_sr2gr`` projects each slant range DEM sample onto the ground range
grid and linearly fills the ground pixels between consecutive projected
samples.  Gaps wider than ``MAX_BREAK_LEN`` pixels are left unmeasured
unless hole filling is requested; gaps touching a ``NO_DATA`` sample are
filled with ``NO_DATA`` rather than interpolated.

``carry_forward_heights`` is the fallback used when a ground pixel has no
usable height: the most recent usable height in sweep order stands in
for it.

Dependencies
------------
numpy

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
2026-02-12

Modified
--------
2026-10-19
"""

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.geolocation.slant_range import GeometryModel
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.vocabulary import DemState

#: Widest gap (ground pixels) interpolated when holes are not filled.
MAX_BREAK_LEN = 5


def dem_sr2gr(
    model: GeometryModel,
    sr_line: DemLine,
    fill_holes: bool = True,
) -> DemLine:
    """Convert one slant range DEM line to ground range.

    Parameters
    ----------
    model : GeometryModel
        Geometry tables of the image.
    sr_line : DemLine
        Heights indexed by slant range sample.
    fill_holes : bool
        Interpolate across gaps of any width.  When False, gaps of
        ``MAX_BREAK_LEN`` pixels or more stay ``BAD``.

    Returns
    -------
    DemLine
        Heights indexed by ground range sample.  Pixels no slant sample
        reached are ``BAD``.
    """
    ns = model.sample_count
    out = DemLine.empty(ns)

    in_x = np.nonzero(sr_line.state != DemState.BAD)[0]
    # NO_DATA samples are positioned as if at sea level
    heights = np.where(sr_line.valid, sr_line.heights, 0.0)[in_x]
    out_x = np.trunc(model.sr_to_gr(in_x.astype(np.float64), heights))
    out_x = out_x.astype(np.intp)
    keep = (out_x >= 0) & (out_x < ns)
    if not np.any(keep):
        return out
    in_x = in_x[keep]
    out_x = out_x[keep]
    heights = heights[keep]
    no_data = sr_line.no_data[in_x]

    # Each projected sample writes the ground pixels between the previous
    # projected sample and itself.  Later samples overwrite earlier ones.
    prev_x = np.r_[-1, out_x[:-1]]
    prev_h = np.r_[0.0, heights[:-1]]
    prev_no_data = np.r_[False, no_data[:-1]]
    prev_valid = np.r_[False, ~no_data[:-1]]
    gap = out_x - prev_x

    no_data_run = no_data | prev_no_data
    interp = ~no_data_run & prev_valid & (fill_holes | (gap < MAX_BREAK_LEN))
    spans_gap = no_data_run | interp
    span = np.where(gap > 0, np.where(spans_gap, gap, 1), 0)
    start = np.where(spans_gap, prev_x + 1, out_x)

    total = int(span.sum())
    if total == 0:
        return out
    seg = np.repeat(np.arange(len(span)), span)
    seg_start = np.cumsum(span) - span
    target = start[seg] + (np.arange(total) - seg_start[seg])

    frac = (target - prev_x[seg]) / np.maximum(gap[seg], 1)
    value = np.where(
        interp[seg],
        prev_h[seg] + (heights[seg] - prev_h[seg]) * frac,
        heights[seg],
    )
    state = np.where(no_data_run[seg], DemState.NO_DATA, DemState.VALID)

    # Keep the last write to each ground pixel
    order = np.argsort(target, kind='stable')
    sorted_target = target[order]
    last = np.r_[sorted_target[1:] != sorted_target[:-1], True]
    sel = order[last]
    out.state[target[sel]] = state[sel]
    out.heights[target[sel]] = np.where(
        state[sel] == DemState.VALID, value[sel], 0.0
    )
    return out


def shift_ground_dem(model: GeometryModel, gr_line: DemLine) -> DemLine:
    """Shift a supplied ground range DEM line onto the model's ground grid.

    Pixels are interpolated linearly between their two neighbours.  A
    neighbour that is not usable and carries nonzero weight makes the
    output unusable too; ``NO_DATA`` wins over ``BAD``.
    """
    ns = model.sample_count
    pos = np.clip(np.asarray(model.slant_gr), 0.0, ns - 1.0)
    heights = model.shift_gr(gr_line.heights)

    ix = np.minimum(np.floor(pos).astype(np.intp), ns - 2)
    frac = pos - ix
    left = frac < 1.0
    right = frac > 0.0
    touches_bad = (left & ~gr_line.valid[ix]) | (right & ~gr_line.valid[ix + 1])
    touches_no_data = ((left & gr_line.no_data[ix])
                       | (right & gr_line.no_data[ix + 1]))

    state = np.full(ns, DemState.VALID, dtype=gr_line.state.dtype)
    state[touches_bad] = DemState.BAD
    state[touches_no_data] = DemState.NO_DATA
    heights = np.where(state == DemState.VALID, heights, 0.0)
    return DemLine(heights, state)


def carry_forward_heights(dem: DemLine, reverse: bool = False) -> np.ndarray:
    """Most recent usable height at or before each pixel.

    Parameters
    ----------
    dem : DemLine
        Ground range heights.
    reverse : bool
        Sweep right to left instead of left to right.

    Returns
    -------
    np.ndarray
        For usable pixels their own height; for others the nearest
        usable height earlier in the sweep, or 0 where none exists yet.
    """
    valid = dem.valid
    heights = dem.heights
    if reverse:
        valid = valid[::-1]
        heights = heights[::-1]

    idx = np.where(valid, np.arange(len(valid)), -1)
    np.maximum.accumulate(idx, out=idx)
    carried = np.where(idx >= 0, heights[np.maximum(idx, 0)], 0.0)

    if reverse:
        carried = carried[::-1]
    return carried
