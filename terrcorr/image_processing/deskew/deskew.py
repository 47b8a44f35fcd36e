# -*- coding: utf-8 -*-
"""
DEM Deskew Driver - Line-sequential terrain correction of a SAR scene.

Streams a slant range DEM (and optionally a SAR image, a ground range
DEM and a user mask) line by line.  For every line it:

1. converts the slant range DEM line to ground range,
2. takes the supplied ground range DEM line instead, if one was given,
3. projects the user mask into ground range,
4. resamples every SAR band into ground range while classifying
   layover, shadow and invalid pixels,
5. applies radiometric terrain correction (from the second line on,
   since it needs the previous ground range DEM line),
6. blanks masked pixels and writes the band lines and the mask line.

All input checks run before the first line is read.

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
2026-02-17

Modified
--------
2026-03-02
"""

# Standard library
import contextlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

# Third-party
import numpy as np

# Terrcorr internal
from terrcorr.exceptions import ProcessorError, TerrcorrError, ValidationError
from terrcorr.geolocation.slant_range import GeometryModel
from terrcorr.IO import open_reader, open_writer
from terrcorr.IO.base import LineReader, LineWriter
from terrcorr.IO.models import SceneMetadata
from terrcorr.image_processing.deskew.geometric import (
    LayoverHitTable,
    MaskStatistics,
    geo_compensate,
)
from terrcorr.image_processing.deskew.heights import DemLine
from terrcorr.image_processing.deskew.masking import (
    apply_output_mask,
    translate_input_mask,
)
from terrcorr.image_processing.deskew.radiometric import (
    check_radiometric_form,
    radio_compensate,
)
from terrcorr.image_processing.deskew.resample import (
    dem_sr2gr,
    shift_ground_dem,
)
from terrcorr.vocabulary import (
    GroundDemSource,
    ImageType,
    LEAVE_MASK,
    MaskValue,
    RadiometricForm,
)

logger = logging.getLogger(__name__)

#: Band name of the layover/shadow mask output.
MASK_BAND_NAME = 'LAYOVER_MASK'

ReaderSource = Union[str, Path, LineReader]
WriterTarget = Union[str, Path, LineWriter]


@dataclass
class DeskewResult:
    """Outcome of a deskew run.

    Attributes
    ----------
    metadata : SceneMetadata
        Metadata of the corrected output.
    mask_metadata : SceneMetadata
        Metadata of the mask output.
    statistics : MaskStatistics
        Layover, shadow and user-mask pixel counts.
    gr_pixel_size : float
        Output ground range pixel size (meters).
    """

    metadata: SceneMetadata
    mask_metadata: SceneMetadata
    statistics: MaskStatistics
    gr_pixel_size: float


class DemLineArena:
    """Two ground range DEM line buffers used as current and previous.

    ``advance`` swaps the roles by toggling an index, so the line written
    last iteration becomes ``previous`` without copying.
    """

    def __init__(self, sample_count: int) -> None:
        self._slots = (DemLine.empty(sample_count), DemLine.empty(sample_count))
        self._current = 0

    def advance(self) -> None:
        self._current ^= 1

    @property
    def current(self) -> DemLine:
        return self._slots[self._current]

    @property
    def previous(self) -> DemLine:
        return self._slots[self._current ^ 1]


class DemDeskewer:
    """Per-run context of the deskew driver.

    Holds the geometry model, the DEM line arena, the reusable layover
    hit table and the mask statistics of one run.

    Parameters
    ----------
    dem_slant : LineReader
        Slant range DEM.
    sar : LineReader, optional
        Slant range SAR image.  When omitted the output is the ground
        range DEM.
    dem_ground : LineReader, optional
        Ground range DEM to use instead of the back-converted one.
    mask : LineReader, optional
        User mask in slant range.  Requires ``sar``.
    radiometric : int or RadiometricForm
        Radiometric correction formula; 0 disables.
    fill_holes : bool
        Keep data in layover and shadow; when False those pixels are
        zeroed.
    fill_value : float
        Value written under user-masked pixels; ``LEAVE_MASK`` keeps the
        data.
    which_gr_dem : GroundDemSource or str
        Ground range DEM driving geometric compensation.
    interpolation : str
        ``'bilinear'`` or ``'nearest'`` SAR resampling.

    Raises
    ------
    ValidationError
        If the inputs are inconsistent or a setting is unsupported.
    GeometryError
        If the slant DEM metadata gives a degenerate geometry.
    """

    def __init__(
        self,
        dem_slant: LineReader,
        sar: Optional[LineReader] = None,
        dem_ground: Optional[LineReader] = None,
        mask: Optional[LineReader] = None,
        radiometric: Union[int, RadiometricForm] = RadiometricForm.DISABLED,
        fill_holes: bool = False,
        fill_value: float = LEAVE_MASK,
        which_gr_dem: Union[str, GroundDemSource] = GroundDemSource.BACKCONVERTED,
        interpolation: str = 'bilinear',
    ) -> None:
        self.dem_slant = dem_slant
        self.sar = sar
        self.dem_ground = dem_ground
        self.mask = mask
        self.radiometric = check_radiometric_form(radiometric)
        self.fill_holes = bool(fill_holes)
        self.fill_value = fill_value
        try:
            self.which_gr_dem = GroundDemSource(which_gr_dem)
        except ValueError as e:
            raise ValidationError(
                f"Unknown ground DEM source: {which_gr_dem!r}"
            ) from e
        if interpolation not in ('bilinear', 'nearest'):
            raise ValidationError(
                f"interpolation must be 'bilinear' or 'nearest', "
                f"got {interpolation!r}"
            )
        self.interpolation = interpolation
        self._validate()

        self.model = GeometryModel.from_metadata(dem_slant.metadata)
        ns = self.model.sample_count
        self.arena = DemLineArena(ns)
        self.hits = LayoverHitTable(ns)
        self.stats = MaskStatistics()

    # ----------------------------------------------------------------
    # Setup
    # ----------------------------------------------------------------

    def _validate(self) -> None:
        dem = self.dem_slant.metadata
        if dem.is_map_projected:
            raise ValidationError(
                "DEM cannot be map projected for terrain correction"
            )
        if self.sar is not None:
            sar = self.sar.metadata
            if sar.is_map_projected:
                raise ValidationError(
                    "SAR image cannot be map projected for terrain correction"
                )
            if (sar.lines, sar.samples) != (dem.lines, dem.samples):
                raise ValidationError(
                    f"SAR image is {sar.lines}x{sar.samples} LxS but the "
                    f"slant range DEM is {dem.lines}x{dem.samples} LxS"
                )
        if self.dem_ground is not None:
            ground = self.dem_ground.metadata
            if ground.samples != dem.samples:
                raise ValidationError(
                    f"Slant/Ground mismatch: ground DEM has {ground.samples} "
                    f"samples, slant DEM has {dem.samples}"
                )
            if ground.lines < dem.lines:
                raise ValidationError(
                    f"Ground DEM has {ground.lines} lines, slant DEM needs "
                    f"{dem.lines}"
                )
        if self.mask is not None:
            if self.sar is None:
                raise ValidationError("Cannot produce a mask without a SAR image")
            sar = self.sar.metadata
            user = self.mask.metadata
            if (user.lines, user.samples) != (sar.lines, sar.samples):
                raise ValidationError(
                    f"The mask and the SAR image must be the same size: "
                    f"SAR image {sar.lines}x{sar.samples} LxS, mask "
                    f"{user.lines}x{user.samples} LxS"
                )

    def output_metadata(self) -> SceneMetadata:
        """Metadata of the corrected output raster."""
        changes = dict(
            image_type=ImageType.GROUND_RANGE,
            x_pixel_size=self.model.gr_pixel_size,
            nodata=0.0,
        )
        if self.sar is not None:
            sar = self.sar.metadata
            changes.update(
                bands=sar.bands,
                band_names=list(sar.band_names),
                dtype=sar.dtype,
            )
        else:
            changes.update(bands=1, dtype='float32')
        return self.dem_slant.metadata.copy(**changes)

    def mask_metadata(self) -> SceneMetadata:
        """Metadata of the single-band mask raster."""
        return self.output_metadata().copy(
            bands=1, band_names=[MASK_BAND_NAME], dtype='float32',
        )

    def describe(self) -> str:
        """Status line describing what this run corrects."""
        if self.dem_ground is not None:
            dem = "DEM is in ground range."
        else:
            dem = "DEM is in slant range, but will be corrected."
        what = "Correcting image" if self.sar is not None else "Correcting DEM"
        if self.radiometric is RadiometricForm.DISABLED:
            how = "geometrically."
        else:
            how = "geometrically and radiometrically."
        return f"{dem} {what} {how}"

    # ----------------------------------------------------------------
    # Processing
    # ----------------------------------------------------------------

    def _check_writer(self, writer: LineWriter, expected: SceneMetadata,
                      role: str) -> None:
        got = writer.metadata.shape
        if got != expected.shape:
            raise ValidationError(
                f"{role} writer is sized {got} (bands, lines, samples), "
                f"expected {expected.shape}"
            )

    def process_line(
        self,
        y: int,
        output: LineWriter,
        out_mask: Optional[LineWriter] = None,
    ) -> None:
        """Correct line ``y`` of every band and write it."""
        model = self.model
        ns = model.sample_count

        self.arena.advance()
        gr_line = self.arena.current
        gr_prev = self.arena.previous

        sr_dem = DemLine.from_sentinels(self.dem_slant.read_line(y))
        gr_conv = dem_sr2gr(model, sr_dem, fill_holes=True)
        if self.dem_ground is not None:
            ground = DemLine.from_sentinels(self.dem_ground.read_line(y))
            gr_line.assign(shift_ground_dem(model, ground))
        else:
            gr_line.assign(gr_conv)

        if self.which_gr_dem is GroundDemSource.ORIGINAL:
            gr_geo = gr_line
        else:
            gr_geo = gr_conv

        if self.mask is not None:
            base_mask = geo_compensate(
                model, gr_geo, translate_input_mask(self.mask.read_line(y)),
                interpolation='nearest', line=y,
            )
        else:
            base_mask = np.full(ns, float(MaskValue.NORMAL))

        bands = self.sar.metadata.bands if self.sar is not None else 1
        line_mask = base_mask
        for b in range(bands):
            mask = base_mask.copy()
            # Statistics and the written mask come from the first band
            stats = self.stats if b == 0 else None
            if self.sar is not None:
                out = geo_compensate(
                    model, gr_geo, self.sar.read_line(y, b),
                    interpolation=self.interpolation, mask=mask,
                    hits=self.hits, stats=stats, line=y,
                )
                if y > 0 and self.radiometric is not RadiometricForm.DISABLED:
                    radio_compensate(
                        model, gr_line, gr_prev, out, self.radiometric, mask,
                    )
            else:
                out = gr_line.to_sentinels().astype(np.float64)

            apply_output_mask(
                out, mask, gr_conv,
                fill_value=self.fill_value,
                zero_layover_shadow=not self.fill_holes,
                stats=stats,
            )
            output.write_line(out, y, b)
            if b == 0:
                line_mask = mask

        if out_mask is not None:
            out_mask.write_line(line_mask.astype(np.float32), y)

    def run(
        self,
        output: LineWriter,
        out_mask: Optional[LineWriter] = None,
    ) -> DeskewResult:
        """Correct every line.

        Parameters
        ----------
        output : LineWriter
            Writer sized like :meth:`output_metadata`.
        out_mask : LineWriter, optional
            Writer sized like :meth:`mask_metadata`.

        Returns
        -------
        DeskewResult

        Raises
        ------
        ValidationError
            If a writer has the wrong size.
        ProcessorError
            If reading or writing fails part way through.
        """
        out_meta = self.output_metadata()
        mask_meta = self.mask_metadata()
        self._check_writer(output, out_meta, 'Output')
        if out_mask is not None:
            self._check_writer(out_mask, mask_meta, 'Mask')

        nl = self.dem_slant.metadata.lines
        ns = self.model.sample_count
        self.stats.reset(total=nl * ns)

        logger.info(self.describe())
        logger.info(
            "Ground range pixel size %.3f m, %d lines x %d samples",
            self.model.gr_pixel_size, nl, ns,
        )

        step = max(1, nl // 10)
        for y in range(nl):
            try:
                self.process_line(y, output, out_mask)
            except TerrcorrError:
                raise
            except (OSError, ValueError) as e:
                raise ProcessorError(f"Line {y}: {e}") from e
            if (y + 1) % step == 0 or y + 1 == nl:
                logger.debug("Processed %d/%d lines", y + 1, nl)

        logger.info(self.stats.report())
        return DeskewResult(
            metadata=out_meta,
            mask_metadata=mask_meta,
            statistics=self.stats,
            gr_pixel_size=self.model.gr_pixel_size,
        )


def _open_source(
    source: Optional[ReaderSource],
    stack: contextlib.ExitStack,
) -> Optional[LineReader]:
    if source is None or isinstance(source, LineReader):
        return source
    return stack.enter_context(open_reader(source))


def deskew_dem(
    in_dem_slant: ReaderSource,
    output: WriterTarget,
    in_sar: Optional[ReaderSource] = None,
    in_dem_ground: Optional[ReaderSource] = None,
    radiometric: Union[int, RadiometricForm] = RadiometricForm.DISABLED,
    in_mask: Optional[ReaderSource] = None,
    out_mask: Optional[WriterTarget] = None,
    fill_holes: bool = False,
    fill_value: float = LEAVE_MASK,
    which_gr_dem: Union[str, GroundDemSource] = GroundDemSource.BACKCONVERTED,
    interpolation: str = 'bilinear',
) -> DeskewResult:
    """Terrain correct a SAR image (or deskew a DEM) into ground range.

    Readers and writers may be given as paths, which are opened and
    closed here, or as open ``LineReader`` / ``LineWriter`` objects,
    which are left open.

    Parameters
    ----------
    in_dem_slant : str, Path or LineReader
        Slant range DEM.
    output : str, Path or LineWriter
        Corrected output.  A writer must be sized like
        ``DemDeskewer.output_metadata()``.
    in_sar : str, Path or LineReader, optional
        SAR image.  Without it the output is the ground range DEM.
    in_dem_ground : str, Path or LineReader, optional
        Ground range DEM.
    radiometric : int or RadiometricForm
        0 for none, 5 for Kellndorfer.  Other formula numbers are
        rejected.
    in_mask : str, Path or LineReader, optional
        User mask.  Requires ``in_sar``.
    out_mask : str, Path or LineWriter, optional
        Layover/shadow mask output.
    fill_holes : bool
        Keep data in layover and shadow instead of zeroing it.
    fill_value : float
        Value under user-masked pixels; ``LEAVE_MASK`` keeps the data.
    which_gr_dem : GroundDemSource or str
        ``'backconverted'`` or ``'original'``.
    interpolation : str
        ``'bilinear'`` or ``'nearest'``.

    Returns
    -------
    DeskewResult

    Raises
    ------
    ValidationError
        On inconsistent inputs or unsupported settings.
    GeometryError
        On degenerate orbital geometry.
    ProcessorError
        On failures inside the line loop.

    Examples
    --------
    >>> from terrcorr import deskew_dem
    >>> result = deskew_dem('dem_slant.npy', 'terrcorr.npy',
    ...                     in_sar='sar.npy', out_mask='mask.npy')
    >>> print(result.statistics.report())
    """
    with contextlib.ExitStack() as stack:
        deskewer = DemDeskewer(
            _open_source(in_dem_slant, stack),
            sar=_open_source(in_sar, stack),
            dem_ground=_open_source(in_dem_ground, stack),
            mask=_open_source(in_mask, stack),
            radiometric=radiometric,
            fill_holes=fill_holes,
            fill_value=fill_value,
            which_gr_dem=which_gr_dem,
            interpolation=interpolation,
        )

        if isinstance(output, LineWriter):
            writer = output
        else:
            writer = stack.enter_context(
                open_writer(output, deskewer.output_metadata())
            )
        mask_writer: Optional[LineWriter] = None
        if isinstance(out_mask, LineWriter):
            mask_writer = out_mask
        elif out_mask is not None:
            mask_writer = stack.enter_context(
                open_writer(out_mask, deskewer.mask_metadata())
            )

        return deskewer.run(writer, mask_writer)
