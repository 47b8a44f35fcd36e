# -*- coding: utf-8 -*-
"""
GeoTIFF Line Rasters - Scanline access to GeoTIFF files via rasterio.

Each read or write touches a one-line window.  Scene metadata is stored
as JSON in the ``TERRCORR_METADATA`` dataset tag and mirrored to a
``<file>.tif.json`` sidecar; either is accepted on read.

Dependencies
------------
rasterio

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
2026-02-09

Modified
--------
2026-03-02
"""

# Standard library
import json
from pathlib import Path
from typing import Union

# Third-party
import numpy as np

try:
    import rasterio
    from rasterio.windows import Window
    _HAS_RASTERIO = True
except ImportError:
    _HAS_RASTERIO = False

# Terrcorr internal
from terrcorr.exceptions import DependencyError
from terrcorr.IO.base import LineReader, LineWriter
from terrcorr.IO.models import (
    SceneMetadata,
    read_metadata,
    sidecar_path,
    write_metadata,
)

#: Dataset tag holding the scene metadata JSON.
METADATA_TAG = 'TERRCORR_METADATA'


def _require_rasterio() -> None:
    if not _HAS_RASTERIO:
        raise DependencyError(
            "rasterio is required for GeoTIFF line rasters. "
            "Install with: pip install rasterio"
        )


class GeoTIFFLineReader(LineReader):
    """Read scanlines from a GeoTIFF.

    Parameters
    ----------
    filepath : str or Path
        Path to the GeoTIFF file.

    Attributes
    ----------
    dataset : rasterio.DatasetReader
        Rasterio dataset object for direct access.

    Raises
    ------
    DependencyError
        If rasterio is not installed.
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file cannot be opened as a GeoTIFF.
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        _require_rasterio()
        super().__init__(filepath)

    def _load_metadata(self) -> None:
        try:
            self.dataset = rasterio.open(str(self.filepath))
        except Exception as e:
            raise ValueError(f"Failed to open GeoTIFF: {e}") from e

        tags = self.dataset.tags()
        if METADATA_TAG in tags:
            self.metadata = SceneMetadata.from_dict(
                json.loads(tags[METADATA_TAG])
            )
        elif sidecar_path(self.filepath).exists():
            self.metadata = read_metadata(self.filepath)
        else:
            self.metadata = SceneMetadata(
                lines=self.dataset.height,
                samples=self.dataset.width,
                bands=self.dataset.count,
                dtype=str(self.dataset.dtypes[0]),
                nodata=self.dataset.nodata,
            )

        shape = (self.dataset.count, self.dataset.height, self.dataset.width)
        if shape != self.metadata.shape:
            self.dataset.close()
            raise ValueError(
                f"{self.filepath}: raster shape {shape} does not match "
                f"metadata {self.metadata.shape}"
            )

    def _read_line(self, line: int, band: int) -> np.ndarray:
        window = Window(0, line, self.metadata.samples, 1)
        return self.dataset.read(band + 1, window=window)[0]

    def close(self) -> None:
        if hasattr(self, 'dataset') and not self.dataset.closed:
            self.dataset.close()


class GeoTIFFLineWriter(LineWriter):
    """Write scanlines into a new GeoTIFF.

    Parameters
    ----------
    filepath : str or Path
        Output ``.tif`` path.
    metadata : SceneMetadata
        Output dimensions, band names and scene metadata.

    Raises
    ------
    DependencyError
        If rasterio is not installed.
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        metadata: SceneMetadata,
    ) -> None:
        _require_rasterio()
        super().__init__(filepath, metadata)
        self.dataset = rasterio.open(
            str(self.filepath), 'w',
            driver='GTiff',
            height=metadata.lines,
            width=metadata.samples,
            count=metadata.bands,
            dtype=metadata.dtype,
            nodata=metadata.nodata,
        )
        self.dataset.update_tags(
            **{METADATA_TAG: json.dumps(metadata.to_dict(), default=str)}
        )
        for i, name in enumerate(metadata.band_names[:metadata.bands]):
            self.dataset.set_band_description(i + 1, name)

    def _write_line(self, data: np.ndarray, line: int, band: int) -> None:
        window = Window(0, line, self.metadata.samples, 1)
        self.dataset.write(
            data.astype(self.metadata.dtype)[np.newaxis, :],
            band + 1, window=window,
        )

    def close(self) -> None:
        if self._closed:
            return
        self.dataset.close()
        write_metadata(self.metadata, self.filepath)
        super().close()
