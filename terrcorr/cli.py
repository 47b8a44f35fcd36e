# -*- coding: utf-8 -*-
"""
Deskew Command Line - ``terrcorr-deskew`` entry point.

Removes incidence-angle skew from a slant range DEM, or terrain corrects
a SAR image with it, writing ground range output.  Settings come from an
optional YAML file (see ``terrcorr.config``) overridden by flags.

Usage
-----
    terrcorr-deskew dem_slant.npy terrcorr.npy --sar sar.npy \\
        --out-mask layover_mask.npy --radiometric 5

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
2026-02-18

Modified
--------
2026-10-19
"""

# Standard library
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Terrcorr internal
from terrcorr.config import DeskewConfig
from terrcorr.exceptions import TerrcorrError
from terrcorr.image_processing.deskew import deskew_dem

logger = logging.getLogger(__name__)


# ── CLI ───────────────────────────────────────────────────────────────


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns
    -------
    argparse.Namespace
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="terrcorr-deskew",
        description=(
            "Remove incidence-angle skew from a slant range DEM and map it "
            "to ground range. With --sar, terrain correct the SAR image "
            "instead, geometrically and optionally radiometrically."
        ),
    )
    parser.add_argument(
        "dem_slant",
        type=Path,
        nargs="?",
        default=None,
        help="Slant range DEM (.npy or .tif).",
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        default=None,
        help="Output ground range image (.npy or .tif).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file. Flags override its values.",
    )
    parser.add_argument(
        "--sar",
        type=Path,
        default=None,
        help="Slant range SAR image to terrain correct.",
    )
    parser.add_argument(
        "--ground-dem",
        type=Path,
        default=None,
        help="Ground range DEM to use instead of the back-converted one.",
    )
    parser.add_argument(
        "--radiometric",
        type=str,
        default=None,
        help="Radiometric correction: 0 (none, default) or 5 (Kellndorfer).",
    )
    parser.add_argument(
        "--mask",
        type=Path,
        default=None,
        help="User mask in slant range (requires --sar).",
    )
    parser.add_argument(
        "--out-mask",
        type=Path,
        default=None,
        help="Write the layover/shadow mask to this file.",
    )
    parser.add_argument(
        "--fill-holes",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Keep data in layover and shadow instead of zeroing it "
             "(--no-fill-holes zeroes it even if the config says otherwise).",
    )
    parser.add_argument(
        "--fill-value",
        type=float,
        default=None,
        help="Value for user-masked pixels (default: -1, keep the data).",
    )
    parser.add_argument(
        "--gr-dem",
        choices=["backconverted", "original"],
        default=None,
        help="Ground range DEM driving geometric correction "
             "(default: backconverted).",
    )
    parser.add_argument(
        "--nearest",
        action="store_const",
        const="nearest",
        default=None,
        dest="interpolation",
        help="Nearest neighbour SAR resampling instead of bilinear.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log messages to this file.",
    )
    return parser.parse_args(argv)


def _configure_logging(level: str, log_file: Optional[Path]) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def build_config(args: argparse.Namespace) -> DeskewConfig:
    """Merge the YAML configuration (if any) with command-line flags."""
    config = (DeskewConfig.from_yaml(args.config)
              if args.config is not None else DeskewConfig())
    return config.merged(
        dem_slant=args.dem_slant,
        output=args.output,
        sar=args.sar,
        dem_ground=args.ground_dem,
        radiometric=args.radiometric,
        mask=args.mask,
        out_mask=args.out_mask,
        fill_holes=args.fill_holes,
        fill_value=args.fill_value,
        which_gr_dem=args.gr_dem,
        interpolation=args.interpolation,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run a deskew from the command line.

    Returns
    -------
    int
        Exit status: 0 on success, 1 on a terrain-correction error, a
        missing input or an unreadable or unsupported raster.
    """
    args = parse_args(argv)
    _configure_logging(args.log_level, args.log_file)

    try:
        config = build_config(args)
        result = deskew_dem(**config.to_kwargs())
    except (TerrcorrError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "Wrote %s (%d bands, ground pixel %.3f m)",
        config.output, result.metadata.bands, result.gr_pixel_size,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
