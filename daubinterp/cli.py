"""
Command-line entry point: ``daubinterp sweep`` and ``daubinterp refine``.
"""
import argparse
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from daubinterp.config import (
    DEFAULT_REFERENCE_LEVELS,
    DEFAULT_REFINEMENT_LEVELS,
    DEFAULT_VANISHING_MOMENTS,
    MIN_LEVEL,
)
from daubinterp.interpolators import REGISTRY
from daubinterp.refinement import choose_refinement
from daubinterp.sweep import run_sweep

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daubinterp",
        description=(
            "Find the interpolation scheme with the smallest sup-norm error "
            "for Daubechies scaling functions."
        ),
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sweep = sub.add_parser("sweep", help="Compare interpolators and write convergence CSVs.")
    sweep.add_argument(
        "--p",
        type=int,
        nargs="+",
        default=DEFAULT_VANISHING_MOMENTS,
        help="Vanishing-moment counts to sweep (default: 2..15).",
    )
    sweep.add_argument("--reference-levels", type=int, default=DEFAULT_REFERENCE_LEVELS)
    sweep.add_argument("--min-level", type=int, default=MIN_LEVEL)
    sweep.add_argument("--outdir", type=Path, default=Path("."))
    sweep.add_argument("--methods", nargs="+", choices=list(REGISTRY), default=None)
    sweep.add_argument(
        "--include-slow",
        action="store_true",
        help="Also compare the sinc and trigonometric interpolants.",
    )
    sweep.add_argument("--chunk-size", type=int, default=None)
    sweep.add_argument(
        "--scheduler",
        default="threads",
        choices=["threads", "processes", "synchronous"],
        help="Dask scheduler running one task per p (default: threads).",
    )
    sweep.add_argument("--workers", type=int, default=None)

    refine = sub.add_parser("refine", help="Report Hermite interpolation accuracy per level.")
    refine.add_argument("--p", type=int, required=True)
    refine.add_argument("--max-level", type=int, default=DEFAULT_REFINEMENT_LEVELS)
    refine.add_argument("--min-level", type=int, default=MIN_LEVEL)
    refine.add_argument("--dtype", default="float32", choices=["float32", "float64"])
    refine.add_argument(
        "--reference-dtype",
        default="float64",
        choices=["float64", "longdouble"],
    )
    refine.add_argument("--output", type=Path, default=None, help="Optional CSV path.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        if args.command == "sweep":
            best = run_sweep(
                args.p,
                outdir=args.outdir,
                reference_levels=args.reference_levels,
                min_level=args.min_level,
                methods=args.methods,
                include_slow=args.include_slow,
                chunk_size=args.chunk_size,
                scheduler=args.scheduler,
                num_workers=args.workers,
            )
            for p, series in best.items():
                logger.info("p = %d: best method at finest level is %s", p, series.iloc[-1])
        else:
            table = choose_refinement(
                args.p,
                max_level=args.max_level,
                min_level=args.min_level,
                dtype=np.dtype(args.dtype),
                reference_dtype=np.dtype(args.reference_dtype),
            )
            if args.output is not None:
                table.to_csv(args.output)
                logger.info("Wrote %s", args.output)
    except (TypeError, ValueError) as e:
        raise SystemExit(f"daubinterp: error: {e}") from e
    return 0
