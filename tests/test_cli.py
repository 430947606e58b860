import subprocess
import sys
from pathlib import Path

import pandas as pd
import pytest

from daubinterp.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args(["sweep"])
    assert args.p == list(range(2, 16))
    assert args.reference_levels == 17
    assert args.min_level == 2
    assert args.scheduler == "threads"
    assert args.methods is None


def test_sweep_command(tmp_path):
    rc = main(
        [
            "--log-level",
            "WARNING",
            "sweep",
            "--p",
            "2",
            "3",
            "--reference-levels",
            "5",
            "--outdir",
            str(tmp_path),
            "--scheduler",
            "synchronous",
        ]
    )

    assert rc == 0
    for p in (2, 3):
        frame = pd.read_csv(tmp_path / f"daubechies_{p}_scaling_convergence.csv")
        assert frame["r"].tolist() == [2, 3]


def test_refine_command(tmp_path):
    output = tmp_path / "refine.csv"
    rc = main(["refine", "--p", "4", "--max-level", "6", "--output", str(output)])

    assert rc == 0
    table = pd.read_csv(output, index_col="r")
    assert table.index.tolist() == [2, 3, 4]


def test_invalid_arguments_exit():
    with pytest.raises(SystemExit, match="p must be in"):
        main(["sweep", "--p", "1", "--reference-levels", "5"])
    with pytest.raises(SystemExit):
        main(["sweep", "--methods", "nearest"])


def test_module_entry_point(tmp_path):
    repo_root = Path(__file__).resolve().parents[1]
    cmd = [
        sys.executable,
        "-m",
        "daubinterp",
        "sweep",
        "--p",
        "2",
        "--reference-levels",
        "4",
        "--methods",
        "linear",
        "pchip",
        "--outdir",
        str(tmp_path),
    ]
    subprocess.run(cmd, cwd=repo_root, check=True)

    assert (tmp_path / "daubechies_2_scaling_convergence.csv").exists()
