import logging

import numpy as np
import pandas as pd
import pytest
import xarray as xr

from daubinterp.interpolators import available_methods
from daubinterp.sweep import (
    _log_ranking,
    best_methods,
    find_best_interpolator,
    run_sweep,
    write_convergence_csv,
)


@pytest.fixture(scope="module")
def errors_p2():
    return find_best_interpolator(2, reference_levels=7)


def test_find_best_interpolator_table(errors_p2):
    assert isinstance(errors_p2, xr.DataArray)
    assert errors_p2.dims == ("r", "method")
    assert errors_p2["r"].values.tolist() == [2, 3, 4, 5]
    assert errors_p2["method"].values.tolist() == available_methods(2)
    assert np.all(np.isfinite(errors_p2.values))
    assert np.all(errors_p2.values >= 0)
    assert errors_p2.attrs["p"] == 2
    assert errors_p2.attrs["reference_levels"] == 7
    assert "Sup-norm errors" in errors_p2.attrs["history"]


def test_errors_shrink_with_refinement():
    errors = find_best_interpolator(4, reference_levels=9, methods=["linear", "cubic_hermite"])
    for method in ("linear", "cubic_hermite"):
        curve = errors.loc[{"method": method}]
        assert float(curve.sel(r=7)) < float(curve.sel(r=2))


def test_error_is_measured_between_nodes():
    """Half the reference points fall between level-3 nodes."""
    errors = find_best_interpolator(3, reference_levels=5, min_level=3, methods=["linear"])
    assert float(errors.loc[{"r": 3, "method": "linear"}]) > 0


def test_best_methods(errors_p2):
    best = best_methods(errors_p2)

    assert isinstance(best, pd.Series)
    assert best.index.tolist() == [2, 3, 4, 5]
    for r, name in best.items():
        row = errors_p2.sel(r=r)
        assert name == row["method"].values[int(np.argmin(row.values))]


def test_best_methods_ties_go_to_earlier_column():
    errors = xr.DataArray(
        [[0.5, 0.25, 0.25], [0.1, 0.1, 0.3]],
        dims=("r", "method"),
        coords={"r": [2, 3], "method": ["a", "b", "c"]},
    )
    assert best_methods(errors).tolist() == ["b", "a"]


def test_write_convergence_csv(errors_p2, tmp_path):
    path = write_convergence_csv(errors_p2, tmp_path / "out")

    assert path == tmp_path / "out" / "daubechies_2_scaling_convergence.csv"
    lines = path.read_text().splitlines()
    assert lines[0] == "r," + ",".join(available_methods(2))
    assert len(lines) == 5
    first_value = lines[1].split(",")[1]
    assert len(first_value.split(".")[1]) == 18

    frame = pd.read_csv(path, index_col="r", float_precision="round_trip")
    np.testing.assert_allclose(frame.values, errors_p2.values, rtol=1e-15, atol=1e-18)


def test_write_convergence_csv_needs_p(tmp_path):
    errors = xr.DataArray([[0.1]], dims=("r", "method"), coords={"r": [2], "method": ["a"]})
    with pytest.raises(ValueError, match="vanishing-moment count"):
        write_convergence_csv(errors, tmp_path)


def test_run_sweep(tmp_path):
    best = run_sweep(
        [2, 3],
        outdir=tmp_path,
        reference_levels=6,
        scheduler="synchronous",
    )

    assert sorted(best) == [2, 3]
    for p in (2, 3):
        assert (tmp_path / f"daubechies_{p}_scaling_convergence.csv").exists()
        assert set(best[p].values) <= set(available_methods(p))


def test_run_sweep_skips_unavailable_methods(tmp_path, caplog):
    run_sweep(
        [2, 4],
        outdir=tmp_path,
        reference_levels=6,
        methods=["linear", "septic_hermite"],
        scheduler="threads",
        num_workers=2,
    )

    p2 = pd.read_csv(tmp_path / "daubechies_2_scaling_convergence.csv")
    p4 = pd.read_csv(tmp_path / "daubechies_4_scaling_convergence.csv")
    assert p2.columns.tolist() == ["r", "linear"]
    assert p4.columns.tolist() == ["r", "linear", "septic_hermite"]
    assert "Skipping ['septic_hermite'] for p = 2" in caplog.text


def test_ranking_is_logged_in_ascending_order(caplog):
    with caplog.at_level(logging.INFO, logger="daubinterp.sweep"):
        best = _log_ranking(4, ["pchip", "linear", "cubic_hermite"], np.array([0.5, 0.25, 0.25]))

    assert best == "linear"
    assert [record.getMessage() for record in caplog.records] == [
        "\t0.250000000000000000 is error of linear interpolation",
        "\t0.250000000000000000 is error of cubic_hermite_spline",
        "\t0.500000000000000000 is error of pchip",
        "\tThe best method for p = 4 is the linear interpolation",
    ]


def test_find_best_interpolator_logs_best_method(caplog):
    with caplog.at_level(logging.INFO, logger="daubinterp.sweep"):
        errors = find_best_interpolator(
            3, reference_levels=6, methods=["linear", "cubic_hermite"]
        )

    assert caplog.text.count("The best method for p = 3 is the") == errors.sizes["r"]
    assert "Computing reference grid" in caplog.text


def test_run_sweep_skips_p_without_usable_methods(tmp_path, caplog):
    best = run_sweep(
        [2, 4],
        outdir=tmp_path,
        reference_levels=6,
        methods=["septic_hermite"],
        scheduler="synchronous",
    )

    assert sorted(best) == [4]
    assert not (tmp_path / "daubechies_2_scaling_convergence.csv").exists()
    assert (tmp_path / "daubechies_4_scaling_convergence.csv").exists()
    assert "No requested method is usable for p = 2" in caplog.text


def test_find_best_interpolator_errors():
    with pytest.raises(ValueError, match="does not exist for p = 2"):
        find_best_interpolator(2, reference_levels=5, methods=["quintic_hermite"])
    with pytest.raises(ValueError, match="Unknown interpolation method"):
        find_best_interpolator(3, reference_levels=5, methods=["nearest"])
    with pytest.raises(ValueError, match="reference_levels must be at least"):
        find_best_interpolator(3, reference_levels=3)
    with pytest.raises(ValueError, match="p must be in"):
        find_best_interpolator(1, reference_levels=5)
    with pytest.raises(ValueError, match="At least one value of p"):
        run_sweep([], reference_levels=5)
