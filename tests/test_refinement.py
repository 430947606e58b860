import logging

import numpy as np
import pytest

from daubinterp.refinement import COLUMNS, choose_refinement, refinement_method


@pytest.mark.parametrize(
    "p, expected",
    [(2, None), (3, "cubic_hermite"), (5, "cubic_hermite"), (6, "quintic_hermite"), (15, "quintic_hermite")],
)
def test_refinement_method(p, expected):
    assert refinement_method(p) == expected


def test_choose_refinement_float32():
    table = choose_refinement(4, max_level=8, dtype=np.float32)

    assert table.index.name == "r"
    assert table.index.tolist() == [2, 3, 4, 5, 6]
    assert table.columns.tolist() == COLUMNS
    assert set(table["method"]) == {"cubic_hermite"}
    assert (table["float_distance"] >= 0).all()
    assert table["sup_error"].iloc[-1] < table["sup_error"].iloc[0]
    np.testing.assert_allclose(table["dx"], 2.0 ** -table.index.to_numpy())

    worst = table.iloc[-1]
    assert 0 < worst["worst_abscissa"] < 7
    assert abs(worst["worst_value"] - worst["worst_computed"]) <= worst["sup_error"] * (1 + 1e-6)


def test_choose_refinement_quintic_double():
    table = choose_refinement(6, max_level=7, dtype=np.float64, reference_dtype=np.longdouble)

    assert table.index.tolist() == [2, 3, 4, 5]
    assert set(table["method"]) == {"quintic_hermite"}
    assert np.all(np.isfinite(table["float_distance"]))
    assert (table["float_distance"] > 0).all()
    assert table["float_distance"].iloc[-1] < table["float_distance"].iloc[0]


def test_choose_refinement_low_order_is_empty(caplog):
    with caplog.at_level(logging.WARNING):
        table = choose_refinement(2, max_level=6)

    assert table.empty
    assert table.columns.tolist() == COLUMNS
    assert "need p >= 3" in caplog.text


def test_choose_refinement_errors():
    with pytest.raises(ValueError, match="float32 or float64"):
        choose_refinement(4, max_level=6, dtype=np.float16)
    with pytest.raises(ValueError, match="less precise"):
        choose_refinement(4, max_level=6, dtype=np.float64, reference_dtype=np.float32)
    with pytest.raises(ValueError, match="min_level"):
        choose_refinement(4, max_level=3)
