"""
Tests for workflow/scripts/size_factor_normalisation/estimate_size_factors.py.
"""

import polars as pl
import pytest

from workflow.scripts.size_factor_normalisation import estimate_size_factors
from workflow.scripts.size_factor_normalisation.errors import EmptySampleError


def _ratios(ratios_of_sample):
    return pl.DataFrame(
        [
            (f"g{i}", sample, ratio)
            for sample, ratios in ratios_of_sample.items()
            for i, ratio in enumerate(ratios)
        ],
        schema=["gene", "sample", "ratio"],
        orient="row",
    )


def _observations(samples):
    return pl.DataFrame(
        {
            "gene": ["g0"] * len(samples),
            "sample": samples,
            "count": [1.0] * len(samples),
        }
    )


@pytest.mark.parametrize(
    ["ratios", "expected"],
    [
        # A single outlier barely moves the median (the mean would be 20.8).
        ([1.0, 1.0, 1.0, 1.0, 100.0], 1.0),
        ([3.0, 1.0, 2.0], 2.0),
        # Even-sized groups take the mean of the two central ratios.
        ([4.0, 1.0, 2.0, 100.0], 3.0),
        ([0.5], 0.5),
    ],
)
def test_estimate_size_factors_median(ratios, expected):
    size_factors = estimate_size_factors.estimate_size_factors(
        _ratios({"S": ratios}), _observations(["S"])
    )
    assert size_factors.columns == ["sample", "size_factor"]
    assert size_factors["size_factor"].to_list() == [pytest.approx(expected)]


def test_estimate_size_factors_sample_order():
    size_factors = estimate_size_factors.estimate_size_factors(
        _ratios({"A": [1.0], "B": [2.0], "C": [3.0]}),
        _observations(["C", "A", "B"]),
    )
    assert size_factors.rows() == [("C", 3.0), ("A", 1.0), ("B", 2.0)]


def test_estimate_size_factors_empty_sample():
    """Test that a sample without ratios is reported."""
    with pytest.raises(EmptySampleError) as exc_info:
        estimate_size_factors.estimate_size_factors(
            _ratios({"A": [1.0, 2.0]}), _observations(["A", "B", "C"])
        )
    assert exc_info.value.samples == ["B", "C"]


def test_main(tmp_path):
    ratios_tsv = tmp_path / "ratios.tsv"
    observations_tsv = tmp_path / "observations.tsv"
    output_tsv = tmp_path / "size_factors.tsv"
    _ratios({"A": [1.0, 3.0], "B": [2.0, 2.0, 8.0]}).write_csv(
        ratios_tsv, separator="\t"
    )
    _observations(["A", "B"]).write_csv(observations_tsv, separator="\t")
    estimate_size_factors.main(ratios_tsv, observations_tsv, output_tsv)
    assert output_tsv.read_text() == "A\t2.0\nB\t2.0\n"
