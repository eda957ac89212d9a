"""Helper functions for loading test data."""

import importlib.resources

import polars as pl
import pytest

from workflow.scripts.size_factor_normalisation.table_store import (
    read_counts_table,
)


@pytest.fixture
def example_counts_path():
    """Return the path of a small control vs. knockout counts table."""
    return importlib.resources.files("tests").joinpath("data").joinpath(
        "example_counts.tsv"
    )


@pytest.fixture
def example_counts(example_counts_path):
    """Return the control vs. knockout counts table.

    Most genes go up about four-fold in the knockout samples. ENSG04, ENSG05
    and ENSG09 have zero counts in some samples.
    """
    return read_counts_table(example_counts_path)


@pytest.fixture
def two_sample_counts():
    """Return four genes across two samples; g4 has a zero count in A."""
    return pl.DataFrame(
        {
            "gene": ["g1", "g2", "g3", "g4"],
            "A": [10.0, 10.0, 10.0, 0.0],
            "B": [20.0, 20.0, 20.0, 5.0],
        }
    )
