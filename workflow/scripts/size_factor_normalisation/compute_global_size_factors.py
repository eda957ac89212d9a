"""
Snakemake script for computing size factors naively as total counts per
million, for comparison with median-of-ratios size factors.
"""

import loguru
import polars as pl

from workflow.scripts.size_factor_normalisation.errors import EmptySampleError
from workflow.scripts.size_factor_normalisation.table_store import (
    GENE,
    SAMPLE,
    SIZE_FACTOR,
    read_counts_table,
    write_size_factors,
)

PER_MILLION = 1e6


def compute_global_size_factors(counts):
    """Divide each sample's total count by one million."""
    size_factors = (
        counts.select(pl.exclude(GENE).sum())
        .unpivot(variable_name=SAMPLE, value_name=SIZE_FACTOR)
        .with_columns(pl.col(SIZE_FACTOR) / PER_MILLION)
    )
    empty_samples = size_factors.filter(pl.col(SIZE_FACTOR) <= 0)
    if empty_samples.height > 0:
        raise EmptySampleError(empty_samples.get_column(SAMPLE).to_list())
    return size_factors


def main(counts_path, id_column, output_tsv):
    counts = read_counts_table(counts_path, id_column=id_column)
    loguru.logger.info("Computing total count size factors...")
    write_size_factors(compute_global_size_factors(counts), output_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        counts_path=snakemake.input[0],
        id_column=snakemake.params.id_column,
        output_tsv=snakemake.output[0],
    )
