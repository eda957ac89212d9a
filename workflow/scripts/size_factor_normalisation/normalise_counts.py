"""Snakemake script for normalising counts using size factors."""

import loguru
import polars as pl

from workflow.scripts.size_factor_normalisation.errors import MissingFactorError
from workflow.scripts.size_factor_normalisation.table_store import (
    COUNT,
    GENE,
    NORMALISED_COUNT,
    SAMPLE,
    SIZE_FACTOR,
    read_counts_table,
    read_size_factors,
    to_long,
    to_wide,
    write_counts_table,
    write_long_table,
)


def normalise_observations(observations, size_factors):
    """Divide every count by the size factor of its sample.

    Every observation is kept, including those of genes that did not take part
    in estimating the size factors.
    """
    missing = (
        observations.select(SAMPLE)
        .unique(maintain_order=True)
        .join(size_factors, on=SAMPLE, how="anti")
    )
    if missing.height > 0:
        raise MissingFactorError(missing.get_column(SAMPLE).to_list())
    return (
        observations.join(
            size_factors.select(SAMPLE, SIZE_FACTOR),
            on=SAMPLE,
            how="left",
            maintain_order="left",
        )
        .with_columns(
            (pl.col(COUNT) / pl.col(SIZE_FACTOR)).alias(NORMALISED_COUNT)
        )
        .select(GENE, SAMPLE, NORMALISED_COUNT)
    )


def normalise_counts(counts, size_factors):
    """Normalise a wide counts table, keeping its row and column order."""
    normalised = normalise_observations(to_long(counts), size_factors)
    return to_wide(normalised, NORMALISED_COUNT).select(counts.columns)


def main(
    counts_path,
    size_factors_tsv,
    id_column,
    output_tsv,
    output_long_tsv=None,
):
    loguru.logger.info("Reading counts and size factors...")
    counts = read_counts_table(counts_path, id_column=id_column)
    size_factors = read_size_factors(size_factors_tsv)
    loguru.logger.info("Normalising counts...")
    observations = to_long(counts)
    normalised = normalise_observations(observations, size_factors)
    norm_counts = to_wide(normalised, NORMALISED_COUNT).select(counts.columns)
    write_counts_table(norm_counts, output_tsv, id_column=id_column)
    if output_long_tsv is not None:
        write_long_table(normalised, output_long_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        counts_path=snakemake.input.counts,
        size_factors_tsv=snakemake.input.size_factors,
        id_column=snakemake.params.id_column,
        output_tsv=snakemake.output.norm_counts,
        output_long_tsv=snakemake.output.get("norm_counts_long"),
    )
