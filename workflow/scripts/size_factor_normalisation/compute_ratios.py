"""Snakemake script for computing ratios of counts to the reference sample."""

import loguru
import polars as pl

from workflow.scripts.size_factor_normalisation.errors import (
    NoCompleteCasesError,
)
from workflow.scripts.size_factor_normalisation.table_store import (
    AVERAGE_COUNT,
    COUNT,
    GENE,
    RATIO,
    SAMPLE,
    read_long_table,
    write_long_table,
)


def compute_ratios(observations, reference):
    """Divide each count by the reference count of its gene.

    Observations of genes without a reference count are dropped.
    """
    if reference.height == 0:
        raise NoCompleteCasesError(
            observations.get_column(GENE).n_unique(),
            observations.get_column(SAMPLE).unique(maintain_order=True),
        )
    return (
        observations.join(reference, on=GENE, how="inner")
        .with_columns((pl.col(COUNT) / pl.col(AVERAGE_COUNT)).alias(RATIO))
        .select(GENE, SAMPLE, RATIO)
    )


def main(observations_tsv, reference_tsv, output_tsv):
    loguru.logger.info("Reading observations and reference...")
    observations = read_long_table(observations_tsv)
    reference = read_long_table(reference_tsv)
    loguru.logger.info("Computing ratios...")
    ratios = compute_ratios(observations, reference)
    write_long_table(ratios, output_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        observations_tsv=snakemake.input.observations,
        reference_tsv=snakemake.input.reference,
        output_tsv=snakemake.output[0],
    )
