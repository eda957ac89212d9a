"""
Snakemake script for building the synthetic reference sample.

The reference count of a gene is its mean count across samples. Only genes
with a nonzero count in every sample contribute to the reference.
"""

import loguru
import polars as pl

from workflow.scripts.size_factor_normalisation.table_store import (
    AVERAGE_COUNT,
    COUNT,
    GENE,
    SAMPLE,
    read_long_table,
    write_long_table,
)


def build_reference(observations):
    """Compute the average count of every complete-case gene.

    A gene missing from any sample, or with a zero count in any sample, is
    left out. The result is empty if no gene qualifies.
    """
    num_samples = observations.get_column(SAMPLE).n_unique()
    reference = (
        observations.group_by(GENE, maintain_order=True)
        .agg(
            pl.col(SAMPLE).filter(pl.col(COUNT) > 0).n_unique().alias("n"),
            pl.col(COUNT).mean().alias(AVERAGE_COUNT),
        )
        .filter(pl.col("n") == num_samples)
        .select(GENE, AVERAGE_COUNT)
    )
    num_genes = observations.get_column(GENE).n_unique()
    num_excluded = num_genes - reference.height
    if num_excluded > 0:
        loguru.logger.warning(
            "Excluded {}/{} genes with a zero or missing count from the"
            " reference.".format(num_excluded, num_genes)
        )
    return reference


def main(observations_tsv, output_tsv):
    loguru.logger.info("Reading observations...")
    observations = read_long_table(observations_tsv)
    loguru.logger.info("Building the reference sample...")
    reference = build_reference(observations)
    write_long_table(reference, output_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        observations_tsv=snakemake.input[0],
        output_tsv=snakemake.output[0],
    )
