"""
Snakemake script for estimating size factors as the median of each sample's
ratios to the reference sample.

The median is robust to most genes shifting in the same direction between
samples, which skews total-count factors.
"""

import loguru
import polars as pl

from workflow.scripts.size_factor_normalisation.errors import EmptySampleError
from workflow.scripts.size_factor_normalisation.table_store import (
    RATIO,
    SAMPLE,
    SIZE_FACTOR,
    read_long_table,
    write_size_factors,
)


def estimate_size_factors(ratios, observations):
    """Compute one size factor per sample in `observations`.

    Even-sized groups take the mean of the two central ratios.
    """
    samples = observations.get_column(SAMPLE).unique(maintain_order=True)
    medians = ratios.group_by(SAMPLE).agg(
        pl.col(RATIO).median().alias(SIZE_FACTOR)
    )
    size_factors = (
        pl.DataFrame({SAMPLE: samples})
        .join(medians, on=SAMPLE, how="left", maintain_order="left")
        .select(SAMPLE, SIZE_FACTOR)
    )
    empty_samples = size_factors.filter(pl.col(SIZE_FACTOR).is_null())
    if empty_samples.height > 0:
        raise EmptySampleError(empty_samples.get_column(SAMPLE).to_list())
    return size_factors


def main(ratios_tsv, observations_tsv, output_tsv):
    loguru.logger.info("Reading ratios and observations...")
    ratios = read_long_table(ratios_tsv)
    observations = read_long_table(observations_tsv)
    loguru.logger.info("Estimating size factors...")
    size_factors = estimate_size_factors(ratios, observations)
    for sample, size_factor in size_factors.iter_rows():
        loguru.logger.info(f"{sample}: {size_factor:.4g}")
    write_size_factors(size_factors, output_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        ratios_tsv=snakemake.input.ratios,
        observations_tsv=snakemake.input.observations,
        output_tsv=snakemake.output[0],
    )
