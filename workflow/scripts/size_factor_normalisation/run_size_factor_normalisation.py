"""
Snakemake script for normalising a counts table by median-of-ratios size
factors in a single step.

Nothing is written unless every step succeeds.
"""

import loguru

from workflow.scripts.size_factor_normalisation.build_reference import (
    build_reference,
)
from workflow.scripts.size_factor_normalisation.compute_ratios import (
    compute_ratios,
)
from workflow.scripts.size_factor_normalisation.estimate_size_factors import (
    estimate_size_factors,
)
from workflow.scripts.size_factor_normalisation.normalise_counts import (
    normalise_counts,
)
from workflow.scripts.size_factor_normalisation.table_store import (
    read_counts_table,
    to_long,
    write_counts_table,
    write_long_table,
    write_size_factors,
)


def size_factor_normalise(counts):
    """Normalise a wide counts table.

    Returns the normalised wide table, the size factors and the long table of
    ratios to the reference sample.
    """
    observations = to_long(counts)
    loguru.logger.info("Building the reference sample...")
    reference = build_reference(observations)
    loguru.logger.info("Computing ratios...")
    ratios = compute_ratios(observations, reference)
    loguru.logger.info("Estimating size factors...")
    size_factors = estimate_size_factors(ratios, observations)
    loguru.logger.info("Normalising counts...")
    norm_counts = normalise_counts(counts, size_factors)
    return norm_counts, size_factors, ratios


def main(
    counts_path,
    id_column,
    output_tsv,
    size_factors_tsv=None,
    ratios_tsv=None,
):
    counts = read_counts_table(counts_path, id_column=id_column)
    norm_counts, size_factors, ratios = size_factor_normalise(counts)
    write_counts_table(norm_counts, output_tsv, id_column=id_column)
    if size_factors_tsv is not None:
        write_size_factors(size_factors, size_factors_tsv)
    if ratios_tsv is not None:
        write_long_table(ratios, ratios_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        counts_path=snakemake.input[0],
        id_column=snakemake.params.id_column,
        output_tsv=snakemake.output.norm_counts,
        size_factors_tsv=snakemake.output.get("size_factors"),
        ratios_tsv=snakemake.output.get("ratios"),
    )
