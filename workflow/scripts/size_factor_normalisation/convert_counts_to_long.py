"""Snakemake script for converting a wide counts table into observations."""

import loguru

from workflow.scripts.size_factor_normalisation.table_store import (
    read_counts_table,
    to_long,
    write_long_table,
)


def main(counts_path, id_column, output_tsv):
    counts = read_counts_table(counts_path, id_column=id_column)
    loguru.logger.info("Converting counts into observations...")
    write_long_table(to_long(counts), output_tsv)
    loguru.logger.success("Done.")


if __name__ == "__main__":
    loguru.logger.remove()
    loguru.logger.add(snakemake.log[0])
    main(
        counts_path=snakemake.input[0],
        id_column=snakemake.params.id_column,
        output_tsv=snakemake.output[0],
    )
