"""
Reading, writing and reshaping of (gene x sample) count tables.

Wide tables have a `gene` column and one column per sample. Long tables have
one row per (gene, sample) pair.
"""

import loguru
import pandas as pd
import polars as pl

from workflow.scripts.size_factor_normalisation.errors import (
    DuplicateKeyError,
    MalformedInputError,
)

GENE = "gene"
SAMPLE = "sample"
COUNT = "count"
AVERAGE_COUNT = "average_count"
RATIO = "ratio"
SIZE_FACTOR = "size_factor"
NORMALISED_COUNT = "normalised_count"

# Tabs, commas or runs of spaces.
DELIMITER_REGEX = r"[\t ,]+"
QUOTED_REGEX = r'^"(.*)"$'


def to_long(wide):
    """Convert a wide table into (gene, sample, count) rows."""
    samples = [col for col in wide.columns if col != GENE]
    return wide.unpivot(
        on=samples, index=GENE, variable_name=SAMPLE, value_name=COUNT
    )


def to_wide(long, value_column=COUNT):
    """Pivot a long table into one row per gene and one column per sample.

    Genes and samples keep the order in which they first appear.
    """
    duplicates = (
        long.group_by([GENE, SAMPLE])
        .len()
        .filter(pl.col("len") > 1)
        .sort([GENE, SAMPLE])
    )
    if duplicates.height > 0:
        raise DuplicateKeyError(duplicates.select(GENE, SAMPLE).rows())
    return long.pivot(on=SAMPLE, index=GENE, values=value_column)


def _parse_counts(body, id_column, samples):
    counts = pd.DataFrame({GENE: body[id_column].to_numpy()})
    for sample in samples:
        values = pd.to_numeric(body[sample], errors="coerce")
        is_invalid = values.isna() | (values < 0) | (values == float("inf"))
        if is_invalid.any():
            row = is_invalid.to_numpy().nonzero()[0][0]
            cell = body[sample].iloc[row]
            if pd.isna(cell):
                message = "Row is missing a count"
            elif pd.isna(values.iloc[row]):
                message = f"Non-numeric count {cell!r}"
            else:
                message = f"Count {cell!r} is not a finite non-negative number"
            raise MalformedInputError(
                message, gene=body[id_column].iloc[row], sample=sample
            )
        counts[sample] = values.to_numpy(dtype=float)
    return counts


def read_counts_table(counts_path, id_column=GENE):
    """Read a delimited wide counts table.

    The first header field must be `id_column`; it is renamed to `gene`. All
    other columns are samples and must hold non-negative numbers. Surrounding
    double quotes are removed from every field; quoted fields must not contain
    the delimiter.
    """
    loguru.logger.info(f"Reading counts table from {counts_path}...")
    try:
        raw = pd.read_csv(
            counts_path,
            sep=DELIMITER_REGEX,
            engine="python",
            header=None,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
        )
    except pd.errors.EmptyDataError as exc:
        raise MalformedInputError(
            f"Counts table {counts_path} is empty"
        ) from exc
    except pd.errors.ParserError as exc:
        # Rows with more fields than the header.
        raise MalformedInputError(f"Ragged counts table: {exc}") from exc
    # Quoting is not understood by the regex separator.
    raw = raw.replace(QUOTED_REGEX, r"\1", regex=True)

    header = raw.iloc[0].tolist()
    if header[0] != id_column:
        raise MalformedInputError(
            "Expected identifier column {!r} first, found {!r}".format(
                id_column, header[0]
            )
        )
    samples = header[1:]
    if not samples:
        raise MalformedInputError("Counts table has no sample columns")
    duplicated = sorted({col for col in header if header.count(col) > 1})
    if duplicated:
        raise MalformedInputError(
            "Duplicated column headers: {}".format(", ".join(duplicated))
        )
    if GENE in samples:
        raise MalformedInputError(
            f"Sample column {GENE!r} clashes with the identifier column"
        )

    body = raw.iloc[1:].reset_index(drop=True)
    body.columns = header
    is_missing_id = body[id_column].isna() | (body[id_column] == "")
    if is_missing_id.any():
        raise MalformedInputError(
            "Row without a gene identifier",
            line=int(is_missing_id.to_numpy().nonzero()[0][0]) + 2,
        )
    is_duplicated = body[id_column].duplicated()
    duplicated_genes = body.loc[is_duplicated, id_column].unique()
    if len(duplicated_genes) > 0:
        raise DuplicateKeyError(
            [(gene, sample) for gene in duplicated_genes for sample in samples]
        )

    counts = pl.from_pandas(_parse_counts(body, id_column, samples))
    counts = counts.with_columns(pl.col(GENE).cast(pl.String))
    loguru.logger.info(
        "Read {} genes across {} samples.".format(counts.height, len(samples))
    )
    return counts


def write_counts_table(wide, output_path, id_column=GENE):
    """Write a wide table, restoring the original identifier column name."""
    wide.rename({GENE: id_column}).write_csv(output_path, separator="\t")


def read_long_table(table_path):
    """Read a tab-separated long table written by `write_long_table`."""
    long = pl.read_csv(table_path, separator="\t", infer_schema=False)
    return long.with_columns(pl.exclude(GENE, SAMPLE).cast(pl.Float64))


def write_long_table(long, output_path):
    long.write_csv(output_path, separator="\t")


def read_size_factors(size_factors_path):
    """Read a headerless `sample<TAB>size_factor` table."""
    return pl.read_csv(
        size_factors_path,
        separator="\t",
        has_header=False,
        schema={SAMPLE: pl.String, SIZE_FACTOR: pl.Float64},
    )


def write_size_factors(size_factors, output_path):
    size_factors.select(SAMPLE, SIZE_FACTOR).write_csv(
        output_path, separator="\t", include_header=False
    )
