"""Errors raised by the size factor normalisation scripts."""


def _preview(items, limit=5):
    items = list(items)
    shown = ", ".join(str(item) for item in items[:limit])
    if len(items) > limit:
        shown += ", ... ({} in total)".format(len(items))
    return shown


class SizeFactorNormalisationError(Exception):
    """Base class for all errors raised while normalising counts."""


class MalformedInputError(SizeFactorNormalisationError):
    """The counts table cannot be parsed into (gene, sample, count) cells."""

    def __init__(self, message, gene=None, sample=None, line=None):
        self.gene = gene
        self.sample = sample
        self.line = line
        fields = {"line": line, "gene": gene, "sample": sample}
        context = [f"{k}={v!r}" for k, v in fields.items() if v is not None]
        if context:
            message = "{} ({})".format(message, ", ".join(context))
        super().__init__(message)


class DuplicateKeyError(SizeFactorNormalisationError):
    """A (gene, sample) pair occurs more than once, so pivoting is undefined."""

    def __init__(self, pairs):
        self.pairs = list(pairs)
        super().__init__(
            "Found duplicated (gene, sample) pairs: {}".format(
                _preview(self.pairs)
            )
        )


class NoCompleteCasesError(SizeFactorNormalisationError):
    """No gene has a nonzero count in every sample."""

    def __init__(self, num_genes, samples):
        self.num_genes = num_genes
        self.samples = list(samples)
        super().__init__(
            (
                "None of the {} genes has a nonzero count in all {} samples"
                " ({}); cannot build a reference sample."
            ).format(num_genes, len(self.samples), _preview(self.samples))
        )


class EmptySampleError(SizeFactorNormalisationError):
    """A sample yields nothing to estimate its size factor from."""

    def __init__(self, samples):
        self.samples = list(samples)
        super().__init__(
            "No data to estimate a size factor for samples: {}".format(
                _preview(self.samples)
            )
        )


class MissingFactorError(SizeFactorNormalisationError):
    """A sample has observations but no size factor."""

    def __init__(self, samples):
        self.samples = list(samples)
        super().__init__(
            "No size factor for samples: {}".format(_preview(self.samples))
        )
