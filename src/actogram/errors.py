"""
Exceptions raised by the actogram pipeline.

Every exception here is fatal to the current run. Per-day or per-metric data
sparsity is never raised; it is reported as NaN/NaT in the outputs.
"""


class ActogramError(RuntimeError):
    """Base class for irrecoverable pipeline failures."""


class ConfigurationError(ActogramError):
    """Raised when inputs or settings are structurally unusable."""


class DataQualityError(ActogramError):
    """Raised when the recording does not contain enough usable rows."""


class ParseError(DataQualityError):
    """Raised when too few timestamps survive normalization."""


class SamplingError(ActogramError):
    """Raised when no positive sampling interval can be inferred."""


class InsufficientDataError(ActogramError):
    """Raised when the regular grid does not hold a single complete day."""
