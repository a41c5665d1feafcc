"""Project-wide exception types."""

class SummaryFitError(Exception):
    """Base exception for all engine errors."""


class InputValidityError(SummaryFitError):
    """Raised when an observation is malformed or too asymmetric to fit."""


class ComputationFailureError(SummaryFitError):
    """Raised when no candidate family survives the selection cascade."""


class EstimatorError(SummaryFitError):
    """Raised when a point-estimation call fails or has no estimator."""


class EstimatorLoadError(EstimatorError):
    """Raised when estimator artifacts cannot all be loaded at startup."""


class ConfigError(SummaryFitError):
    """Raised when configuration is missing or malformed."""


class ConfigValidationError(ConfigError):
    """Raised when validation fails for supplied configuration."""
