"""
Domain exceptions shared by the analysis pipelines.

Routes translate these into the {"success": false, "error": ...} envelope.
"""


class InsightsError(Exception):
    """Base class for every failure the pipelines raise on purpose."""

    status_code: int = 500


class ValidationError(InsightsError):
    """The request body is not JSON or does not match the expected shape."""

    status_code = 400


class ConfigurationError(InsightsError):
    """A required credential for the narrative service is missing."""


class UpstreamAnalysisError(InsightsError):
    """The external text-generation call failed or returned an unusable body."""
