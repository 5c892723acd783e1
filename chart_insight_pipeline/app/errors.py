"""
Error taxonomy for the analysis pipeline.

Rationale:
- ValidationError is raised before any model call and is always the user's to fix.
- ContractViolation / UpstreamError come from the model client; whether they are
  fatal depends on the stage that hit them (see analyzer.py).
"""


class AnalysisError(Exception):
    """Base class for every error the pipeline knows how to shape into a result."""


class ValidationError(AnalysisError):
    """Uploaded payload is not an embedded image."""


class ContractViolation(AnalysisError):
    """Model output does not match the declared output schema."""


class UpstreamError(AnalysisError):
    """The model call itself failed (network, quota, blocked response)."""
