# custodian/errors.py
"""
Exceptions raised while loading and applying manifests.

A missing Custodianfile and an import naming an unknown tag are not
errors: the first loads as ``None``, the second is skipped.
"""

from typing import Any, Optional


class CustodianError(Exception):
    """Base class for all custodian failures."""


class InvalidManifest(CustodianError):
    """Raised when a Custodianfile cannot be turned into a Manifest."""
    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Invalid Custodianfile at '{root}': {reason}")


class UnknownStepType(CustodianError):
    """Raised when a step declaration names a type we do not know."""
    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(f"Unknown command {raw!r}")


class InvalidStep(CustodianError):
    """Raised for a malformed step, or one the executor cannot apply."""
    def __init__(self, step: Any, reason: Optional[str] = None):
        self.step = step
        self.reason = reason
        message = f"Invalid step {step!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
