"""
Error taxonomy for fusion system construction.

All three concrete errors are raised synchronously while a fusion system is
being built; no partially built object is ever returned.
"""


class FusionSystemError(Exception):
    """Base class for every error raised by this package."""


class DomainError(FusionSystemError, ValueError):
    """A subgroup or prime is inconsistent with the declared p-group."""


class InvalidGeneratorError(FusionSystemError, ValueError):
    """A generator is not an injective homomorphism between subgroups of P."""


class ClosureOverflow(FusionSystemError, RuntimeError):
    """The closure engine exceeded its configured step or size ceiling."""

    def __init__(self, message: str, steps: int = 0, size: int = 0):
        super().__init__(message)
        self.steps = steps
        self.size = size
