"""Exception types raised inside the pipeline.

Public entry points catch these and return an OperationResult instead.
"""

from typing import Optional


class TGGError(Exception):
    """Base class for pipeline errors."""


class RecordValidationError(TGGError):
    """The canonical tournament record violates a structural invariant."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors) or 'Invalid tournament record')


class LayoutError(TGGError):
    """The player order cannot be partitioned for the requested size."""


class UpstreamError(TGGError):
    """A network fetch failed (host error, timeout or non-2xx status)."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)
