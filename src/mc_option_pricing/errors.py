"""
Error taxonomy for batch option pricing.

Every failure is either a rejected input (raised before simulation starts)
or a fatal abort of the whole batch (raised after every worker has joined).
Nothing is swallowed; messages are prefixed with ``CRITICAL:``.

- InputValidationError: malformed contract (non-positive S/K, empty id, ...)
- DegenerateParameterError: sigma == 0 or T == 0 reaching a pricer
- WorkerFailureError: any exception inside a parallel worker
"""

from typing import Any, Optional


class PricingError(Exception):
    """Base class for all pricing failures."""

    pass


class InputValidationError(PricingError, ValueError):
    """Raised when a contract or input record fails validation."""

    pass


class DegenerateParameterError(PricingError, ValueError):
    """
    Raised when sigma == 0 or T == 0 reaches the analytic pricer or an engine.

    Both make sigma*sqrt(T) zero, so d1 would divide by zero and the
    simulation collapses to a single deterministic path.
    """

    pass


class WorkerFailureError(PricingError):
    """
    Raised when a parallel worker fails.

    The batch is aborted as a whole; the original exception is chained
    as ``__cause__``.

    Attributes
    ----------
    partition_index : int
        Index of the failing worker's partition
    partition : Any
        The WorkPartition the worker owned
    """

    def __init__(self, message: str, partition_index: int, partition: Optional[Any] = None):
        super().__init__(message)
        self.partition_index = partition_index
        self.partition = partition
