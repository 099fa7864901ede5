"""Error kinds raised by the review core.

Every rejected operation raises one of these and leaves the investment,
its assignments and its tags exactly as they were before the call.
"""


class ReviewError(Exception):
    """Base class for rejected review operations.

    Parameters
    ----------
    message : str
        Human readable reason.
    investment_id : int, optional
        Investment the operation targeted.
    """

    def __init__(self, message: str, investment_id: int | None = None) -> None:
        super().__init__(message)
        self.investment_id = investment_id


class ValidationError(ReviewError, ValueError):
    """Malformed input: missing required explanation, unknown referenced entity."""


class LockedForValuation(ReviewError):
    """Feasibility change or repeated completion after valuation finished."""


class IneligibleForSelection(ReviewError):
    """Selection change outside {feasible, valuation finished, budget open}."""


class WinnerLocked(ReviewError):
    """Selection change attempted on a declared winner."""


class BudgetClosed(ReviewError):
    """Mutation attempted on an investment of a finished budget."""
