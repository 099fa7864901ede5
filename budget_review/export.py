"""Flat tabular projection of investments.

The same records back the admin listing and the bulk export; the export
transport only serializes what :meth:`ExportProjector.project` returns.
"""

import logging
from collections.abc import Iterable
from dataclasses import astuple, dataclass

from budget_review.assignments import AssignmentRegistry
from budget_review.config import DEFAULT_SETTINGS, ReviewSettings
from budget_review.models import Feasibility, Investment

logger = logging.getLogger(__name__)

COLUMNS: tuple[str, ...] = (
    "ID",
    "Title",
    "Supports",
    "Heading",
    "Administrator",
    "Valuators",
    "Feasibility",
    "Incompatible",
)

YES = "Yes"
NO = "No"


def feasibility_label(investment: Investment) -> str:
    """Display string of the feasibility; feasible ones carry their price."""
    if investment.feasibility is Feasibility.FEASIBLE:
        price = investment.formatted_price
        return f"Feasible ({price})" if price else "Feasible"
    if investment.feasibility is Feasibility.UNFEASIBLE:
        return "Unfeasible"
    return "Undecided"


@dataclass(frozen=True)
class InvestmentRecord:
    """One listing/export row.

    Parameters
    ----------
    id : int
        Investment identifier.
    title : str
        Investment title.
    total_votes : int
        Supports including physical ballots.
    heading_name : str
        Name of the heading.
    administrator : str
        Administrator name or the no-admin sentinel.
    valuators : str
        Comma-joined valuator names or the no-valuators sentinel.
    feasibility : str
        Feasibility display string.
    incompatible : str
        ``"Yes"`` or ``"No"``.
    """

    id: int
    title: str
    total_votes: int
    heading_name: str
    administrator: str
    valuators: str
    feasibility: str
    incompatible: str

    def as_row(self) -> tuple:
        """Values in :data:`COLUMNS` order."""
        return astuple(self)


class ExportProjector:
    """Projects investments onto :class:`InvestmentRecord` rows.

    Parameters
    ----------
    assignments : AssignmentRegistry
        Source of administrator and valuator names.
    settings : ReviewSettings, optional
        Provides the sentinel labels.
    """

    def __init__(self, assignments: AssignmentRegistry, settings: ReviewSettings = DEFAULT_SETTINGS) -> None:
        self.assignments = assignments
        self.settings = settings

    def record(self, investment: Investment) -> InvestmentRecord:
        """Project one investment from a consistent snapshot.

        Re-entrant with respect to the investment lock, so callers that
        already hold it (see :meth:`~budget_review.filters.FilterEngine.apply`)
        read the same state.
        """
        with self.assignments.locks.hold(investment.id):
            administrator = self.assignments.administrator_of(investment)
            valuator_names = self.assignments.valuator_names(investment)
            return InvestmentRecord(
                id=investment.id,
                title=investment.title,
                total_votes=investment.total_votes,
                heading_name=investment.heading.name,
                administrator=administrator.name if administrator else self.settings.no_admin_label,
                valuators=", ".join(valuator_names) if valuator_names else self.settings.no_valuators_label,
                feasibility=feasibility_label(investment),
                incompatible=YES if investment.incompatible else NO,
            )

    def project(self, investments: Iterable[Investment]) -> list[InvestmentRecord]:
        """Project ``investments`` preserving their order."""
        records = [self.record(investment) for investment in investments]
        logger.debug("Projected %d investment records", len(records))
        return records
