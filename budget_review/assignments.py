"""Administrator and valuator assignments of investments."""

import logging
from collections.abc import Iterable

from budget_review.collaborators import ReviewerDirectory
from budget_review.errors import ValidationError
from budget_review.locks import InvestmentLocks
from budget_review.models import Administrator, Investment, Valuator

logger = logging.getLogger(__name__)


class AssignmentRegistry:
    """Owns the investment-to-reviewer relation.

    An investment has at most one administrator and any number of distinct
    valuators. Identities are validated against the reviewer directory.

    Parameters
    ----------
    directory : ReviewerDirectory
        Source of valid administrator and valuator identities.
    locks : InvestmentLocks, optional
        Shared per-investment locks. A private instance is created if omitted.
    """

    def __init__(self, directory: ReviewerDirectory, locks: InvestmentLocks | None = None) -> None:
        self.directory = directory
        self.locks = locks or InvestmentLocks()
        self._administrators: dict[int, Administrator] = {}
        self._valuators: dict[int, frozenset[Valuator]] = {}

    def _resolve_administrator(self, administrator: Administrator | int, investment_id: int) -> Administrator:
        administrator_id = administrator.id if isinstance(administrator, Administrator) else administrator
        known = self.directory.administrator(administrator_id)
        if known is None:
            raise ValidationError(f"Unknown administrator: {administrator_id}", investment_id)
        return known

    def _resolve_valuator(self, valuator: Valuator | int, investment_id: int) -> Valuator:
        valuator_id = valuator.id if isinstance(valuator, Valuator) else valuator
        known = self.directory.valuator(valuator_id)
        if known is None:
            raise ValidationError(f"Unknown valuator: {valuator_id}", investment_id)
        return known

    def assign_administrator(self, investment: Investment, administrator: Administrator | int | None) -> None:
        """Replace the investment's administrator; ``None`` unassigns."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if administrator is None:
                self._administrators.pop(investment.id, None)
                logger.info("Investment %s: administrator unassigned", investment.id)
                return
            resolved = self._resolve_administrator(administrator, investment.id)
            self._administrators[investment.id] = resolved
            logger.info("Investment %s: administrator %s assigned", investment.id, resolved.id)

    def set_valuators(self, investment: Investment, valuators: Iterable[Valuator | int]) -> None:
        """Replace the whole valuator set. Nothing changes if any id is unknown."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            resolved = frozenset(self._resolve_valuator(v, investment.id) for v in valuators)
            self._store_valuators(investment, resolved)

    def add_valuator(self, investment: Investment, valuator: Valuator | int) -> None:
        """Add one valuator; adding an assigned valuator is a no-op."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            resolved = self._resolve_valuator(valuator, investment.id)
            self._store_valuators(investment, self.valuators_of(investment) | {resolved})

    def remove_valuator(self, investment: Investment, valuator: Valuator | int) -> None:
        """Remove one valuator; removing an unassigned valuator is a no-op."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            resolved = self._resolve_valuator(valuator, investment.id)
            self._store_valuators(investment, self.valuators_of(investment) - {resolved})

    def _store_valuators(self, investment: Investment, valuators: frozenset[Valuator]) -> None:
        if valuators:
            self._valuators[investment.id] = valuators
        else:
            self._valuators.pop(investment.id, None)
        logger.info(
            "Investment %s: valuators set to %s",
            investment.id,
            sorted(v.id for v in valuators),
        )

    def administrator_of(self, investment: Investment) -> Administrator | None:
        return self._administrators.get(investment.id)

    def valuators_of(self, investment: Investment) -> frozenset[Valuator]:
        return self._valuators.get(investment.id, frozenset())

    def valuator_names(self, investment: Investment) -> list[str]:
        """Listing names of the assigned valuators, alphabetically."""
        return sorted(v.description_or_name for v in self.valuators_of(investment))
