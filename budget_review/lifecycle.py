"""Lifecycle state machine of budget investments.

Feasibility, valuation completion and selection are stored flags; the
lifecycle state and the filter-facing status are derived from them plus
the assignment state. Every transition is serialized per investment and
validates completely before touching any flag.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from budget_review.assignments import AssignmentRegistry
from budget_review.collaborators import LoggingNotifier, Notifier, ValuationFinished
from budget_review.errors import IneligibleForSelection, LockedForValuation, ValidationError, WinnerLocked
from budget_review.models import Feasibility, Heading, Investment
from budget_review.tags import TagNamespace

logger = logging.getLogger(__name__)

VALUATION_CONFIRMATION = (
    "Are you sure you want to mark this report as completed? If you do it, it can no longer be modified."
)
UNFEASIBILITY_NOTICE = "An email will be sent immediately to the author of the project with the report of unfeasibility."


class LifecycleState(str, Enum):
    """Derived lifecycle state of an investment."""

    UNDECIDED = "undecided"
    FEASIBLE = "feasible"
    UNFEASIBLE = "unfeasible"
    FEASIBLE_VALUATION_FINISHED = "feasible_valuation_finished"
    SELECTED = "selected"
    WINNER = "winner"


class Action(str, Enum):
    """Administrative actions offered for an investment."""

    EDIT = "edit"
    EDIT_CLASSIFICATION = "edit_classification"
    EDIT_DOSSIER = "edit_dossier"
    SELECT = "select"
    UNSELECT = "unselect"
    MANAGE_MILESTONES = "manage_milestones"


@dataclass(frozen=True)
class InvestmentStatus:
    """Consistent read snapshot of one investment.

    Parameters
    ----------
    investment_id : int
        Investment the snapshot was taken from.
    heading_id : int
        Heading at snapshot time.
    feasibility : Feasibility
        Stored feasibility.
    valuation_finished : bool
        Stored completion flag.
    selected : bool
        Stored selection flag.
    winner : bool
        Externally declared winner flag.
    administrator_id : int | None
        Assigned administrator, if any.
    valuator_ids : frozenset[int]
        Assigned valuators.
    public_tags : frozenset[str]
        Public tag labels.
    """

    investment_id: int
    heading_id: int
    feasibility: Feasibility
    valuation_finished: bool
    selected: bool
    winner: bool
    administrator_id: int | None
    valuator_ids: frozenset[int]
    public_tags: frozenset[str]

    @property
    def managed(self) -> bool:
        return self.administrator_id is not None or bool(self.valuator_ids)

    @property
    def without_admin(self) -> bool:
        return self.administrator_id is None

    @property
    def valuation_open(self) -> bool:
        return not self.valuation_finished

    @property
    def valuating(self) -> bool:
        return self.valuation_open and bool(self.valuator_ids)

    @property
    def feasible(self) -> bool:
        return self.feasibility is Feasibility.FEASIBLE

    @property
    def state(self) -> LifecycleState:
        if self.winner:
            return LifecycleState.WINNER
        if self.selected:
            return LifecycleState.SELECTED
        if self.feasibility is Feasibility.UNFEASIBLE:
            return LifecycleState.UNFEASIBLE
        if self.feasible:
            return LifecycleState.FEASIBLE_VALUATION_FINISHED if self.valuation_finished else LifecycleState.FEASIBLE
        return LifecycleState.UNDECIDED


def _parse_feasibility(value: Feasibility | str, investment_id: int) -> Feasibility:
    try:
        return Feasibility(value)
    except ValueError:
        raise ValidationError(f"Unknown feasibility: {value!r}", investment_id) from None


def _parse_amount(value: Decimal | int | str | None, name: str, investment_id: int) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(value)
    except ArithmeticError:
        raise ValidationError(f"{name} is not a number", investment_id) from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{name} must be a non-negative amount", investment_id)
    return amount


class LifecycleStateMachine:
    """Legal transitions of an investment's review flags.

    Parameters
    ----------
    assignments : AssignmentRegistry
        Reviewer assignments; its locks are shared by this machine.
    tags : TagNamespace, optional
        Tag namespaces read for snapshots. Defaults to one sharing the
        registry's locks.
    notifier : Notifier, optional
        Receives :class:`ValuationFinished` events. Defaults to
        :class:`LoggingNotifier`.
    """

    def __init__(
        self,
        assignments: AssignmentRegistry,
        tags: TagNamespace | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.assignments = assignments
        self.locks = assignments.locks
        self.tags = tags or TagNamespace(locks=self.locks)
        self.notifier = notifier or LoggingNotifier()

    # -- reads -----------------------------------------------------------------

    def status(self, investment: Investment) -> InvestmentStatus:
        """Snapshot flags, assignments and public tags under the investment's lock."""
        with self.locks.hold(investment.id):
            administrator = self.assignments.administrator_of(investment)
            return InvestmentStatus(
                investment_id=investment.id,
                heading_id=investment.heading.id,
                feasibility=investment.feasibility,
                valuation_finished=investment.valuation_finished,
                selected=investment.selected,
                winner=investment.winner,
                administrator_id=administrator.id if administrator else None,
                valuator_ids=frozenset(v.id for v in self.assignments.valuators_of(investment)),
                public_tags=frozenset(investment.tags.public),
            )

    def state(self, investment: Investment) -> LifecycleState:
        return self.status(investment).state

    def valuation_tags(self, investment: Investment) -> tuple[str, ...]:
        return self.tags.tags_of(investment, "valuation")

    def available_actions(self, investment: Investment) -> frozenset[Action]:
        """Actions the admin interface may offer for ``investment`` right now.

        A finished budget only allows milestone management. Selection
        buttons follow the same rules as :meth:`select` and
        :meth:`unselect`.
        """
        with self.locks.hold(investment.id):
            if investment.budget.finished:
                return frozenset({Action.MANAGE_MILESTONES})
            actions = {Action.EDIT, Action.EDIT_CLASSIFICATION, Action.MANAGE_MILESTONES}
            if not investment.valuation_finished:
                actions.add(Action.EDIT_DOSSIER)
            if not investment.winner:
                if investment.selected:
                    actions.add(Action.UNSELECT)
                elif investment.feasible and investment.valuation_finished:
                    actions.add(Action.SELECT)
            return frozenset(actions)

    @staticmethod
    def valuation_confirmation(investment: Investment, feasibility: Feasibility | str | None = None) -> str:
        """Prompt shown before finishing valuation.

        Parameters
        ----------
        investment : Investment
            Investment being completed.
        feasibility : Feasibility | str, optional
            Feasibility pending in the dossier form, if it differs from the
            stored one.

        Returns
        -------
        str
            Confirmation text, mentioning the author e-mail when the
            investment will be reported unfeasible.
        """
        pending = _parse_feasibility(feasibility or investment.feasibility, investment.id)
        if pending is Feasibility.UNFEASIBLE:
            return f"{VALUATION_CONFIRMATION}\n{UNFEASIBILITY_NOTICE}"
        return VALUATION_CONFIRMATION

    # -- transitions -------------------------------------------------------------

    def set_feasibility(
        self,
        investment: Investment,
        value: Feasibility | str,
        explanation: str | None = None,
    ) -> InvestmentStatus:
        """Record the reviewers' feasibility determination.

        Raises
        ------
        BudgetClosed
            If the budget is finished.
        LockedForValuation
            If valuation already finished.
        ValidationError
            If ``value`` is unknown or an unfeasible verdict lacks an
            explanation.
        """
        feasibility = _parse_feasibility(value, investment.id)
        explanation = (explanation or "").strip()
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if investment.valuation_finished:
                raise LockedForValuation(
                    f"Valuation of investment {investment.id} is finished; feasibility can no longer change",
                    investment.id,
                )
            if feasibility is Feasibility.UNFEASIBLE and not explanation:
                raise ValidationError("An explanation is required for unfeasible investments", investment.id)
            investment.feasibility = feasibility
            investment.unfeasibility_explanation = explanation if feasibility is Feasibility.UNFEASIBLE else None
            logger.info("Investment %s: feasibility set to %s", investment.id, feasibility.value)
            return self.status(investment)

    def set_prices(
        self,
        investment: Investment,
        price: Decimal | int | str | None,
        price_first_year: Decimal | int | str | None = None,
    ) -> None:
        """Record the dossier cost estimates while valuation is open."""
        parsed_price = _parse_amount(price, "price", investment.id)
        parsed_first_year = _parse_amount(price_first_year, "price_first_year", investment.id)
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if investment.valuation_finished:
                raise LockedForValuation(
                    f"Valuation of investment {investment.id} is finished; prices can no longer change",
                    investment.id,
                )
            investment.price = parsed_price
            investment.price_first_year = parsed_first_year
        logger.info("Investment %s: prices set to %s / %s", investment.id, parsed_price, parsed_first_year)

    def finish_valuation(self, investment: Investment) -> InvestmentStatus:
        """Mark the valuation complete and signal the author notification.

        Completion is irreversible and not idempotent: a second call raises
        :class:`LockedForValuation`.
        """
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if investment.valuation_finished:
                raise LockedForValuation(f"Valuation of investment {investment.id} is already finished", investment.id)
            investment.valuation_finished = True
            event = ValuationFinished(
                investment_id=investment.id,
                feasibility=investment.feasibility,
                recipient=investment.author,
            )
            status = self.status(investment)
        logger.info("Investment %s: valuation finished (%s)", investment.id, event.feasibility.value)
        try:
            self.notifier.valuation_finished(event)
        except Exception:
            logger.exception("Notifier failed for finished valuation of investment %s", investment.id)
        return status

    def select(self, investment: Investment) -> InvestmentStatus:
        """Select a feasible, fully valuated investment. Idempotent."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if investment.winner:
                raise WinnerLocked(f"Investment {investment.id} is a declared winner", investment.id)
            if not investment.selected:
                if not (investment.feasible and investment.valuation_finished):
                    raise IneligibleForSelection(
                        f"Investment {investment.id} must be feasible with finished valuation to be selected",
                        investment.id,
                    )
                investment.selected = True
                logger.info("Investment %s: selected", investment.id)
            return self.status(investment)

    def unselect(self, investment: Investment) -> InvestmentStatus:
        """Withdraw the selection of a selected, non-winning investment."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if investment.winner:
                raise WinnerLocked(f"Investment {investment.id} is a declared winner", investment.id)
            if not investment.selected:
                raise WinnerLocked(f"Investment {investment.id} is not selected", investment.id)
            investment.selected = False
            logger.info("Investment %s: unselected", investment.id)
            return self.status(investment)

    def update_details(
        self,
        investment: Investment,
        title: str | None = None,
        description: str | None = None,
        heading: Heading | None = None,
    ) -> None:
        """Edit title, description or heading of an investment."""
        if title is not None and not title.strip():
            raise ValidationError("title can't be blank", investment.id)
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if heading is not None and heading.budget is not investment.budget:
                raise ValidationError(f"Heading {heading.id} belongs to another budget", investment.id)
            if title is not None:
                investment.title = title.strip()
            if description is not None:
                investment.description = description
            if heading is not None:
                investment.heading = heading
        logger.info("Investment %s: details updated", investment.id)

    def set_compatibility(self, investment: Investment, incompatible: bool) -> None:
        """Mark a winner incompatible, or clear an existing incompatibility."""
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            if not (investment.winner or investment.incompatible):
                raise ValidationError(
                    f"Compatibility of investment {investment.id} can only be changed for winners",
                    investment.id,
                )
            investment.incompatible = bool(incompatible)
        logger.info("Investment %s: incompatible=%s", investment.id, bool(incompatible))
