"""Data models for the budget investment review workflow."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from budget_review.errors import BudgetClosed


class Feasibility(str, Enum):
    """Reviewer determination of whether an investment can be executed."""

    UNDECIDED = "undecided"
    FEASIBLE = "feasible"
    UNFEASIBLE = "unfeasible"


def format_amount(amount: Decimal | int | None, currency_symbol: str) -> str | None:
    """Render a monetary amount without decimals, e.g. ``€1,234``.

    Parameters
    ----------
    amount : Decimal | int | None
        Currency-agnostic amount.
    currency_symbol : str
        Symbol prefixed to the amount.

    Returns
    -------
    str | None
        Formatted amount, or ``None`` when there is no amount.
    """
    if amount is None:
        return None
    return f"{currency_symbol}{Decimal(amount):,.0f}"


@dataclass(eq=False)
class Budget:
    """A participatory budget owning groups, headings and investments.

    Parameters
    ----------
    id : int
        Budget identifier.
    name : str
        Display name.
    finished : bool
        Set by the external closing process. While true the review core
        rejects every mutation of the budget's investments.
    currency_symbol : str
        Symbol used when rendering prices.
    """

    id: int
    name: str
    finished: bool = False
    currency_symbol: str = "€"
    groups: list["Group"] = field(default_factory=list, repr=False)
    investments: list["Investment"] = field(default_factory=list, repr=False)

    def add_investment(self, investment: "Investment") -> "Investment":
        """Register an investment whose heading belongs to this budget."""
        if investment.budget is not self:
            raise ValueError(f"Investment {investment.id} belongs to a different budget")
        if any(existing.id == investment.id for existing in self.investments):
            raise ValueError(f"Investment {investment.id} is already registered")
        self.investments.append(investment)
        return investment

    def ensure_open(self, investment_id: int | None = None) -> None:
        """Raise :class:`BudgetClosed` if the budget is finished."""
        if self.finished:
            raise BudgetClosed(f"Budget {self.id} is finished", investment_id)

    @property
    def headings(self) -> list["Heading"]:
        return [heading for group in self.groups for heading in group.headings]


@dataclass(eq=False)
class Group:
    """Grouping of headings inside a budget (e.g. "Parks")."""

    id: int
    name: str
    budget: Budget = field(repr=False)
    headings: list["Heading"] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not any(group is self for group in self.budget.groups):
            self.budget.groups.append(self)


@dataclass(eq=False)
class Heading:
    """Geographic or thematic bucket investments are filed under."""

    id: int
    name: str
    group: Group = field(repr=False)
    price: Decimal | None = None

    def __post_init__(self) -> None:
        if not any(heading is self for heading in self.group.headings):
            self.group.headings.append(self)

    @property
    def budget(self) -> Budget:
        return self.group.budget

    @property
    def label(self) -> str:
        """Facet option label, ``"<group>: <heading>"``."""
        return f"{self.group.name}: {self.name}"


@dataclass(frozen=True)
class Reviewer:
    """A user acting in a reviewing role.

    Parameters
    ----------
    id : int
        Reviewer identifier within its role.
    name : str
        User name.
    email : str
        Contact e-mail, shown next to the name on detail pages.
    description : str, optional
        Free-form description that replaces the name in listings.
    """

    id: int
    name: str
    email: str = ""
    description: str | None = None

    @property
    def description_or_name(self) -> str:
        return self.description or self.name

    @property
    def label(self) -> str:
        """Name with e-mail, e.g. ``"Ana (ana@admins.org)"``."""
        return f"{self.name} ({self.email})" if self.email else self.name


class Administrator(Reviewer):
    """Administrator responsible for an investment (at most one per investment)."""


class Valuator(Reviewer):
    """Valuator reviewing an investment (zero or more per investment)."""


@dataclass(frozen=True)
class TagSet:
    """Two disjoint label namespaces owned by one investment.

    Parameters
    ----------
    public : tuple[str, ...]
        Author-facing tags, in insertion order.
    valuation : tuple[str, ...]
        Reviewer-facing tags, in insertion order.
    """

    public: tuple[str, ...] = ()
    valuation: tuple[str, ...] = ()


@dataclass(eq=False)
class Investment:
    """A proposal submitted to a participatory budget.

    Flags are mutated only through :class:`~budget_review.lifecycle.LifecycleStateMachine`;
    ``winner`` comes from the external allocation process.

    Parameters
    ----------
    id : int
        Investment identifier.
    title : str
        Proposal title.
    heading : Heading
        Heading the investment is filed under; determines its budget.
    author : str
        Author reference, recipient of valuation notifications.
    description : str
        Proposal body.
    price : Decimal, optional
        Estimated cost.
    price_first_year : Decimal, optional
        Estimated first-year cost.
    feasibility : Feasibility
        Reviewer determination.
    unfeasibility_explanation : str, optional
        Required iff feasibility is unfeasible.
    valuation_finished : bool
        Once true, feasibility and its explanation are frozen.
    selected : bool
        Administrative selection for funding.
    winner : bool
        Final allocation outcome, supplied externally.
    incompatible : bool
        Marks a winner that cannot be executed together with others.
    vote_count : int
        Online supports, supplied externally.
    physical_votes : int
        Paper ballots added to the online supports.
    tags : TagSet
        Public and valuation tags.
    lock_version : int
        Version of the last persisted write. Maintained by the persistence
        layer through :meth:`InvestmentRepository.compare_and_swap`; the
        review operations never read or change it.
    """

    id: int
    title: str
    heading: Heading = field(repr=False)
    author: str = ""
    description: str = ""
    price: Decimal | None = None
    price_first_year: Decimal | None = None
    feasibility: Feasibility = Feasibility.UNDECIDED
    unfeasibility_explanation: str | None = None
    valuation_finished: bool = False
    selected: bool = False
    winner: bool = False
    incompatible: bool = False
    vote_count: int = 0
    physical_votes: int = 0
    tags: TagSet = field(default_factory=TagSet)
    lock_version: int = 0

    def __post_init__(self) -> None:
        """Validate the stored flags against the lifecycle invariants."""
        self.feasibility = Feasibility(self.feasibility)
        if self.vote_count < 0 or self.physical_votes < 0:
            raise ValueError("vote counts must be non-negative")
        if self.feasibility is Feasibility.UNFEASIBLE and not self.unfeasibility_explanation:
            raise ValueError("unfeasibility_explanation is required for unfeasible investments")
        if self.feasibility is not Feasibility.UNFEASIBLE:
            self.unfeasibility_explanation = None
        if self.selected and not (self.feasible and self.valuation_finished):
            raise ValueError("only feasible investments with finished valuation can be selected")
        if self.winner and not self.selected:
            raise ValueError("winners must be selected investments")

    @property
    def budget(self) -> Budget:
        return self.heading.budget

    @property
    def feasible(self) -> bool:
        return self.feasibility is Feasibility.FEASIBLE

    @property
    def unfeasible(self) -> bool:
        return self.feasibility is Feasibility.UNFEASIBLE

    @property
    def is_winner(self) -> bool:
        return self.winner

    @property
    def total_votes(self) -> int:
        return self.vote_count + self.physical_votes

    @property
    def formatted_price(self) -> str | None:
        return format_amount(self.price, self.budget.currency_symbol)


@dataclass
class AllocateResult:
    """Winning portfolio produced by the external allocation stage.

    Parameters
    ----------
    selected_initiatives : list[str]
        Investment IDs declared winners.
    predicted_returns : dict[str, float]
        Allocator-specific score per winner. Opaque to the review workflow:
        only its keys are checked, and the values are handed back to the
        caller unchanged.
    budget_allocated : dict[str, float]
        Budget allocated to each winner.
    """

    selected_initiatives: list[str]
    predicted_returns: dict[str, float]
    budget_allocated: dict[str, float]

    def __post_init__(self) -> None:
        """Validate that return and budget dicts are consistent with selected initiatives."""
        self.selected_initiatives = [str(sid) for sid in self.selected_initiatives]
        self.predicted_returns = {str(sid): value for sid, value in self.predicted_returns.items()}
        self.budget_allocated = {str(sid): value for sid, value in self.budget_allocated.items()}
        selected = set(self.selected_initiatives)
        if set(self.predicted_returns) != selected:
            raise ValueError("predicted_returns keys must match selected_initiatives")
        if set(self.budget_allocated) != selected:
            raise ValueError("budget_allocated keys must match selected_initiatives")
