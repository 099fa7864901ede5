"""Review workflow and query engine for participatory budget investments."""

from budget_review.adapter import InvestmentIndexComponent, WinnerAllocationComponent
from budget_review.assignments import AssignmentRegistry
from budget_review.collaborators import (
    InMemoryRepository,
    InMemoryReviewerDirectory,
    LoggingNotifier,
    ValuationFinished,
)
from budget_review.config import ReviewSettings
from budget_review.errors import (
    BudgetClosed,
    IneligibleForSelection,
    LockedForValuation,
    ReviewError,
    ValidationError,
    WinnerLocked,
)
from budget_review.export import ExportProjector, InvestmentRecord
from budget_review.filters import FilterEngine, Selector
from budget_review.lifecycle import Action, InvestmentStatus, LifecycleState, LifecycleStateMachine
from budget_review.models import (
    Administrator,
    AllocateResult,
    Budget,
    Feasibility,
    Group,
    Heading,
    Investment,
    TagSet,
    Valuator,
)
from budget_review.tags import TagNamespace, TagNamespaceKind

__all__ = [
    "Action",
    "Administrator",
    "AllocateResult",
    "AssignmentRegistry",
    "Budget",
    "BudgetClosed",
    "ExportProjector",
    "Feasibility",
    "FilterEngine",
    "Group",
    "Heading",
    "InMemoryRepository",
    "InMemoryReviewerDirectory",
    "IneligibleForSelection",
    "Investment",
    "InvestmentIndexComponent",
    "InvestmentRecord",
    "InvestmentStatus",
    "LifecycleState",
    "LifecycleStateMachine",
    "LockedForValuation",
    "LoggingNotifier",
    "ReviewError",
    "ReviewSettings",
    "Selector",
    "TagNamespace",
    "TagNamespaceKind",
    "TagSet",
    "ValidationError",
    "ValuationFinished",
    "Valuator",
    "WinnerAllocationComponent",
    "WinnerLocked",
]
