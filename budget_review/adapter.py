"""Pipeline components the web layer calls for the admin investment pages."""

import logging
from contextlib import ExitStack
from dataclasses import asdict
from typing import Any, Protocol

from budget_review.collaborators import InMemoryRepository, InvestmentRepository
from budget_review.config import DEFAULT_SETTINGS, ReviewSettings
from budget_review.errors import ValidationError
from budget_review.export import COLUMNS, ExportProjector
from budget_review.filters import FilterEngine, Selector, facet_options, filter_links, order_for_listing
from budget_review.lifecycle import LifecycleStateMachine
from budget_review.models import AllocateResult, Budget

logger = logging.getLogger(__name__)


class PipelineComponent(Protocol):
    """Structural interface for pipeline stage components."""

    def execute(self, event: dict) -> dict:
        """Process event and return result."""
        ...


def listing_summary(count: int) -> str:
    """Headline of the investment listing."""
    if count == 1:
        return "There is 1 investment"
    return f"There are {count} investments"


class InvestmentIndexComponent(PipelineComponent):
    """Filter, order and project a budget's investments.

    Serves both the on-screen listing and the bulk export through the same
    filtering and projection path; the export only adds the column header
    and the suggested file name.

    Parameters
    ----------
    lifecycle : LifecycleStateMachine
        State machine providing snapshots, assignments and tags.
    repository : InvestmentRepository, optional
        Loads the budget's investments. Defaults to :class:`InMemoryRepository`.
    settings : ReviewSettings, optional
        Default filter, sentinels and export file name.
    """

    def __init__(
        self,
        lifecycle: LifecycleStateMachine,
        repository: InvestmentRepository | None = None,
        settings: ReviewSettings = DEFAULT_SETTINGS,
    ) -> None:
        self.lifecycle = lifecycle
        self.repository = repository or InMemoryRepository()
        self.settings = settings
        self.engine = FilterEngine(lifecycle, default_filter=settings.default_filter)
        self.projector = ExportProjector(lifecycle.assignments, settings)

    def execute(self, event: dict) -> dict:
        """Run the query described by ``event``.

        Parameters
        ----------
        event : dict
            Must contain ``budget``. Optional ``params`` holds the web query
            parameters (``filter``, ``heading_id``, ``administrator_id``,
            ``valuator_id``, ``tag_name``); optional ``format`` is
            ``"html"`` (default) or ``"csv"``.

        Returns
        -------
        dict
            ``current_filter``, ``filters``, ``count``, ``summary``,
            ``records`` and ``facets``; CSV requests also carry ``columns``,
            ``rows`` and ``filename``.
        """
        budget: Budget = event["budget"]
        output_format = event.get("format", "html")
        if output_format not in ("html", "csv"):
            raise ValidationError(f"Unsupported format: {output_format!r}")

        selector = Selector.from_params(event.get("params") or {})
        current_filter = self.engine.resolve_filter(selector)
        candidates = order_for_listing(self.repository.load(budget))
        records = self.engine.apply(candidates, selector, project=self.projector.record)

        logger.info(
            "Budget %s listing: filter=%s, %d of %d investments",
            budget.id,
            current_filter,
            len(records),
            len(candidates),
        )

        result: dict[str, Any] = {
            "current_filter": current_filter,
            "filters": filter_links(current_filter),
            "count": len(records),
            "summary": listing_summary(len(records)),
            "records": [asdict(record) for record in records],
            "facets": facet_options(budget, self.lifecycle.assignments.directory, self.lifecycle.tags),
        }
        if output_format == "csv":
            result["columns"] = list(COLUMNS)
            result["rows"] = [record.as_row() for record in records]
            result["filename"] = self.settings.export_filename
        return result


class WinnerAllocationComponent(PipelineComponent):
    """Declare winners from the result of the external allocation stage.

    The allocation result is the complete winner set of the budget: listed
    investments become winners and every other investment stops being one.
    Nothing is applied unless every listed investment exists in the budget
    and is selected.

    The locks of all the budget's investments are taken in ascending id
    order and held while the selection is checked and the winner flags are
    written, so a concurrent ``unselect`` either completes before the check
    or waits until every flag is written.

    Parameters
    ----------
    lifecycle : LifecycleStateMachine
        Provides the shared per-investment locks.
    """

    def __init__(self, lifecycle: LifecycleStateMachine) -> None:
        self.lifecycle = lifecycle

    def execute(self, event: dict) -> dict:
        """Apply an ``AllocateResult`` dict to the budget in ``event``.

        Parameters
        ----------
        event : dict
            Must contain ``budget`` and ``allocation`` (``selected_initiatives``,
            ``predicted_returns``, ``budget_allocated``).

        Returns
        -------
        dict
            ``winners`` (sorted investment ids), ``total_allocated`` and the
            allocator's ``predicted_returns``, returned unchanged.

        Raises
        ------
        ValidationError
            If the allocation is malformed, names investments outside the
            budget, or names investments that are not selected.
        """
        budget: Budget = event["budget"]
        try:
            allocation = AllocateResult(**event["allocation"])
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Malformed allocation result: {exc}") from exc

        by_id = {str(investment.id): investment for investment in budget.investments}
        unknown = [sid for sid in allocation.selected_initiatives if sid not in by_id]
        if unknown:
            raise ValidationError(f"Allocation names unknown investments: {unknown}")
        winners = {sid: by_id[sid] for sid in allocation.selected_initiatives}

        with ExitStack() as stack:
            for investment in sorted(by_id.values(), key=lambda i: i.id):
                stack.enter_context(self.lifecycle.locks.hold(investment.id))
            not_selected = sorted(investment.id for investment in winners.values() if not investment.selected)
            if not_selected:
                logger.warning("Budget %s: allocation rejected, not selected: %s", budget.id, not_selected)
                raise ValidationError(f"Only selected investments can win: {not_selected}")
            for sid, investment in by_id.items():
                investment.winner = sid in winners

        winner_ids = sorted(investment.id for investment in winners.values())
        total = sum(allocation.budget_allocated.values())
        logger.info("Budget %s: %d winners declared, %s allocated", budget.id, len(winner_ids), total)
        return {
            "winners": winner_ids,
            "total_allocated": total,
            "predicted_returns": allocation.predicted_returns,
        }
