"""Composable query engine over investment snapshots."""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from budget_review.errors import ValidationError
from budget_review.filters._types import Selector, StatusPredicate
from budget_review.filters.facets import facet_predicates
from budget_review.filters.status import DEFAULT_FILTER, LIFECYCLE_FILTERS
from budget_review.lifecycle import LifecycleStateMachine
from budget_review.models import Investment

logger = logging.getLogger(__name__)

T = TypeVar("T")


def order_for_listing(investments: Iterable[Investment]) -> list[Investment]:
    """Typical listing order: most total votes first, ties by ascending id."""
    return sorted(investments, key=lambda i: (-i.total_votes, i.id))


class FilterEngine:
    """Maps a :class:`Selector` onto the matching subset of investments.

    Exactly one lifecycle filter and the selector's facets are combined by
    conjunction. Each investment is evaluated on one snapshot taken from the
    state machine, so a concurrent mutation is seen entirely or not at all.

    Parameters
    ----------
    lifecycle : LifecycleStateMachine
        Provides the per-investment status snapshots.
    default_filter : str
        Filter used when the selector names none.
    """

    def __init__(self, lifecycle: LifecycleStateMachine, default_filter: str = DEFAULT_FILTER) -> None:
        if default_filter not in LIFECYCLE_FILTERS:
            raise ValueError(f"Unknown default filter: {default_filter!r}")
        self.lifecycle = lifecycle
        self.default_filter = default_filter

    def resolve_filter(self, selector: Selector | None) -> str:
        """Name of the lifecycle filter ``selector`` applies."""
        name = selector.filter if selector is not None and selector.filter else self.default_filter
        if name not in LIFECYCLE_FILTERS:
            raise ValidationError(f"Unknown filter: {name!r}")
        return name

    def predicates(self, selector: Selector | None) -> list[StatusPredicate]:
        selector = selector or Selector()
        return [LIFECYCLE_FILTERS[self.resolve_filter(selector)], *facet_predicates(selector)]

    def apply(
        self,
        investments: Iterable[Investment],
        selector: Selector | None = None,
        project: Callable[[Investment], T] | None = None,
    ) -> list[Investment] | list[T]:
        """Return the investments matching ``selector``, in input order.

        Parameters
        ----------
        investments : Iterable[Investment]
            Candidate set, already in the caller's order.
        selector : Selector, optional
            Query to apply. Defaults to the default lifecycle filter with
            no facets.
        project : callable, optional
            Applied to each match while the investment's lock is still held
            from the snapshot the predicates saw, so the projected value
            describes the same state the filter matched.

        Returns
        -------
        list
            Matching investments, or their projections when ``project`` is
            given. Facet values naming no existing entity simply match
            nothing.

        Raises
        ------
        ValidationError
            If the selector names an unknown lifecycle filter.
        """
        predicates = self.predicates(selector)
        candidates = list(investments)
        matches = []
        for investment in candidates:
            with self.lifecycle.locks.hold(investment.id):
                status = self.lifecycle.status(investment)
                if all(predicate(status) for predicate in predicates):
                    matches.append(project(investment) if project else investment)
        logger.debug(
            "Filter %s matched %d of %d investments",
            self.resolve_filter(selector),
            len(matches),
            len(candidates),
        )
        return matches
