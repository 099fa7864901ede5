"""Investment filters.

Provides the named lifecycle filters, the heading/administrator/valuator/tag
facets, the :class:`Selector` query type and the :class:`FilterEngine` that
combines them by conjunction.

Convenience function ``apply_filter`` builds an engine for a state machine
and applies a selector given as web parameters in a single call.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from budget_review.filters._types import ALL, Selector, StatusPredicate
from budget_review.filters.engine import FilterEngine, order_for_listing
from budget_review.filters.facets import (
    administrator_facet,
    facet_options,
    facet_predicates,
    heading_facet,
    tag_facet,
    valuator_facet,
)
from budget_review.filters.status import DEFAULT_FILTER, FILTER_LABELS, LIFECYCLE_FILTERS, filter_links
from budget_review.lifecycle import LifecycleStateMachine
from budget_review.models import Investment

__all__ = [
    "ALL",
    "DEFAULT_FILTER",
    "FILTER_LABELS",
    "FilterEngine",
    "LIFECYCLE_FILTERS",
    "Selector",
    "StatusPredicate",
    "administrator_facet",
    "apply_filter",
    "facet_options",
    "facet_predicates",
    "filter_links",
    "heading_facet",
    "order_for_listing",
    "tag_facet",
    "valuator_facet",
]


def apply_filter(
    lifecycle: LifecycleStateMachine,
    investments: Iterable[Investment],
    params: Mapping[str, Any] | None = None,
) -> list[Investment]:
    """Parse web parameters and filter ``investments`` in one call.

    Parameters
    ----------
    lifecycle : LifecycleStateMachine
        Source of status snapshots.
    investments : Iterable[Investment]
        Candidate set in the caller's order.
    params : Mapping[str, Any], optional
        Query parameters as accepted by :meth:`Selector.from_params`.

    Returns
    -------
    list[Investment]
    """
    return FilterEngine(lifecycle).apply(investments, Selector.from_params(params or {}))
