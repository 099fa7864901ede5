"""Named lifecycle filters.

Each filter is an independent pure predicate over
:class:`~budget_review.lifecycle.InvestmentStatus`. The enumeration order of
:data:`LIFECYCLE_FILTERS` is significant: the first filter other than
``"all"`` is the default.
"""

from budget_review.filters._types import StatusPredicate
from budget_review.lifecycle import InvestmentStatus


def _all(status: InvestmentStatus) -> bool:
    return True


def _without_admin(status: InvestmentStatus) -> bool:
    return status.without_admin


def _managed(status: InvestmentStatus) -> bool:
    return status.managed


def _valuating(status: InvestmentStatus) -> bool:
    return status.valuating


def _valuation_open(status: InvestmentStatus) -> bool:
    return status.valuation_open


def _valuation_finished(status: InvestmentStatus) -> bool:
    return status.valuation_finished


def _valuation_finished_feasible(status: InvestmentStatus) -> bool:
    return status.valuation_finished and status.feasible


def _selected(status: InvestmentStatus) -> bool:
    return status.selected


def _winners(status: InvestmentStatus) -> bool:
    return status.winner


LIFECYCLE_FILTERS: dict[str, StatusPredicate] = {
    "all": _all,
    "without_admin": _without_admin,
    "managed": _managed,
    "valuating": _valuating,
    "valuation_open": _valuation_open,
    "valuation_finished": _valuation_finished,
    "valuation_finished_feasible": _valuation_finished_feasible,
    "selected": _selected,
    "winners": _winners,
}

DEFAULT_FILTER = next(name for name in LIFECYCLE_FILTERS if name != "all")

FILTER_LABELS: dict[str, str] = {
    "valuation_open": "Open",
    "without_admin": "Without assigned admin",
    "managed": "Managed",
    "valuating": "Under valuation",
    "valuation_finished": "Valuation finished",
    "valuation_finished_feasible": "Val. fin. Feasible",
    "selected": "Selected",
    "winners": "Winners",
    "all": "All",
}


def filter_links(current: str) -> list[dict[str, object]]:
    """Filter navigation entries in display order, marking ``current``.

    Parameters
    ----------
    current : str
        Name of the filter in effect; it is rendered as plain text rather
        than a link.

    Returns
    -------
    list[dict[str, object]]
        ``{"filter", "label", "current"}`` entries.
    """
    return [{"filter": name, "label": label, "current": name == current} for name, label in FILTER_LABELS.items()]
