"""Public and valuation tag namespaces of investments.

Labels are kept in insertion order; the first occurrence of a label wins
when a list repeats it. Matching is case-sensitive.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import Enum

from budget_review.config import DEFAULT_SETTINGS, ReviewSettings
from budget_review.errors import ValidationError
from budget_review.locks import InvestmentLocks
from budget_review.models import Budget, Investment

logger = logging.getLogger(__name__)


class TagNamespaceKind(str, Enum):
    """The two independent label collections of an investment."""

    PUBLIC = "public"
    VALUATION = "valuation"


def _namespace(namespace: TagNamespaceKind | str) -> TagNamespaceKind:
    try:
        return TagNamespaceKind(namespace)
    except ValueError:
        raise ValidationError(f"Unknown tag namespace: {namespace!r}") from None


def parse_labels(labels: str | Iterable[str], delimiter: str = ",") -> tuple[str, ...]:
    """Normalize a tag list.

    Parameters
    ----------
    labels : str | Iterable[str]
        Delimiter-separated string (``"Park, Trees"``) or individual labels.
    delimiter : str
        Separator used when ``labels`` is a string.

    Returns
    -------
    tuple[str, ...]
        Trimmed, non-empty, case-sensitively deduplicated labels in
        first-seen order.
    """
    if isinstance(labels, str):
        labels = labels.split(delimiter)
    return tuple(dict.fromkeys(label.strip() for label in labels if label.strip()))


class TagNamespace:
    """Replaces and reads the tag namespaces of investments.

    Parameters
    ----------
    locks : InvestmentLocks, optional
        Shared per-investment locks.
    settings : ReviewSettings, optional
        Provides the tag delimiter.
    """

    def __init__(self, locks: InvestmentLocks | None = None, settings: ReviewSettings = DEFAULT_SETTINGS) -> None:
        self.locks = locks or InvestmentLocks()
        self.settings = settings

    def replace_tags(
        self,
        investment: Investment,
        namespace: TagNamespaceKind | str,
        labels: str | Iterable[str],
    ) -> tuple[str, ...]:
        """Atomically replace one namespace, leaving the other untouched.

        Returns
        -------
        tuple[str, ...]
            The stored labels.
        """
        kind = _namespace(namespace)
        parsed = parse_labels(labels, self.settings.tag_delimiter)
        with self.locks.hold(investment.id):
            investment.budget.ensure_open(investment.id)
            investment.tags = replace(investment.tags, **{kind.value: parsed})
        logger.info("Investment %s: %s tags set to %s", investment.id, kind.value, list(parsed))
        return parsed

    def tags_of(self, investment: Investment, namespace: TagNamespaceKind | str) -> tuple[str, ...]:
        return getattr(investment.tags, _namespace(namespace).value)

    def distinct_valuation_tags(self, budget: Budget) -> list[str]:
        """Sorted union of the valuation tags of every investment in ``budget``."""
        labels: set[str] = set()
        for investment in budget.investments:
            labels.update(investment.tags.valuation)
        return sorted(labels)
