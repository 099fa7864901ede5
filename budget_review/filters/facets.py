"""Single-dimension facets and their option lists."""

from budget_review.collaborators import ReviewerDirectory
from budget_review.filters._types import ALL, Selector, StatusPredicate
from budget_review.lifecycle import InvestmentStatus
from budget_review.models import Budget
from budget_review.tags import TagNamespace


def heading_facet(heading_id: int | str) -> StatusPredicate:
    def predicate(status: InvestmentStatus) -> bool:
        return status.heading_id == heading_id

    return predicate


def administrator_facet(administrator_id: int | str) -> StatusPredicate:
    def predicate(status: InvestmentStatus) -> bool:
        return status.administrator_id == administrator_id

    return predicate


def valuator_facet(valuator_id: int | str) -> StatusPredicate:
    def predicate(status: InvestmentStatus) -> bool:
        return valuator_id in status.valuator_ids

    return predicate


def tag_facet(tag_name: str) -> StatusPredicate:
    def predicate(status: InvestmentStatus) -> bool:
        return tag_name in status.public_tags

    return predicate


def facet_predicates(selector: Selector) -> list[StatusPredicate]:
    """Predicates for every facet set on ``selector``, at most one per type."""
    predicates = []
    if selector.heading_id is not None:
        predicates.append(heading_facet(selector.heading_id))
    if selector.administrator_id is not None:
        predicates.append(administrator_facet(selector.administrator_id))
    if selector.valuator_id is not None:
        predicates.append(valuator_facet(selector.valuator_id))
    if selector.tag_name is not None:
        predicates.append(tag_facet(selector.tag_name))
    return predicates


def facet_options(budget: Budget, directory: ReviewerDirectory, tags: TagNamespace) -> dict[str, list[tuple[str, str]]]:
    """Option lists for the facet selects of the index page.

    Parameters
    ----------
    budget : Budget
        Budget whose headings and valuation tags are offered.
    directory : ReviewerDirectory
        Source of administrators and valuators.
    tags : TagNamespace
        Provides the distinct valuation tags of the budget.

    Returns
    -------
    dict[str, list[tuple[str, str]]]
        ``(value, label)`` pairs per facet parameter, each list starting with
        its ``"all"`` entry.
    """
    return {
        "heading_id": [(ALL, "All headings")] + [(str(h.id), h.label) for h in budget.headings],
        "administrator_id": [(ALL, "All administrators")]
        + [(str(a.id), a.name) for a in sorted(directory.administrators(), key=lambda a: a.name)],
        "valuator_id": [(ALL, "All valuators")]
        + [
            (str(v.id), v.description_or_name)
            for v in sorted(directory.valuators(), key=lambda v: v.description_or_name)
        ],
        "tag_name": [(ALL, "All tags")] + [(label, label) for label in tags.distinct_valuation_tags(budget)],
    }
