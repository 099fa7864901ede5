"""Type definitions for selectors and predicates."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from budget_review.lifecycle import InvestmentStatus

ALL = "all"


class StatusPredicate(Protocol):
    """Pure predicate over an investment snapshot."""

    def __call__(self, status: InvestmentStatus) -> bool: ...


def _facet_value(raw: Any) -> int | str | None:
    """Normalize a facet parameter; ``None``, ``""`` and ``"all"`` mean no facet."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    value = str(raw).strip()
    if not value or value == ALL:
        return None
    return int(value) if value.isdecimal() and value.isascii() else value


@dataclass(frozen=True)
class Selector:
    """One query: a lifecycle filter plus at most one value per facet.

    Parameters
    ----------
    filter : str, optional
        Lifecycle filter name. ``None`` selects the default filter.
    heading_id : int, optional
        Exact heading match.
    administrator_id : int, optional
        Exact administrator match.
    valuator_id : int, optional
        Valuator membership match.
    tag_name : str, optional
        Case-sensitive public tag match.
    """

    filter: str | None = None
    heading_id: int | str | None = None
    administrator_id: int | str | None = None
    valuator_id: int | str | None = None
    tag_name: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Selector":
        """Build a selector from web query parameters.

        Parameters
        ----------
        params : Mapping[str, Any]
            May contain ``filter``, ``heading_id``, ``administrator_id``,
            ``valuator_id`` and ``tag_name``. Missing, empty and ``"all"``
            facet values are ignored; ASCII digit strings become integer ids;
            any other value is kept as a string and matches nothing.

        Returns
        -------
        Selector
        """
        raw_filter = params.get("filter")
        filter_name = str(raw_filter).strip() if raw_filter is not None else ""
        tag_name = params.get("tag_name")
        tag_name = tag_name.strip() if isinstance(tag_name, str) else tag_name
        return cls(
            filter=filter_name or None,
            heading_id=_facet_value(params.get("heading_id")),
            administrator_id=_facet_value(params.get("administrator_id")),
            valuator_id=_facet_value(params.get("valuator_id")),
            tag_name=None if not tag_name or tag_name == ALL else tag_name,
        )
