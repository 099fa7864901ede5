"""Contracts of the collaborators the review core talks to.

The core never performs I/O itself. It loads investments through an
:class:`InvestmentRepository`, validates reviewer identities against a
:class:`ReviewerDirectory` and signals completed valuations to a
:class:`Notifier`. In-memory implementations are provided for embedding and
tests.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from budget_review.models import Administrator, Budget, Feasibility, Investment, Valuator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValuationFinished:
    """Intent signal emitted once per successful valuation completion.

    Parameters
    ----------
    investment_id : int
        Investment whose valuation finished.
    feasibility : Feasibility
        Feasibility frozen by the completion.
    recipient : str
        Author reference to notify.
    """

    investment_id: int
    feasibility: Feasibility
    recipient: str

    @property
    def unfeasible(self) -> bool:
        """Whether the author should receive the unfeasibility report."""
        return self.feasibility is Feasibility.UNFEASIBLE


class Notifier(Protocol):
    """Receives valuation completion events. Delivery is its own concern."""

    def valuation_finished(self, event: ValuationFinished) -> None:
        """Dispatch the notification for a finished valuation."""
        ...


class LoggingNotifier:
    """Default notifier that records the intent in the log."""

    def valuation_finished(self, event: ValuationFinished) -> None:
        if event.unfeasible:
            logger.info(
                "Unfeasibility report for investment %s queued for %s",
                event.investment_id,
                event.recipient,
            )
        else:
            logger.info(
                "Valuation notice for investment %s queued for %s",
                event.investment_id,
                event.recipient,
            )


class ReviewerDirectory(Protocol):
    """Supplies the valid administrator and valuator identities."""

    def administrator(self, administrator_id: int) -> Administrator | None: ...

    def valuator(self, valuator_id: int) -> Valuator | None: ...

    def administrators(self) -> list[Administrator]: ...

    def valuators(self) -> list[Valuator]: ...


class InMemoryReviewerDirectory:
    """Reviewer directory backed by two dictionaries.

    Parameters
    ----------
    administrators : Iterable[Administrator]
        Known administrators.
    valuators : Iterable[Valuator]
        Known valuators.
    """

    def __init__(
        self,
        administrators: Iterable[Administrator] = (),
        valuators: Iterable[Valuator] = (),
    ) -> None:
        self._administrators = {a.id: a for a in administrators}
        self._valuators = {v.id: v for v in valuators}

    def add(self, reviewer: Administrator | Valuator) -> None:
        if isinstance(reviewer, Administrator):
            self._administrators[reviewer.id] = reviewer
        elif isinstance(reviewer, Valuator):
            self._valuators[reviewer.id] = reviewer
        else:
            raise TypeError(f"Unsupported reviewer type: {type(reviewer).__name__}")

    def administrator(self, administrator_id: int) -> Administrator | None:
        return self._administrators.get(administrator_id)

    def valuator(self, valuator_id: int) -> Valuator | None:
        return self._valuators.get(valuator_id)

    def administrators(self) -> list[Administrator]:
        return list(self._administrators.values())

    def valuators(self) -> list[Valuator]:
        return list(self._valuators.values())


class InvestmentRepository(Protocol):
    """Durable storage for investments.

    The core issues logical queries through ``load``. ``compare_and_swap`` is
    the hook for the persistence layer that writes investments back to
    durable storage after a core operation returned: in-process mutations
    are serialized by :class:`~budget_review.locks.InvestmentLocks` and never
    call it, while writes from separate processes are reconciled through
    :attr:`Investment.lock_version`.
    """

    def load(self, budget: Budget, predicate: Callable[[Investment], bool] | None = None) -> list[Investment]:
        """Return the budget's investments matching ``predicate``."""
        ...

    def compare_and_swap(self, investment: Investment, expected_version: int) -> bool:
        """Persist ``investment`` if the stored version still equals ``expected_version``."""
        ...


class InMemoryRepository:
    """Repository reading straight from :attr:`Budget.investments`.

    ``compare_and_swap`` tracks the last persisted ``lock_version`` per
    investment and bumps it on success.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._versions: dict[int, int] = {}

    def load(self, budget: Budget, predicate: Callable[[Investment], bool] | None = None) -> list[Investment]:
        investments = list(budget.investments)
        if predicate is None:
            return investments
        return [investment for investment in investments if predicate(investment)]

    def compare_and_swap(self, investment: Investment, expected_version: int) -> bool:
        with self._guard:
            stored = self._versions.get(investment.id, 0)
            if stored != expected_version:
                logger.warning(
                    "Stale write for investment %s: expected version %d, stored %d",
                    investment.id,
                    expected_version,
                    stored,
                )
                return False
            self._versions[investment.id] = stored + 1
            investment.lock_version = stored + 1
            return True
