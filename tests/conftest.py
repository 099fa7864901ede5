"""Shared fixtures for budget review tests."""

import itertools

import pytest

from budget_review import (
    Administrator,
    AssignmentRegistry,
    Budget,
    FilterEngine,
    Group,
    Heading,
    InMemoryReviewerDirectory,
    Investment,
    LifecycleStateMachine,
    TagNamespace,
    Valuator,
)


class RecordingNotifier:
    """Notifier collecting every event it receives."""

    def __init__(self):
        self.events = []

    def valuation_finished(self, event):
        self.events.append(event)


@pytest.fixture()
def budget():
    return Budget(id=1, name="Participatory budget")


@pytest.fixture()
def finished_budget():
    return Budget(id=2, name="Closed budget", finished=True)


@pytest.fixture()
def headings(budget):
    """Two groups with three headings: Streets (Main Avenue, Mercy Street) and Parks (Central Park)."""
    streets = Group(id=1, name="Streets", budget=budget)
    parks = Group(id=2, name="Parks", budget=budget)
    return {
        "main_avenue": Heading(id=1, name="Main Avenue", group=streets),
        "mercy_street": Heading(id=2, name="Mercy Street", group=streets),
        "central_park": Heading(id=3, name="Central Park", group=parks),
    }


@pytest.fixture()
def heading(headings):
    return headings["main_avenue"]


@pytest.fixture()
def administrators():
    return {
        "gema": Administrator(id=1, name="Gema", email="gema@admins.org"),
        "ana": Administrator(id=2, name="Ana", email="ana@admins.org"),
    }


@pytest.fixture()
def valuators():
    return {
        "olga": Valuator(id=1, name="Olga", email="olga@valuators.org", description="Valuator Olga"),
        "miriam": Valuator(id=2, name="Miriam", email="miriam@valuators.org", description="Valuator Miriam"),
        "rachel": Valuator(id=3, name="Rachel", email="rachel@valuators.org"),
    }


@pytest.fixture()
def directory(administrators, valuators):
    return InMemoryReviewerDirectory(administrators.values(), valuators.values())


@pytest.fixture()
def assignments(directory):
    return AssignmentRegistry(directory)


@pytest.fixture()
def tags(assignments):
    return TagNamespace(locks=assignments.locks)


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def lifecycle(assignments, tags, notifier):
    return LifecycleStateMachine(assignments, tags=tags, notifier=notifier)


@pytest.fixture()
def engine(lifecycle):
    return FilterEngine(lifecycle)


@pytest.fixture()
def make_investment(budget, heading):
    """Factory registering investments in ``budget`` with increasing ids."""
    ids = itertools.count(1)

    def factory(**attrs):
        attrs.setdefault("id", next(ids))
        attrs.setdefault("title", f"Investment {attrs['id']}")
        attrs.setdefault("heading", heading)
        attrs.setdefault("author", "author@example.org")
        investment = Investment(**attrs)
        investment.budget.add_investment(investment)
        return investment

    return factory


@pytest.fixture()
def selection_investments(make_investment):
    """One investment per selection stage."""
    return {
        "unfeasible": make_investment(
            title="Unfeasible project",
            feasibility="unfeasible",
            unfeasibility_explanation="set to unfeasible on creation",
        ),
        "feasible": make_investment(title="Feasible project", feasibility="feasible"),
        "feasible_vf": make_investment(title="Feasible, VF project", feasibility="feasible", valuation_finished=True),
        "selected": make_investment(
            title="Selected project", feasibility="feasible", valuation_finished=True, selected=True
        ),
        "winner": make_investment(
            title="Winner project", feasibility="feasible", valuation_finished=True, selected=True, winner=True
        ),
    }
