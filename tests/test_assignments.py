"""Unit tests for administrator and valuator assignments."""

import pytest

from budget_review import BudgetClosed, Group, Heading, Investment, ValidationError


class TestAdministrator:
    def test_unassigned_by_default(self, assignments, make_investment):
        assert assignments.administrator_of(make_investment()) is None

    def test_assign_by_id(self, assignments, administrators, make_investment):
        investment = make_investment()
        assignments.assign_administrator(investment, 1)
        assert assignments.administrator_of(investment) == administrators["gema"]

    def test_assignment_replaces(self, assignments, administrators, make_investment):
        investment = make_investment()
        assignments.assign_administrator(investment, administrators["gema"])
        assignments.assign_administrator(investment, administrators["ana"])
        assert assignments.administrator_of(investment) == administrators["ana"]

    def test_unassign(self, assignments, administrators, make_investment):
        investment = make_investment()
        assignments.assign_administrator(investment, administrators["gema"])
        assignments.assign_administrator(investment, None)
        assert assignments.administrator_of(investment) is None

    def test_unknown_administrator_rejected(self, assignments, administrators, make_investment):
        investment = make_investment()
        assignments.assign_administrator(investment, administrators["gema"])
        with pytest.raises(ValidationError, match="Unknown administrator") as excinfo:
            assignments.assign_administrator(investment, 99)
        assert excinfo.value.investment_id == investment.id
        assert assignments.administrator_of(investment) == administrators["gema"]


class TestValuators:
    def test_set_valuators_deduplicates(self, assignments, valuators, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [1, valuators["olga"], 2])
        assert assignments.valuators_of(investment) == {valuators["olga"], valuators["miriam"]}

    def test_set_valuators_replaces(self, assignments, valuators, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [1, 2])
        assignments.set_valuators(investment, [3])
        assert assignments.valuators_of(investment) == {valuators["rachel"]}

    def test_set_valuators_unknown_id_changes_nothing(self, assignments, valuators, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [1])
        with pytest.raises(ValidationError, match="Unknown valuator"):
            assignments.set_valuators(investment, [2, 42])
        assert assignments.valuators_of(investment) == {valuators["olga"]}

    def test_add_valuator_is_idempotent(self, assignments, valuators, make_investment):
        investment = make_investment()
        assignments.add_valuator(investment, 1)
        assignments.add_valuator(investment, valuators["olga"])
        assert assignments.valuators_of(investment) == {valuators["olga"]}

    def test_remove_valuator(self, assignments, valuators, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [1, 3])
        assignments.remove_valuator(investment, 1)
        assignments.remove_valuator(investment, 2)
        assert assignments.valuators_of(investment) == {valuators["rachel"]}

    def test_clearing_valuators(self, assignments, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [1])
        assignments.set_valuators(investment, [])
        assert assignments.valuators_of(investment) == frozenset()

    def test_valuator_names_use_descriptions(self, assignments, make_investment):
        investment = make_investment()
        assignments.set_valuators(investment, [3, 2, 1])
        assert assignments.valuator_names(investment) == ["Rachel", "Valuator Miriam", "Valuator Olga"]

    def test_assignments_are_per_investment(self, assignments, valuators, make_investment):
        first, second = make_investment(), make_investment()
        assignments.add_valuator(first, 1)
        assert assignments.valuators_of(second) == frozenset()


class TestFinishedBudget:
    @pytest.fixture()
    def closed_investment(self, finished_budget):
        heading = Heading(id=10, name="Old town", group=Group(id=10, name="Districts", budget=finished_budget))
        return finished_budget.add_investment(Investment(id=100, title="Closed", heading=heading))

    def test_assign_administrator_rejected(self, assignments, closed_investment):
        with pytest.raises(BudgetClosed):
            assignments.assign_administrator(closed_investment, 1)
        assert assignments.administrator_of(closed_investment) is None

    def test_valuator_changes_rejected(self, assignments, closed_investment):
        with pytest.raises(BudgetClosed):
            assignments.set_valuators(closed_investment, [1])
        with pytest.raises(BudgetClosed):
            assignments.add_valuator(closed_investment, 1)
        with pytest.raises(BudgetClosed):
            assignments.remove_valuator(closed_investment, 1)
