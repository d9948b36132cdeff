import pytest
import datetime as dt
from decimal import Decimal

from goalplanner.domain.errors import (
    EmptyDescription,
    InvalidDateRange,
    InvalidGoalField,
    InvalidGoalType,
    InvalidPriority,
)
from goalplanner.domain.goal import Goal, GoalImportance, GoalStatus, GoalType
from goalplanner.domain.money import Money


def brl(v) -> Money:
    return Money(Decimal(str(v)), "BRL")


def make_goal(**overrides) -> Goal:
    props = dict(
        id="goal-1",
        user_id="user-1",
        description="Reserva para viagem",
        type=GoalType.ECONOMIA,
        target_value=brl(100000),
        start_date=dt.date(2024, 1, 1),
        end_date=dt.date(2025, 12, 31),
        monthly_income=brl(5000),
        fixed_expenses=brl(3000),
        available_per_month=brl(2000),
        importance=GoalImportance.ALTA,
        priority=1,
        monthly_contribution=brl(1500),
        num_parcela=24,
    )
    props.update(overrides)
    return Goal(**props)


def test_goal_create_ok_defaults():
    g = make_goal()
    assert g.status == GoalStatus.ACTIVE
    assert g.is_active()
    assert g.is_economy()
    assert not g.is_purchase()
    assert g.strategy is None
    assert g.created_at.tzinfo is not None


def test_goal_factory_generates_id():
    fields = {k: v for k, v in vars(make_goal()).items() if k != "id"}
    g = Goal.create(**fields)
    assert g.id and g.id != "goal-1"


def test_string_tags_are_coerced_to_enums():
    g = make_goal(type="compra", importance="média", status="paused")
    assert g.type is GoalType.COMPRA
    assert g.importance is GoalImportance.MEDIA
    assert g.status is GoalStatus.PAUSED
    assert g.is_purchase()
    assert g.is_paused()


@pytest.mark.parametrize("desc", ["", "   "])
def test_empty_description_rejected(desc):
    with pytest.raises(EmptyDescription, match="Goal description cannot be empty"):
        make_goal(description=desc)


def test_invalid_type_rejected():
    with pytest.raises(InvalidGoalType, match="Invalid goal type: poupanca"):
        make_goal(type="poupanca")


@pytest.mark.parametrize("priority", [0, 6, -1])
def test_priority_out_of_range_rejected(priority):
    with pytest.raises(InvalidPriority, match="Priority must be between 1 and 5"):
        make_goal(priority=priority)


@pytest.mark.parametrize(
    "start, end",
    [
        (dt.date(2024, 1, 1), dt.date(2024, 1, 1)),
        (dt.date(2024, 6, 1), dt.date(2024, 1, 1)),
    ],
)
@pytest.mark.parametrize("target", [0, 1, 100000])
def test_end_date_must_be_after_start_date(start, end, target):
    with pytest.raises(InvalidDateRange, match="End date must be after start date"):
        make_goal(start_date=start, end_date=end, target_value=brl(target))


def test_validation_order_description_first():
    with pytest.raises(EmptyDescription):
        make_goal(description="", type="x", priority=9)


def test_num_parcela_must_be_positive():
    with pytest.raises(InvalidGoalField):
        make_goal(num_parcela=0)


@pytest.mark.parametrize("strategy", [42, ["poupar"]])
def test_strategy_must_be_text(strategy):
    with pytest.raises(InvalidGoalField, match="strategy must be a string"):
        make_goal(strategy=strategy)


def test_money_fields_must_be_money():
    with pytest.raises(InvalidGoalField):
        make_goal(target_value=1000)


def test_total_contribution_needed():
    assert make_goal().get_total_contribution_needed() == brl(36000)


def test_progress_percentage_clamped():
    g = make_goal()
    assert g.get_progress_percentage(brl(25000)) == Decimal("25")
    assert g.get_progress_percentage(brl(200000)) == Decimal("100")
    assert g.get_progress_percentage(brl(0)) == Decimal("0")


def test_progress_percentage_zero_target():
    g = make_goal(target_value=brl(0))
    assert g.get_progress_percentage(brl(10)) == 0


def test_remaining_amount_never_negative():
    g = make_goal()
    assert g.get_remaining_amount(brl(30000)) == brl(70000)
    assert g.get_remaining_amount(brl(150000)).is_zero()


def test_state_transitions_return_new_instance():
    g = make_goal()
    done = g.mark_as_completed()

    assert done is not g
    assert done.is_completed()
    assert g.is_active()  # l'instance d'origine ne bouge pas
    assert done.created_at == g.created_at
    assert done.description == g.description
    assert done.target_value == g.target_value

    assert g.mark_as_paused().is_paused()
    assert g.mark_as_cancelled().is_cancelled()
    assert done.reactivate().is_active()


def test_equality_is_identity_based():
    a = make_goal(description="A")
    b = make_goal(description="B", priority=3)
    c = make_goal(id="goal-2")

    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_with_changes_revalidates():
    g = make_goal()
    g2 = g.with_changes(priority=3, description="Nova descrição")
    assert g2.priority == 3
    assert g2.description == "Nova descrição"
    assert g.priority == 1

    with pytest.raises(InvalidDateRange):
        g.with_changes(end_date=g.start_date)


def test_with_changes_refuses_identity_and_unknown_fields():
    g = make_goal()
    with pytest.raises(InvalidGoalField):
        g.with_changes(id="other")
    with pytest.raises(InvalidGoalField):
        g.with_changes(color="blue")


def test_to_dict_flattens_money_and_dates():
    created = dt.datetime(2024, 1, 2, 10, 0, tzinfo=dt.timezone.utc)
    d = make_goal(created_at=created, strategy=" Poupança ").to_dict()

    assert d["target_value"] == 100000.0
    assert d["monthly_contribution"] == 1500.0
    assert d["start_date"] == "2024-01-01"
    assert d["end_date"] == "2025-12-31"
    assert d["created_at"] == created.isoformat()
    assert d["type"] == "economia"
    assert d["importance"] == "alta"
    assert d["status"] == "active"
    assert d["strategy"] == "Poupança"
