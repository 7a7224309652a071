"""
Tests for the order transition tables
"""
import pytest
from marketplace.business.orders.state_machine import OrderStateMachine, BuyerOrderStateMachine
from marketplace.business.orders.errors import InvalidStatus, InvalidTransition

PENDING = OrderStateMachine.PENDING
CONFIRMED = OrderStateMachine.CONFIRMED
DELIVERED = OrderStateMachine.DELIVERED
CANCELLED = OrderStateMachine.CANCELLED

VENDOR_ALLOWED = {
    (PENDING, CONFIRMED),
    (PENDING, CANCELLED),
    (CONFIRMED, DELIVERED),
    (CONFIRMED, CANCELLED),
}

BUYER_ALLOWED = {
    (PENDING, CANCELLED),
    (CONFIRMED, CANCELLED),
}


@pytest.mark.parametrize('current', OrderStateMachine.STATUSES)
@pytest.mark.parametrize('target', OrderStateMachine.STATUSES)
def test_vendor_table(current, target):
    assert OrderStateMachine.can_transition(current, target) == ((current, target) in VENDOR_ALLOWED)


@pytest.mark.parametrize('current', OrderStateMachine.STATUSES)
@pytest.mark.parametrize('target', OrderStateMachine.STATUSES)
def test_buyer_table(current, target):
    assert BuyerOrderStateMachine.can_transition(current, target) == ((current, target) in BUYER_ALLOWED)


def test_same_status_is_not_a_transition():
    with pytest.raises(InvalidTransition) as exc:
        OrderStateMachine.validate_transition(PENDING, PENDING)
    assert exc.value.reason == 'invalid_status_transition'


def test_terminal_states_report_specific_reasons():
    with pytest.raises(InvalidTransition) as exc:
        OrderStateMachine.validate_transition(DELIVERED, CANCELLED)
    assert exc.value.reason == 'order_already_delivered'

    with pytest.raises(InvalidTransition) as exc:
        BuyerOrderStateMachine.validate_transition(CANCELLED, CANCELLED)
    assert exc.value.reason == 'order_already_cancelled'


def test_invalid_transition_message_lists_allowed_targets():
    with pytest.raises(InvalidTransition) as exc:
        OrderStateMachine.validate_transition(PENDING, DELIVERED)
    assert 'CANCELLED or CONFIRMED' in exc.value.message
    assert exc.value.code == 400


def test_allowed_transitions():
    assert OrderStateMachine.get_allowed_transitions(CONFIRMED) == {DELIVERED, CANCELLED}
    assert BuyerOrderStateMachine.get_allowed_transitions(PENDING) == {CANCELLED}
    assert OrderStateMachine.get_allowed_transitions(CANCELLED) == set()


def test_validate_status():
    assert OrderStateMachine.validate_status('CANCELLED') == CANCELLED
    for bad in ('SHIPPED', 'cancelled', 'Confirmed', ' PENDING', '', None, 3):
        with pytest.raises(InvalidStatus):
            OrderStateMachine.validate_status(bad)
