"""
State machines for the order lifecycle

Encodes valid transitions per actor.
Keeps "what is allowed" separate from "how persistence occurs".
"""

from typing import Dict, Set
from marketplace.business.orders.errors import InvalidStatus, InvalidTransition


class OrderStateMachine:
    """
    State machine for vendor-driven Order.status transitions.

    PENDING → CONFIRMED → DELIVERED, with CANCELLED reachable from
    PENDING and CONFIRMED. Staying in the same status is not a transition.
    """

    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'

    STATUSES = (PENDING, CONFIRMED, DELIVERED, CANCELLED)

    # Terminal states (cannot transition from these)
    TERMINAL_STATES = {DELIVERED, CANCELLED}

    TRANSITIONS: Dict[str, Set[str]] = {
        PENDING: {CONFIRMED, CANCELLED},
        CONFIRMED: {DELIVERED, CANCELLED},
        # DELIVERED and CANCELLED are terminal
    }

    @classmethod
    def validate_status(cls, status) -> str:
        """
        Validate a client-supplied status value.

        Matching is exact: statuses are upper-case.

        Raises:
            InvalidStatus: If the value is not one of STATUSES
        """
        if not isinstance(status, str) or status not in cls.STATUSES:
            raise InvalidStatus(f"Status must be one of: {', '.join(cls.STATUSES)}")
        return status

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        if from_status in cls.TERMINAL_STATES:
            return False
        return to_status in cls.TRANSITIONS.get(from_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """
        Validate transition and raise exception if invalid.

        Raises:
            InvalidTransition: If transition is not allowed
        """
        if cls.can_transition(from_status, to_status):
            return

        if from_status == cls.DELIVERED:
            raise InvalidTransition("Delivered orders cannot be modified", reason='order_already_delivered')
        if from_status == cls.CANCELLED:
            raise InvalidTransition("Cancelled orders cannot be modified", reason='order_already_cancelled')

        allowed = ' or '.join(sorted(cls.get_allowed_transitions(from_status)))
        raise InvalidTransition(
            f"Invalid status transition: {from_status} → {to_status}"
            + (f" ({from_status.title()} orders can only be moved to {allowed})" if allowed else "")
        )

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> Set[str]:
        """Get set of allowed target statuses from current status"""
        if from_status in cls.TERMINAL_STATES:
            return set()
        return cls.TRANSITIONS.get(from_status, set())


class BuyerOrderStateMachine(OrderStateMachine):
    """
    State machine for buyer-driven transitions.

    Buyers may only cancel, and only before delivery.
    """

    TRANSITIONS: Dict[str, Set[str]] = {
        OrderStateMachine.PENDING: {OrderStateMachine.CANCELLED},
        OrderStateMachine.CONFIRMED: {OrderStateMachine.CANCELLED},
    }
