"""
OrderStatusManager - Domain service for order status transitions

Validates a move against the actor's state machine, persists it with a
guarded write and applies the stock side effect of cancellation.
"""

from typing import Type, TYPE_CHECKING
from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value
from marketplace import db
from marketplace.data.base import utcnow
from marketplace.data.orders.order import Order
from marketplace.business.orders.state_machine import OrderStateMachine
from marketplace.business.orders.inventory_guard import InventoryGuard
from marketplace.business.orders.narrator import OrderNarrator
from marketplace.business.orders.errors import InvalidTransition
from marketplace.logger import get_logger

if TYPE_CHECKING:
    from marketplace.business.orders.order_context import OrderContext

logger = get_logger("marketplace.domain.orders.status_manager")


class OrderStatusManager:
    """
    Domain service for order status operations.

    Responsibilities:
    - Validate transitions against the persisted status
    - Write the new status only if nobody changed it in the meantime
    - Return reserved stock when an order is cancelled

    Never commits; runs inside the caller's unit of work.
    """

    def __init__(self, ctx: 'OrderContext'):
        self.ctx = ctx
        self.order = ctx.order

    def transition(self, new_status: str, machine: Type[OrderStateMachine], actor: str) -> None:
        """
        Move the order to ``new_status``.

        Args:
            new_status: Normalized target status
            machine: State machine of the acting party
            actor: 'buyer' or 'vendor', used for logging

        Raises:
            InvalidTransition: If the move is not allowed, or the persisted
                status changed between load and write
        """
        old_status = self.order.status
        machine.validate_transition(old_status, new_status)

        result = db.session.execute(
            update(Order)
            .where(Order.id == self.order.id, Order.status == old_status)
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InvalidTransition(
                "Order status was changed by another request",
                reason='order_status_changed',
            )
        set_committed_value(self.order, 'status', new_status)
        db.session.expire(self.order, ['updated_at'])

        if new_status == OrderStateMachine.CANCELLED and self.order.stock_tracked:
            InventoryGuard.release_stock(self.order.listing_id, self.order.quantity)

        logger.info(OrderNarrator.status_changed(self.order.id, old_status, new_status, actor))
