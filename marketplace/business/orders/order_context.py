"""
OrderContext - Domain Facade for a single order

Provides an intention-revealing interface for the buyer and vendor update
paths and the admin purge. Delegates status work to OrderStatusManager.
"""

from marketplace import db, notifier
from marketplace.data.orders.order import Order
from marketplace.data.catalog.listing import Listing
from marketplace.data.unit_of_work import unit_of_work
from marketplace.business.orders.state_machine import OrderStateMachine, BuyerOrderStateMachine
from marketplace.business.orders.status_manager import OrderStatusManager
from marketplace.business.orders.policies.vendor_access import VendorAccessPolicy
from marketplace.business.orders.errors import OrderNotFound, BuyerStatusForbidden, InvalidPayload
from marketplace.logger import get_logger

logger = get_logger("marketplace.domain.orders.order_context")

# Marks a field the caller did not send, as opposed to an explicit null
UNSET = object()


class OrderContext:
    """
    Domain Facade for the order aggregate.

    Holds the order row and exposes the operations that may mutate it.

    Pattern: Domain Facade / Aggregate Controller
    """

    def __init__(self, order: Order):
        self.order = order
        self.order_id = order.id
        self.status_manager = OrderStatusManager(self)

    # ========== Loading ==========

    @staticmethod
    def _order_query(lock: bool):
        query = Order.query
        if lock:
            query = query.with_for_update().populate_existing()
        return query

    @classmethod
    def load_for_buyer(cls, buyer_id: str, order_id: str, lock: bool = False) -> 'OrderContext':
        """
        Load an order owned by the buyer.

        Raises:
            OrderNotFound: If the order does not exist or belongs to someone else
        """
        order = cls._order_query(lock).filter(Order.id == order_id, Order.user_id == buyer_id).first()
        if order is None:
            raise OrderNotFound("Order not found")
        return cls(order)

    @classmethod
    def load_for_vendor(cls, vendor_id: str, order_id: str, lock: bool = False) -> 'OrderContext':
        """
        Load an order placed on one of the vendor's listings.

        Raises:
            OrderNotFound: If the order does not exist or is for another vendor
        """
        order = (
            cls._order_query(lock)
            .join(Listing, Order.listing_id == Listing.id)
            .filter(Order.id == order_id, Listing.vendor_id == vendor_id)
            .first()
        )
        if order is None:
            raise OrderNotFound("Order not found")
        return cls(order)

    # ========== Mutations ==========

    def _apply_details(self, notes, transaction_id) -> None:
        if notes is not UNSET:
            if notes is not None and not isinstance(notes, str):
                raise InvalidPayload("notes must be a string")
            self.order.notes = notes
        if transaction_id is not UNSET:
            if transaction_id is not None and not isinstance(transaction_id, str):
                raise InvalidPayload("transactionId must be a string")
            self.order.transaction_id = transaction_id

    @classmethod
    def update_as_buyer(
        cls,
        buyer_id: str,
        order_id: str,
        status=UNSET,
        notes=UNSET,
        transaction_id=UNSET,
    ) -> Order:
        """
        Apply a buyer's changes to one of their orders.

        Buyers may cancel (from PENDING or CONFIRMED) and may always edit
        notes and transaction id. Everything runs in one unit of work.

        Raises:
            InvalidStatus, BuyerStatusForbidden, OrderNotFound,
            InvalidTransition, InvalidPayload
        """
        new_status = None
        if status is not UNSET:
            new_status = OrderStateMachine.validate_status(status)
            if new_status != OrderStateMachine.CANCELLED:
                raise BuyerStatusForbidden("Buyers can only cancel orders")

        with unit_of_work():
            ctx = cls.load_for_buyer(buyer_id, order_id, lock=True)
            if new_status is not None:
                ctx.status_manager.transition(new_status, BuyerOrderStateMachine, actor='buyer')
            ctx._apply_details(notes, transaction_id)

        if new_status == OrderStateMachine.CANCELLED:
            ctx._notify_cancelled('buyer')
        return ctx.order

    @classmethod
    def update_as_vendor(
        cls,
        user_id: str,
        vendor_id: str,
        order_id: str,
        status=UNSET,
        notes=UNSET,
        transaction_id=UNSET,
    ) -> Order:
        """
        Apply a vendor's changes to an order on one of its listings.

        The membership check runs in the same transaction as the write.

        Raises:
            InvalidStatus, VendorNotFound, VendorAccessDenied, OrderNotFound,
            InvalidTransition, InvalidPayload
        """
        new_status = None
        if status is not UNSET:
            new_status = OrderStateMachine.validate_status(status)

        with unit_of_work():
            VendorAccessPolicy.check(user_id, vendor_id)
            ctx = cls.load_for_vendor(vendor_id, order_id, lock=True)
            if new_status is not None:
                ctx.status_manager.transition(new_status, OrderStateMachine, actor='vendor')
            ctx._apply_details(notes, transaction_id)

        if new_status == OrderStateMachine.CANCELLED:
            ctx._notify_cancelled('vendor')
        return ctx.order

    @classmethod
    def purge(cls, order_id: str) -> None:
        """
        Administrative delete-by-id.

        Stock is not restored; purging is not a cancellation.

        Raises:
            OrderNotFound: If no order has this id
        """
        with unit_of_work() as session:
            order = db.session.get(Order, order_id)
            if order is None:
                raise OrderNotFound("Order not found")
            session.delete(order)
        logger.info(f"Order {order_id} purged")

    def _notify_cancelled(self, cancelled_by: str) -> None:
        from marketplace.services.notifications.order_notifier import OrderNotifier
        notifier.submit(OrderNotifier.order_cancelled, self.order_id, cancelled_by)
