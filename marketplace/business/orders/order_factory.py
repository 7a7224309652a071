"""
OrderFactory - creation of unit orders

A purchase of N units becomes N orders of quantity 1, created together with
the stock reservation in a single unit of work.
"""

from typing import List, Optional
from marketplace import notifier
from marketplace.data.orders.order import Order
from marketplace.data.unit_of_work import unit_of_work
from marketplace.business.orders.inventory_guard import InventoryGuard
from marketplace.business.orders.state_machine import OrderStateMachine
from marketplace.business.orders.errors import InvalidQuantity, InvalidListingId, InvalidPayload
from marketplace.logger import get_logger

logger = get_logger("marketplace.domain.orders.order_factory")


class OrderFactory:
    """Builds and persists unit orders for a buyer"""

    @staticmethod
    def validate_quantity(quantity) -> int:
        # bool is an int subclass; True must not order one unit
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidQuantity("Quantity must be a positive integer")
        return quantity

    @staticmethod
    def validate_listing_id(listing_id) -> str:
        if not isinstance(listing_id, str) or not listing_id.strip():
            raise InvalidListingId("Valid listing ID is required")
        return listing_id.strip()

    @staticmethod
    def validate_text(field: str, value) -> Optional[str]:
        if value is not None and not isinstance(value, str):
            raise InvalidPayload(f"{field} must be a string")
        return value

    @classmethod
    def create_orders(
        cls,
        buyer_id: str,
        listing_id,
        quantity=1,
        notes: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> List[Order]:
        """
        Create ``quantity`` unit orders for a listing.

        Input is validated before the transaction opens. Inside it, stock is
        reserved first and the orders are inserted after; any failure rolls
        both back. The "orders created" notification is queued only once the
        transaction has committed.

        Args:
            buyer_id: ID of the purchasing user
            listing_id: Listing being purchased
            quantity: Number of units, one order per unit
            notes: Free text copied onto every order
            transaction_id: External payment reference copied onto every order

        Returns:
            list: The new orders in creation order

        Raises:
            InvalidQuantity, InvalidListingId, InvalidPayload, ListingNotFound,
            ListingUnavailable, MissingPrice, InsufficientStock
        """
        quantity = cls.validate_quantity(quantity)
        listing_id = cls.validate_listing_id(listing_id)
        notes = cls.validate_text('notes', notes)
        transaction_id = cls.validate_text('transactionId', transaction_id)

        with unit_of_work() as session:
            reservation = InventoryGuard.reserve_stock(listing_id, quantity)

            orders = []
            for _ in range(quantity):
                order = Order(
                    user_id=buyer_id,
                    listing_id=reservation.listing_id,
                    quantity=1,
                    total_price=reservation.unit_price,
                    status=OrderStateMachine.PENDING,
                    notes=notes,
                    transaction_id=transaction_id,
                    stock_tracked=reservation.stock_tracked,
                )
                session.add(order)
                orders.append(order)

            session.flush()
            order_ids = [order.id for order in orders]

        logger.info(f"Created {len(order_ids)} order(s) for listing {listing_id} by user {buyer_id}")

        from marketplace.services.notifications.order_notifier import OrderNotifier
        notifier.submit(OrderNotifier.orders_created, order_ids)

        return orders
