"""
Order notification jobs

Each job reloads the orders it is about from the database, so it only ever
sees committed state, then mails the buyer and the vendor staff.
"""

from typing import List
from marketplace import db, notifier
from marketplace.data.orders.order import Order
from marketplace.business.orders.narrator import OrderNarrator
from marketplace.logger import get_logger

logger = get_logger("marketplace.services.notifications.order_notifier")


class OrderNotifier:
    """Notification jobs queued through the NotificationDispatcher"""

    @staticmethod
    def orders_created(order_ids: List[str]) -> None:
        orders = Order.query.filter(Order.id.in_(order_ids)).all()
        if not orders:
            logger.warning(f"orders_created: none of {order_ids} found")
            return

        first = orders[0]
        buyer = first.user
        listing = first.listing
        vendor = listing.vendor
        found = {o.id for o in orders}
        ordered_ids = [oid for oid in order_ids if oid in found]

        subject, body, html = OrderNarrator.orders_created_for_buyer(
            buyer.name, listing.name, ordered_ids, first.status
        )
        notifier.sender.send([buyer.email], subject, body, html)

        staff = vendor.staff_emails if vendor else []
        if staff:
            subject, body, html = OrderNarrator.orders_created_for_vendor(
                listing.name, ordered_ids, buyer.name, buyer.email
            )
            notifier.sender.send(staff, subject, body, html)

        logger.info(f"Order creation notifications processed for {len(ordered_ids)} order(s)")

    @staticmethod
    def order_cancelled(order_id: str, cancelled_by: str = 'buyer') -> None:
        order = db.session.get(Order, order_id)
        if order is None:
            logger.warning(f"order_cancelled: order {order_id} not found")
            return

        listing = order.listing
        vendor = listing.vendor

        subject, body, html = OrderNarrator.order_cancelled_for_buyer(listing.name, order.id)
        notifier.sender.send([order.user.email], subject, body, html)

        staff = vendor.staff_emails if vendor else []
        if staff:
            subject, body, html = OrderNarrator.order_cancelled_for_vendor(listing.name, order.id, cancelled_by)
            notifier.sender.send(staff, subject, body, html)

        logger.info(f"Cancellation notifications processed for order {order_id}")
