"""
OrderNarrator - Message composer for order lifecycle events

Keeps notification and log wording out of the transition logic.
"""

from html import escape
from typing import List, Optional, Tuple

CARD_STYLE = (
    "max-width:520px;margin:0 auto;background:#ffffff;border-radius:12px;"
    "padding:24px 28px;color:#2a2a2a;font-family:Arial,Helvetica,sans-serif;"
    "font-size:15px;line-height:1.6;"
)
DETAILS_STYLE = "background:#f1f5fb;padding:14px 18px;border-radius:10px;margin:20px 0;"


class OrderNarrator:
    """
    Composes the subject, text body and HTML body of order notifications
    and the log lines written on status changes.

    Values interpolated into the HTML bodies are escaped.
    """

    @staticmethod
    def status_changed(order_id: str, from_status: str, to_status: str, actor: str) -> str:
        """Log line for an order status change"""
        return f"Order {order_id} status changed: {from_status} → {to_status} (by {actor})"

    @staticmethod
    def _html(title: str, intro: str, details: List[Tuple[str, str]], order_ids: List[str], footer: str) -> str:
        rows = "<br>".join(f"<strong>{escape(label)}:</strong> {escape(str(value))}" for label, value in details)
        return (
            f'<div style="{CARD_STYLE}">'
            f'<h2 style="color:#0b3c5d;margin-top:0;text-align:center;">{escape(title)}</h2>'
            f'<p>{intro}</p>'
            f'<div style="{DETAILS_STYLE}"><p style="margin:0;">{rows}</p></div>'
            f'<div><strong>Order IDs:</strong><br><span>{escape(", ".join(order_ids))}</span></div>'
            f'<hr style="border:none;border-top:1px solid #e3e9f0;margin:24px 0;">'
            f'<p style="text-align:center;color:#4a4a4a;">{footer}</p>'
            f'</div>'
            f'<p style="text-align:center;color:#9ba3b0;font-size:12px;">This is an automated message. Please do not reply.</p>'
        )

    @staticmethod
    def orders_created_for_buyer(buyer_name: Optional[str], listing_name: str, order_ids: List[str], status: str) -> Tuple[str, str, str]:
        subject = f"Order Confirmation - {listing_name}"
        body = (
            f"Hi {buyer_name or ''},\n\n"
            f"Your order has been successfully placed!\n\n"
            f"Item: {listing_name}\n"
            f"Total Quantity: {len(order_ids)}\n"
            f"Status: {status}\n\n"
            f"Order IDs: {', '.join(order_ids)}\n\n"
            f"Thank you for shopping with Marketplace!\n"
        )
        html = OrderNarrator._html(
            "Order Confirmation",
            f"Hi <strong>{escape(buyer_name or '')}</strong>,<br>Your order has been successfully placed!",
            [("Item", listing_name), ("Total Quantity", len(order_ids)), ("Status", status)],
            order_ids,
            "Thank you for shopping with <strong>Marketplace</strong>!",
        )
        return subject, body, html

    @staticmethod
    def orders_created_for_vendor(listing_name: str, order_ids: List[str], buyer_name: Optional[str], buyer_email: str) -> Tuple[str, str, str]:
        subject = f"New Orders Received - {listing_name}"
        body = (
            f"New orders have been placed for {listing_name}.\n\n"
            f"Total Quantity: {len(order_ids)}\n"
            f"Customer: {buyer_name or ''} ({buyer_email})\n\n"
            f"Order IDs: {', '.join(order_ids)}\n\n"
            f"Please process these orders promptly.\n"
        )
        html = OrderNarrator._html(
            "New Orders Received",
            f"New orders have been placed for <strong>{escape(listing_name)}</strong>.",
            [("Total Quantity", len(order_ids)), ("Customer", f"{buyer_name or ''} ({buyer_email})")],
            order_ids,
            "Please process these orders promptly.",
        )
        return subject, body, html

    @staticmethod
    def order_cancelled_for_buyer(listing_name: str, order_id: str) -> Tuple[str, str, str]:
        subject = f"Order Cancelled - {listing_name}"
        body = (
            f"Your order for {listing_name} has been cancelled.\n\n"
            f"Order ID: {order_id}\n\n"
            f"We're sorry this order couldn't be completed.\n"
        )
        html = OrderNarrator._html(
            "Order Cancelled",
            f"Your order for <strong>{escape(listing_name)}</strong> has been cancelled.",
            [("Status", "CANCELLED")],
            [order_id],
            "We're sorry this order couldn't be completed.",
        )
        return subject, body, html

    @staticmethod
    def order_cancelled_for_vendor(listing_name: str, order_id: str, cancelled_by: str) -> Tuple[str, str, str]:
        subject = f"Order Cancelled - {listing_name}"
        body = (
            f"An order for {listing_name} has been cancelled by the {cancelled_by}.\n\n"
            f"Order ID: {order_id}\n"
        )
        html = OrderNarrator._html(
            "Order Cancelled",
            f"An order for <strong>{escape(listing_name)}</strong> has been cancelled by the {escape(cancelled_by)}.",
            [("Status", "CANCELLED"), ("Cancelled By", cancelled_by)],
            [order_id],
            "No further action is needed for this order.",
        )
        return subject, body, html
