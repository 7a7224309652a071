"""
Order Query Service
Read-only order lists, lookups and status counts for buyers and vendors.
"""

import math
from typing import Dict, Optional
from sqlalchemy import func
from marketplace.data.orders.order import Order
from marketplace.data.catalog.listing import Listing
from marketplace.business.orders.state_machine import OrderStateMachine
from marketplace.business.orders.policies.vendor_access import VendorAccessPolicy
from marketplace.business.orders.errors import OrderNotFound


class OrderQueryService:
    """
    Service for order presentation data.

    Provides methods for:
    - Paginated buyer and vendor order lists
    - Fetching a single order within the caller's scope
    - Per-status order counts
    """

    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100

    @classmethod
    def parse_pagination(cls, args) -> tuple:
        """
        Read ``page`` and ``limit`` from query arguments.

        Missing or malformed values fall back to the defaults; ``limit``
        is capped at MAX_LIMIT.
        """
        page = args.get('page', type=int) or 1
        limit = args.get('limit', type=int) or cls.DEFAULT_LIMIT
        return max(1, page), min(max(1, limit), cls.MAX_LIMIT)

    @staticmethod
    def build_filtered_query(
        user_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
        status: Optional[str] = None,
    ):
        query = Order.query

        if user_id:
            query = query.filter(Order.user_id == user_id)

        if vendor_id:
            query = query.join(Listing, Order.listing_id == Listing.id).filter(Listing.vendor_id == vendor_id)

        if status:
            query = query.filter(Order.status == OrderStateMachine.validate_status(status))

        # Newest first
        return query.order_by(Order.created_at.desc(), Order.id)

    @staticmethod
    def _page_result(query, page: int, limit: int, include_listing: bool, include_user: bool) -> Dict:
        pagination = query.paginate(page=page, per_page=limit, error_out=False)
        total = pagination.total or 0
        return {
            'items': [
                order.to_api_dict(include_listing=include_listing, include_user=include_user)
                for order in pagination.items
            ],
            'meta': {
                'total': total,
                'page': page,
                'limit': limit,
                'totalPages': math.ceil(total / limit),
            },
        }

    @staticmethod
    def _status_counts(query) -> Dict:
        rows = (
            query.with_entities(Order.status, func.count(Order.id))
            .group_by(Order.status)
            .all()
        )
        counts = {status: count for status, count in rows}
        by_status = {status.lower(): counts.get(status, 0) for status in OrderStateMachine.STATUSES}
        return {
            'total': sum(counts.values()),
            'byStatus': by_status,
        }

    # ========== Buyer ==========

    @classmethod
    def list_for_buyer(cls, buyer_id: str, page: int = 1, limit: int = DEFAULT_LIMIT, status: Optional[str] = None) -> Dict:
        query = cls.build_filtered_query(user_id=buyer_id, status=status)
        return cls._page_result(query, page, limit, include_listing=True, include_user=False)

    @staticmethod
    def get_for_buyer(buyer_id: str, order_id: str) -> Order:
        order = Order.query.filter(Order.id == order_id, Order.user_id == buyer_id).first()
        if order is None:
            raise OrderNotFound("Order not found or you don't have access to it")
        return order

    @classmethod
    def stats_for_buyer(cls, buyer_id: str) -> Dict:
        return cls._status_counts(Order.query.filter(Order.user_id == buyer_id))

    # ========== Vendor ==========

    @classmethod
    def list_for_vendor(cls, user_id: str, vendor_id: str, page: int = 1, limit: int = DEFAULT_LIMIT, status: Optional[str] = None) -> Dict:
        """
        Paginated orders on the vendor's listings.

        Raises:
            VendorNotFound, VendorAccessDenied, InvalidStatus
        """
        VendorAccessPolicy.check(user_id, vendor_id)
        query = cls.build_filtered_query(vendor_id=vendor_id, status=status)
        return cls._page_result(query, page, limit, include_listing=True, include_user=True)

    @staticmethod
    def get_for_vendor(user_id: str, vendor_id: str, order_id: str) -> Order:
        VendorAccessPolicy.check(user_id, vendor_id)
        order = (
            Order.query
            .join(Listing, Order.listing_id == Listing.id)
            .filter(Order.id == order_id, Listing.vendor_id == vendor_id)
            .first()
        )
        if order is None:
            raise OrderNotFound("Order not found")
        return order

    @classmethod
    def stats_for_vendor(cls, user_id: str, vendor_id: str) -> Dict:
        vendor = VendorAccessPolicy.check(user_id, vendor_id)
        query = Order.query.join(Listing, Order.listing_id == Listing.id).filter(Listing.vendor_id == vendor_id)
        stats = cls._status_counts(query)
        stats['vendorId'] = vendor.id
        stats['vendorName'] = vendor.name
        return stats
