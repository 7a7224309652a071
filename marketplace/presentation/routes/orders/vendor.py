"""
Vendor order routes
Owners and members of a vendor manage the orders placed on its listings.
"""

from flask import request
from flask_login import login_required, current_user
from marketplace.presentation.routes.orders import vendor_orders_bp
from marketplace.presentation.routes.orders.payloads import read_json_body, update_changes
from marketplace.presentation.api_response import ApiResponse
from marketplace.business.orders.order_context import OrderContext
from marketplace.services.orders.order_query_service import OrderQueryService
from marketplace.utils.logging_sanitizer import sanitize_dict
from marketplace.logger import get_logger

logger = get_logger("marketplace.routes.orders.vendor")


@vendor_orders_bp.route('/<vendor_id>/orders', methods=['GET'])
@login_required
def vendor_orders(vendor_id):
    page, limit = OrderQueryService.parse_pagination(request.args)
    result = OrderQueryService.list_for_vendor(
        current_user.id,
        vendor_id,
        page=page,
        limit=limit,
        status=request.args.get('status'),
    )
    return ApiResponse.success(200, "Vendor orders fetched successfully", result)


@vendor_orders_bp.route('/<vendor_id>/orders/stats', methods=['GET'])
@login_required
def vendor_order_stats(vendor_id):
    stats = OrderQueryService.stats_for_vendor(current_user.id, vendor_id)
    return ApiResponse.success(200, "Vendor order statistics fetched successfully", stats)


@vendor_orders_bp.route('/<vendor_id>/orders/<order_id>', methods=['GET'])
@login_required
def vendor_order(vendor_id, order_id):
    order = OrderQueryService.get_for_vendor(current_user.id, vendor_id, order_id)
    return ApiResponse.success(
        200,
        "Order fetched successfully",
        order.to_api_dict(include_listing=True, include_user=True),
    )


@vendor_orders_bp.route('/<vendor_id>/orders/<order_id>', methods=['PUT'])
@login_required
def update_vendor_order(vendor_id, order_id):
    changes = update_changes(read_json_body())
    logger.debug(f"Vendor update of order {order_id} (vendor {vendor_id}) by {current_user.id}: {sanitize_dict(changes)}")

    order = OrderContext.update_as_vendor(current_user.id, vendor_id, order_id, **changes)
    return ApiResponse.success(
        200,
        "Order updated successfully",
        order.to_api_dict(include_listing=True, include_user=True),
    )
