"""
Buyer order routes
Create, list, inspect and cancel the current user's orders.
"""

from flask import request
from flask_login import login_required, current_user
from marketplace.presentation.routes.orders import orders_bp
from marketplace.presentation.routes.orders.payloads import read_json_body, pick, update_changes
from marketplace.presentation.api_response import ApiResponse
from marketplace.business.orders.order_factory import OrderFactory
from marketplace.business.orders.order_context import OrderContext
from marketplace.services.orders.order_query_service import OrderQueryService
from marketplace.utils.logging_sanitizer import sanitize_dict
from marketplace.logger import get_logger

logger = get_logger("marketplace.routes.orders.buyer")


@orders_bp.route('/me', methods=['POST'])
@login_required
def create_order():
    """Place an order; N units become N orders"""
    body = read_json_body()
    logger.debug(f"Create order request from {current_user.id}: {sanitize_dict(body)}")

    orders = OrderFactory.create_orders(
        buyer_id=current_user.id,
        listing_id=pick(body, 'listing_id', default=None),
        quantity=pick(body, 'quantity', default=1),
        notes=pick(body, 'notes', default=None),
        transaction_id=pick(body, 'transaction_id', default=None),
    )

    message = "Order created successfully" if len(orders) == 1 else f"{len(orders)} orders created successfully"
    return ApiResponse.success(201, message, [order.to_api_dict(include_listing=True) for order in orders])


@orders_bp.route('/me', methods=['GET'])
@login_required
def my_orders():
    page, limit = OrderQueryService.parse_pagination(request.args)
    result = OrderQueryService.list_for_buyer(
        current_user.id,
        page=page,
        limit=limit,
        status=request.args.get('status'),
    )
    return ApiResponse.success(200, "User orders fetched successfully", result)


@orders_bp.route('/me/stats', methods=['GET'])
@login_required
def my_order_stats():
    stats = OrderQueryService.stats_for_buyer(current_user.id)
    return ApiResponse.success(200, "User order statistics fetched successfully", stats)


@orders_bp.route('/me/<order_id>', methods=['GET'])
@login_required
def my_order(order_id):
    order = OrderQueryService.get_for_buyer(current_user.id, order_id)
    return ApiResponse.success(200, "Order fetched successfully", order.to_api_dict(include_listing=True))


@orders_bp.route('/me/<order_id>', methods=['PUT'])
@login_required
def update_my_order(order_id):
    """Cancel an order and/or edit its notes and transaction id"""
    changes = update_changes(read_json_body())
    logger.debug(f"Buyer update of order {order_id} by {current_user.id}: {sanitize_dict(changes)}")

    order = OrderContext.update_as_buyer(current_user.id, order_id, **changes)
    return ApiResponse.success(200, "Order updated successfully", order.to_api_dict(include_listing=True))
