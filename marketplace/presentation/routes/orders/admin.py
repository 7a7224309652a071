"""
Admin order routes
"""

from functools import wraps
from flask_login import login_required, current_user
from marketplace.presentation.routes.orders import orders_bp
from marketplace.presentation.api_response import ApiResponse
from marketplace.business.orders.order_context import OrderContext
from marketplace.business.orders.errors import AdminRequired
from marketplace.logger import get_logger

logger = get_logger("marketplace.routes.orders.admin")


def admin_required(f):
    """Decorator to require admin access"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            logger.warning(f"Non-admin user {current_user.get_id()} attempted an admin action")
            raise AdminRequired("Admin access required")
        return f(*args, **kwargs)
    return decorated_function


@orders_bp.route('/<order_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_order(order_id):
    """Administrative purge; does not restore stock"""
    OrderContext.purge(order_id)
    logger.info(f"Admin {current_user.id} deleted order {order_id}")
    return ApiResponse.success(200, "Order deleted successfully", None)
