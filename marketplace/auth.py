from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from marketplace import limiter
from marketplace.data.core.user import User
from marketplace.presentation.api_response import ApiResponse
from marketplace.presentation.routes.orders.payloads import read_json_body
from marketplace.logger import get_logger

logger = get_logger("marketplace.auth")
auth = Blueprint('auth', __name__)


@auth.route('/csrf', methods=['GET'])
def csrf_token():
    """Token for the X-CSRFToken header of state-changing requests"""
    return ApiResponse.success(200, "CSRF token issued", {'csrfToken': generate_csrf()})


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    if current_user.is_authenticated:
        logger.debug(f"User {current_user.email} already authenticated")
        return ApiResponse.success(200, "Already logged in", current_user.to_public_dict())

    body = read_json_body()
    email = body.get('email')
    password = body.get('password')

    logger.debug(f"Login attempt for email: {email}")

    if not email or not password:
        logger.warning(f"Login attempt with missing credentials for email: {email}")
        return ApiResponse.error(400, "Please provide both email and password", 'missing_credentials')

    user = User.query.filter_by(email=email).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for email: {email}")
        return ApiResponse.error(401, "Invalid email or password", 'invalid_credentials')

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {email}")
        return ApiResponse.error(403, "Account is disabled", 'account_disabled')

    login_user(user)
    logger.info(f"Successful login for user: {email}")
    return ApiResponse.success(200, f"Welcome, {user.name or user.email}!", user.to_public_dict())


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    email = current_user.email
    logout_user()
    logger.info(f"User logged out: {email}")
    return ApiResponse.success(200, "You have been logged out", None)


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return ApiResponse.success(200, "Current user fetched successfully", current_user.to_public_dict())
