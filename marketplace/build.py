#!/usr/bin/env python3
"""
Build orchestrator for the marketplace order service
Creates the tables, ensures the admin account exists and inserts debug data
"""

import os
from marketplace import create_app, db
from marketplace.logger import get_logger

logger = get_logger("marketplace.build")

DEFAULT_ADMIN_EMAIL = 'admin@marketplace.local'


def build_models():
    """Create all tables for the registered models"""
    logger.info("Building models")
    db.create_all()
    logger.info("All tables created")


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if the admin account exists
    """
    from marketplace.data.core.user import User

    admin_email = os.environ.get('ADMIN_EMAIL', DEFAULT_ADMIN_EMAIL)
    admin = User.query.filter_by(email=admin_email, is_admin=True).first()
    if admin is None:
        logger.warning(f"Admin user {admin_email} not found")
        return False
    return True


def insert_critical_data():
    """
    Insert the admin account that must always be present

    The password comes from ADMIN_USER_PASSWORD (see generate_env.py).

    Raises:
        RuntimeError: If the admin account cannot be created
    """
    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    from marketplace.data.core.user import User

    admin_email = os.environ.get('ADMIN_EMAIL', DEFAULT_ADMIN_EMAIL)
    admin_password = os.environ.get('ADMIN_USER_PASSWORD')
    if not admin_password:
        raise RuntimeError("ADMIN_USER_PASSWORD environment variable is required to create the admin user")

    try:
        User.find_or_create_from_dict(
            {
                'email': admin_email,
                'name': 'Administrator',
                'is_admin': True,
                'password': admin_password,
            },
            lookup_fields=['email'],
        )
    except Exception as e:
        raise RuntimeError(f"Critical data insertion failed: {e}") from e

    if not verify_critical_data():
        raise RuntimeError("Critical data insertion completed but verification failed")
    logger.info("Successfully inserted critical data")


def build_database(enable_debug_data=True, app=None):
    """
    Main build orchestrator

    Args:
        enable_debug_data (bool): Whether to insert debug data (default: True)
                                  Critical data is ALWAYS checked and inserted
        app: Application to build against; a new one is created if omitted
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (debug data: {enable_debug_data})")

        build_models()

        # Critical data must be present for the application to function
        try:
            insert_critical_data()
        except Exception as e:
            logger.error(f"Critical data insertion failed: {e}")
            logger.error("Application cannot continue without critical data. Stopping build.")
            raise

        if enable_debug_data:
            from marketplace.debug.debug_data_manager import insert_debug_data
            logger.info("Inserting debug data...")
            insert_debug_data(enabled=True)

        logger.info("Database build completed successfully")
