#!/usr/bin/env python3
"""
Debug Data Manager
Inserts the development seed data from debug_data.json

Handles:
- Loading the debug data JSON file
- Checking if data is already present
- Inserting users, then vendors (with owners/members), then listings
- Fail-fast error handling
"""

from decimal import Decimal
from pathlib import Path
import json
import os
from marketplace import db
from marketplace.logger import get_logger

logger = get_logger("marketplace.debug_data_manager")

DEBUG_DATA_FILE = Path(__file__).parent / 'debug_data.json'


def insert_debug_data(enabled=True, debug_file=DEBUG_DATA_FILE):
    """
    Insert debug data

    Args:
        enabled (bool): Whether to insert debug data (default: True)
        debug_file (Path): JSON file to load

    Returns:
        dict: Summary of inserted data

    Raises:
        Exception: If any debug data insertion fails (fail-fast)
    """
    if not enabled:
        logger.info("Debug data insertion is disabled")
        return {}

    debug_data = _load_debug_data_file(debug_file)
    if not debug_data:
        logger.info(f"No debug data file found at {debug_file}, skipping")
        return {'status': 'skipped', 'reason': 'file_not_found'}

    if _check_debug_data_present(debug_data):
        logger.info("Debug data already present, skipping")
        return {'status': 'skipped', 'reason': 'data_present'}

    try:
        users = _insert_users(debug_data.get('Users', {}))
        vendors = _insert_vendors(debug_data.get('Vendors', {}), users)
        listings = _insert_listings(debug_data.get('Listings', {}), vendors)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Failed to insert debug data: {e}")
        raise

    summary = {
        'status': 'inserted',
        'users': len(users),
        'vendors': len(vendors),
        'listings': len(listings),
    }
    logger.info(f"Debug data insertion completed: {summary}")
    return summary


def _load_debug_data_file(debug_file):
    debug_file = Path(debug_file)
    if not debug_file.exists():
        return None

    try:
        with open(debug_file, 'r') as f:
            data = json.load(f)
        logger.debug(f"Loaded debug data file: {debug_file}")
        return data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {debug_file}: {e}")
        raise


def _check_debug_data_present(debug_data):
    """Debug records carry fixed IDs; any hit means the seed already ran"""
    from marketplace.data.core.user import User

    for user_data in debug_data.get('Users', {}).values():
        if 'id' in user_data and db.session.get(User, user_data['id']) is not None:
            return True
    return False


def _insert_users(users_data):
    from marketplace.data.core.user import User

    password = os.environ.get('DEBUG_USER_PASSWORD')
    if not password:
        logger.warning("DEBUG_USER_PASSWORD not set - debug users will not be able to log in")

    users = {}
    for user_key, user_data in users_data.items():
        data = dict(user_data)
        if password:
            data['password'] = password
        user, _ = User.find_or_create_from_dict(data, lookup_fields=['email'], commit=False)
        users[user.email] = user
        logger.info(f"Inserted debug user: {user.email}")
    return users


def _insert_vendors(vendors_data, users):
    from marketplace.data.core.vendor import Vendor

    vendors = {}
    for vendor_key, vendor_data in vendors_data.items():
        vendor, _ = Vendor.find_or_create_from_dict(
            vendor_data,
            lookup_fields=['id'],
            skip_fields=['owners', 'members'],
            commit=False,
        )
        vendor.owners = [users[email] for email in vendor_data.get('owners', [])]
        vendor.members = [users[email] for email in vendor_data.get('members', [])]
        vendors[vendor_key] = vendor
        logger.info(f"Inserted debug vendor: {vendor.name}")
    return vendors


def _insert_listings(listings_data, vendors):
    from marketplace.data.catalog.listing import Listing

    listings = {}
    for listing_key, listing_data in listings_data.items():
        data = dict(listing_data)
        data['vendor_id'] = vendors[data.pop('vendor')].id
        if data.get('price') is not None:
            data['price'] = Decimal(data['price'])
        listing, _ = Listing.find_or_create_from_dict(data, lookup_fields=['id'], commit=False)
        listings[listing_key] = listing
        logger.info(f"Inserted debug listing: {listing.name} (qty={listing.available_qty})")
    return listings
