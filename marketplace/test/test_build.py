"""
Tests for the database build, debug seed data and the data insertion mixin
"""
from decimal import Decimal
import pytest
from marketplace import db
from marketplace.build import build_database, insert_critical_data, verify_critical_data
from marketplace.debug.debug_data_manager import insert_debug_data
from marketplace.data.core.user import User
from marketplace.data.core.vendor import Vendor
from marketplace.data.catalog.listing import Listing


def test_insert_debug_data(app, monkeypatch):
    monkeypatch.setenv('DEBUG_USER_PASSWORD', 'debug-pass-123')

    with app.app_context():
        summary = insert_debug_data()
        assert summary == {'status': 'inserted', 'users': 3, 'vendors': 1, 'listings': 3}

        vendor = Vendor.query.filter_by(name='Debug Goods Co.').one()
        assert vendor.staff_emails == ['owner@marketplace.local', 'member@marketplace.local']

        mug = db.session.get(Listing, '9a4f6c2e-3d8b-4b1a-8e5f-7c2a0d6b9e01')
        assert mug.price == Decimal('12.50')
        assert mug.tracks_stock
        assert not db.session.get(Listing, '9a4f6c2e-3d8b-4b1a-8e5f-7c2a0d6b9e02').tracks_stock

        buyer = User.query.filter_by(email='buyer@marketplace.local').one()
        assert buyer.check_password('debug-pass-123')

        # Second run finds the fixed ids and skips
        assert insert_debug_data() == {'status': 'skipped', 'reason': 'data_present'}
        assert Vendor.query.filter_by(name='Debug Goods Co.').count() == 1


def test_insert_debug_data_disabled_or_missing_file(app, tmp_path):
    with app.app_context():
        assert insert_debug_data(enabled=False) == {}
        result = insert_debug_data(debug_file=tmp_path / 'missing.json')
        assert result == {'status': 'skipped', 'reason': 'file_not_found'}


def test_critical_data_requires_admin_password(app, monkeypatch):
    monkeypatch.delenv('ADMIN_USER_PASSWORD', raising=False)
    monkeypatch.setenv('ADMIN_EMAIL', 'root@marketplace.local')

    with app.app_context():
        assert not verify_critical_data()
        with pytest.raises(RuntimeError):
            insert_critical_data()


def test_build_database(app, monkeypatch):
    monkeypatch.setenv('ADMIN_USER_PASSWORD', 'admin-pass-123')
    monkeypatch.setenv('DEBUG_USER_PASSWORD', 'debug-pass-123')

    build_database(enable_debug_data=True, app=app)

    with app.app_context():
        admin = User.query.filter_by(email='admin@marketplace.local').one()
        assert admin.is_admin
        assert admin.check_password('admin-pass-123')
        assert verify_critical_data()
        assert User.query.filter_by(email='buyer@marketplace.local').count() == 1

    # Rebuilding is a no-op for existing data
    build_database(enable_debug_data=True, app=app)
    with app.app_context():
        assert User.query.filter_by(email='admin@marketplace.local').count() == 1


def test_to_dict_renders_money_and_hides_password(app, ids):
    with app.app_context():
        listing = db.session.get(Listing, ids['stocked']).to_dict()
        assert listing['price'] == '12.50'
        assert listing['available_qty'] == 5
        assert 'created_at' in listing

        user = db.session.get(User, ids['buyer']).to_dict(include_timestamps=False)
        assert 'password_hash' not in user
        assert 'created_at' not in user
        assert user['email'] == 'buyer@example.com'


def test_find_or_create_from_dict(app):
    with app.app_context():
        user, created = User.find_or_create_from_dict({'email': 'buyer@example.com', 'name': 'Someone Else'})
        assert not created
        assert user.name == 'Bea Buyer'

        user, created = User.find_or_create_from_dict({'email': 'new@example.com', 'password': 'pw-123456'})
        assert created
        assert user.check_password('pw-123456')
