"""
Pytest configuration and fixtures for the order API tests
"""
import os

os.environ.setdefault('MARKETPLACE_LOG_TO_FILE', 'False')

from decimal import Decimal  # noqa: E402
import pytest  # noqa: E402
from marketplace import create_app  # noqa: E402
from marketplace import db as _db  # noqa: E402

PASSWORD = 'test-pass-123456'


class RecordingSender:
    """Mail sender double that keeps every message instead of sending it"""

    def __init__(self):
        self.sent = []

    def send(self, recipients, subject, body, html=None):
        self.sent.append({'recipients': list(recipients), 'subject': subject, 'body': body, 'html': html})
        return True


class FailingSender:
    def send(self, recipients, subject, body, html=None):
        raise RuntimeError("smtp relay exploded")


def make_app(db_path, **overrides):
    config = {
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{db_path}",
        'SQLALCHEMY_ENGINE_OPTIONS': {'connect_args': {'timeout': 30, 'check_same_thread': False}},
        'TESTING': True,
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'NOTIFICATION_MODE': 'inline',
        'APP_ENV': 'testing',
        'SMTP_HOST': None,
        'SESSION_COOKIE_SECURE': False,
    }
    config.update(overrides)
    return create_app(config)


def seed_marketplace():
    """Insert users, vendors and listings; return their ids"""
    from marketplace.data.core.user import User
    from marketplace.data.core.vendor import Vendor
    from marketplace.data.catalog.listing import Listing

    def user(email, name, is_admin=False):
        return User.create_from_dict(
            {'email': email, 'name': name, 'is_admin': is_admin, 'password': PASSWORD},
            commit=False,
        )

    buyer = user('buyer@example.com', 'Bea Buyer')
    other_buyer = user('other@example.com', 'Oscar Other')
    owner = user('owner@example.com', 'Olive Owner')
    member = user('member@example.com', 'Max Member')
    outsider = user('outsider@example.com', 'Una Outsider')
    admin = user('admin@example.com', 'Ada Admin', is_admin=True)

    vendor = Vendor(name='Clay & Co', contact_email='shop@clay.example.com')
    vendor.owners = [owner]
    vendor.members = [member]
    other_vendor = Vendor(name='Elsewhere Goods')
    other_vendor.owners = [outsider]
    _db.session.add_all([vendor, other_vendor])
    _db.session.flush()

    def listing(vendor_id, name, **fields):
        item = Listing(vendor_id=vendor_id, name=name, **fields)
        _db.session.add(item)
        return item

    stocked = listing(vendor.id, 'Stoneware Mug', price=Decimal('12.50'), managed=True,
                      inventory_type='STOCK', available_qty=5)
    on_demand = listing(vendor.id, 'Poster Print', price=Decimal('30.00'), managed=True,
                        inventory_type='ON_DEMAND', available_qty=None)
    unmanaged = listing(vendor.id, 'Loose Tea', price=Decimal('8.00'), managed=False,
                        inventory_type='STOCK', available_qty=3)
    unpriced = listing(vendor.id, 'Sample Pack', price=None, managed=False,
                       inventory_type='ON_DEMAND')
    unavailable = listing(vendor.id, 'Retired Bowl', price=Decimal('20.00'), is_available=False,
                          managed=True, inventory_type='STOCK', available_qty=10)
    foreign = listing(other_vendor.id, 'Foreign Lamp', price=Decimal('55.00'), managed=True,
                      inventory_type='STOCK', available_qty=10)
    _db.session.commit()

    return {
        'buyer': buyer.id,
        'other_buyer': other_buyer.id,
        'owner': owner.id,
        'member': member.id,
        'outsider': outsider.id,
        'admin': admin.id,
        'vendor': vendor.id,
        'other_vendor': other_vendor.id,
        'stocked': stocked.id,
        'on_demand': on_demand.id,
        'unmanaged': unmanaged.id,
        'unpriced': unpriced.id,
        'unavailable': unavailable.id,
        'foreign': foreign.id,
    }


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create Flask application backed by a fresh SQLite file"""
    app = make_app(tmp_path / 'marketplace-test.db')
    with app.app_context():
        _db.create_all()
        app.config['SEED'] = seed_marketplace()
    yield app
    app.extensions['notifier'].shutdown()
    with app.app_context():
        _db.session.remove()
        _db.engine.dispose()


@pytest.fixture(scope='function')
def ids(app):
    return app.config['SEED']


@pytest.fixture(scope='function')
def mailbox(app):
    sender = RecordingSender()
    app.extensions['notifier'].sender = sender
    return sender


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def login(client, email, password=PASSWORD):
    """Helper function to login a user"""
    return client.post('/auth/login', json={'email': email, 'password': password})


@pytest.fixture(scope='function')
def buyer_client(app):
    client = app.test_client()
    login(client, 'buyer@example.com')
    return client


@pytest.fixture(scope='function')
def owner_client(app):
    client = app.test_client()
    login(client, 'owner@example.com')
    return client


@pytest.fixture(scope='function')
def member_client(app):
    client = app.test_client()
    login(client, 'member@example.com')
    return client


@pytest.fixture(scope='function')
def outsider_client(app):
    client = app.test_client()
    login(client, 'outsider@example.com')
    return client


@pytest.fixture(scope='function')
def admin_client(app):
    client = app.test_client()
    login(client, 'admin@example.com')
    return client


@pytest.fixture(scope='function')
def failing_sender(app):
    sender = FailingSender()
    app.extensions['notifier'].sender = sender
    return sender


@pytest.fixture(scope='function')
def app_factory(tmp_path):
    """Build extra applications with config overrides, without tables"""
    created = []

    def factory(**overrides):
        extra = make_app(tmp_path / f'extra-{len(created)}.db', **overrides)
        created.append(extra)
        return extra

    yield factory
    for extra in created:
        extra.extensions['notifier'].shutdown()


@pytest.fixture(scope='function')
def login_as(app):
    """Return a test client logged in as the given seeded user"""
    def factory(email):
        client = app.test_client()
        login(client, email)
        return client
    return factory
