"""
Tests for the buyer order endpoints and the response envelope
"""
from marketplace import db
from marketplace.data.catalog.listing import Listing

ENVELOPE_KEYS = {'success', 'code', 'message', 'data', 'error'}


def assert_envelope(response, code, success):
    body = response.get_json()
    assert response.status_code == code
    assert set(body) == ENVELOPE_KEYS
    assert body['code'] == code
    assert body['success'] is success
    return body


def stock(app, listing_id):
    with app.app_context():
        return db.session.get(Listing, listing_id).available_qty


# ========== Auth ==========

def test_requires_login(client):
    body = assert_envelope(client.get('/orders/me'), 401, False)
    assert body['error'] == 'unauthorized'

    body = assert_envelope(client.post('/orders/me', json={'listingId': 'x'}), 401, False)
    assert body['data'] is None


def test_login_and_me(client):
    body = assert_envelope(
        client.post('/auth/login', json={'email': 'buyer@example.com', 'password': 'wrong'}), 401, False
    )
    assert body['error'] == 'invalid_credentials'

    body = assert_envelope(
        client.post('/auth/login', json={'email': 'buyer@example.com', 'password': 'test-pass-123456'}), 200, True
    )
    assert body['data']['email'] == 'buyer@example.com'

    body = assert_envelope(client.get('/auth/me'), 200, True)
    assert body['data']['name'] == 'Bea Buyer'

    assert_envelope(client.post('/auth/logout'), 200, True)
    assert_envelope(client.get('/auth/me'), 401, False)


def test_login_missing_credentials(client):
    body = assert_envelope(client.post('/auth/login', json={'email': 'buyer@example.com'}), 400, False)
    assert body['error'] == 'missing_credentials'


def test_csrf_token_endpoint(client):
    body = assert_envelope(client.get('/auth/csrf'), 200, True)
    assert body['data']['csrfToken']


# ========== Create ==========

def test_create_orders_fan_out(app, ids, buyer_client, mailbox):
    response = buyer_client.post('/orders/me', json={
        'listingId': ids['stocked'],
        'quantity': 3,
        'notes': 'blue ones please',
        'transactionId': 'txn_123',
    })
    body = assert_envelope(response, 201, True)

    assert len(body['data']) == 3
    for order in body['data']:
        assert order['quantity'] == 1
        assert order['totalPrice'] == '12.50'
        assert order['status'] == 'PENDING'
        assert order['notes'] == 'blue ones please'
        assert order['transactionId'] == 'txn_123'
        assert order['listingId'] == ids['stocked']
        assert order['userId'] == ids['buyer']
        assert order['listing']['vendor']['id'] == ids['vendor']
    assert stock(app, ids['stocked']) == 2


def test_create_accepts_snake_case_and_defaults_quantity(app, ids, buyer_client, mailbox):
    body = assert_envelope(
        buyer_client.post('/orders/me', json={'listing_id': ids['stocked'], 'transaction_id': 'txn_7'}), 201, True
    )
    assert len(body['data']) == 1
    assert body['data'][0]['transactionId'] == 'txn_7'
    assert stock(app, ids['stocked']) == 4


def test_create_error_reasons(app, ids, buyer_client, mailbox):
    cases = [
        ({'quantity': 1}, 400, 'invalid_listing_id'),
        ({'listingId': ids['stocked'], 'quantity': 0}, 400, 'invalid_quantity'),
        ({'listingId': ids['stocked'], 'quantity': '3'}, 400, 'invalid_quantity'),
        ({'listingId': ids['stocked'], 'quantity': True}, 400, 'invalid_quantity'),
        ({'listingId': 'nope'}, 404, 'listing_not_found'),
        ({'listingId': ids['unavailable']}, 400, 'listing_unavailable'),
        ({'listingId': ids['unpriced']}, 400, 'no_price'),
    ]
    for payload, code, reason in cases:
        body = assert_envelope(buyer_client.post('/orders/me', json=payload), code, False)
        assert body['error'] == reason, payload

    assert stock(app, ids['stocked']) == 5
    assert mailbox.sent == []


def test_create_insufficient_stock_reports_available(app, ids, buyer_client, mailbox):
    body = assert_envelope(
        buyer_client.post('/orders/me', json={'listingId': ids['stocked'], 'quantity': 6}), 400, False
    )
    assert body['error'] == 'insufficient_quantity'
    assert body['message'] == 'Only 5 items available'
    assert body['data'] == {'availableQty': 5, 'requested': 6}
    assert stock(app, ids['stocked']) == 5


def test_non_object_body_rejected(buyer_client):
    body = assert_envelope(buyer_client.post('/orders/me', json=[1, 2]), 400, False)
    assert body['error'] == 'invalid_payload'


def test_notification_failure_does_not_affect_response(app, ids, buyer_client, failing_sender):
    body = assert_envelope(
        buyer_client.post('/orders/me', json={'listingId': ids['stocked'], 'quantity': 2}), 201, True
    )
    assert len(body['data']) == 2
    assert stock(app, ids['stocked']) == 3


# ========== Read ==========

def test_list_stats_and_get(app, ids, buyer_client, mailbox):
    created = buyer_client.post('/orders/me', json={'listingId': ids['on_demand'], 'quantity': 3}).get_json()['data']
    first_id = created[0]['id']
    buyer_client.put(f'/orders/me/{first_id}', json={'status': 'CANCELLED'})

    body = assert_envelope(buyer_client.get('/orders/me?limit=2'), 200, True)
    assert body['data']['meta'] == {'total': 3, 'page': 1, 'limit': 2, 'totalPages': 2}
    assert len(body['data']['items']) == 2

    body = assert_envelope(buyer_client.get('/orders/me?status=CANCELLED'), 200, True)
    assert [o['id'] for o in body['data']['items']] == [first_id]

    body = assert_envelope(buyer_client.get('/orders/me/stats'), 200, True)
    assert body['data'] == {
        'total': 3,
        'byStatus': {'pending': 2, 'confirmed': 0, 'delivered': 0, 'cancelled': 1},
    }

    body = assert_envelope(buyer_client.get(f'/orders/me/{first_id}'), 200, True)
    assert body['data']['status'] == 'CANCELLED'


def test_list_rejects_unknown_status_filter(buyer_client):
    body = assert_envelope(buyer_client.get('/orders/me?status=LOST'), 400, False)
    assert body['error'] == 'invalid_status'

    body = assert_envelope(buyer_client.get('/orders/me?status=pending'), 400, False)
    assert body['error'] == 'invalid_status'


def test_cannot_read_other_buyers_order(app, ids, buyer_client, login_as, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked']}).get_json()['data'][0]['id']

    other = login_as('other@example.com')
    body = assert_envelope(other.get(f'/orders/me/{order_id}'), 404, False)
    assert body['error'] == 'order_not_found'
    assert_envelope(other.put(f'/orders/me/{order_id}', json={'status': 'CANCELLED'}), 404, False)
    assert stock(app, ids['stocked']) == 4


# ========== Update ==========

def test_buyer_cancel_round_trip(app, ids, buyer_client, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked']}).get_json()['data'][0]['id']
    assert stock(app, ids['stocked']) == 4

    body = assert_envelope(buyer_client.put(f'/orders/me/{order_id}', json={'status': 'CANCELLED'}), 200, True)
    assert body['data']['status'] == 'CANCELLED'
    assert stock(app, ids['stocked']) == 5

    body = assert_envelope(buyer_client.put(f'/orders/me/{order_id}', json={'status': 'CANCELLED'}), 400, False)
    assert body['error'] == 'order_already_cancelled'
    assert stock(app, ids['stocked']) == 5


def test_buyer_cannot_confirm(app, ids, buyer_client, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked']}).get_json()['data'][0]['id']
    body = assert_envelope(buyer_client.put(f'/orders/me/{order_id}', json={'status': 'CONFIRMED'}), 403, False)
    assert body['error'] == 'invalid_status_change'


def test_buyer_update_notes_only(app, ids, buyer_client, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked'], 'notes': 'a'}).get_json()['data'][0]['id']
    body = assert_envelope(
        buyer_client.put(f'/orders/me/{order_id}', json={'notes': 'b', 'transactionId': 'txn_2'}), 200, True
    )
    assert body['data']['notes'] == 'b'
    assert body['data']['transactionId'] == 'txn_2'
    assert body['data']['status'] == 'PENDING'


def test_buyer_update_rejects_unknown_fields(app, ids, buyer_client, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked']}).get_json()['data'][0]['id']
    body = assert_envelope(buyer_client.put(f'/orders/me/{order_id}', json={'totalPrice': '0.01'}), 400, False)
    assert body['error'] == 'invalid_payload'


# ========== Admin ==========

def test_admin_delete(app, ids, buyer_client, admin_client, mailbox):
    order_id = buyer_client.post('/orders/me', json={'listingId': ids['stocked']}).get_json()['data'][0]['id']

    body = assert_envelope(buyer_client.delete(f'/orders/{order_id}'), 403, False)
    assert body['error'] == 'admin_required'

    assert_envelope(admin_client.delete(f'/orders/{order_id}'), 200, True)
    assert_envelope(admin_client.delete(f'/orders/{order_id}'), 404, False)
    assert stock(app, ids['stocked']) == 4


# ========== Errors ==========

def test_unknown_route_uses_envelope(client):
    body = assert_envelope(client.get('/no/such/route'), 404, False)
    assert body['error'] == 'not_found'


def test_unexpected_error_details_hidden_in_production(app, ids, buyer_client, monkeypatch):
    from marketplace.services.orders.order_query_service import OrderQueryService

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(OrderQueryService, 'stats_for_buyer', explode)

    body = assert_envelope(buyer_client.get('/orders/me/stats'), 500, False)
    assert body['error'] == {'reason': 'server_error', 'name': 'RuntimeError', 'message': 'boom'}

    app.config['APP_ENV'] = 'production'
    body = assert_envelope(buyer_client.get('/orders/me/stats'), 500, False)
    assert body['error'] == 'server_error'
