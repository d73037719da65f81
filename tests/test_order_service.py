# tests/test_order_service.py
"""Tests for checkout and the order status machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import patch
from fastapi import HTTPException
from conftest import make_user, principal_for
from dealership.models.activity_log import ActivityLog
from dealership.models.banned_unique_id import BannedUniqueId
from dealership.models.order import Order, OrderItem
from dealership.schemas.order import OrderCreate, OrderStatusUpdate
from dealership.services import order_service


def checkout(**overrides):
    payload = {
        "firstName": "Jean",
        "lastName": "Dupont",
        "phone": "06 01 02 03 04",
        "uniqueId": "12345",
        "items": [{
            "vehicleId": 1, "vehicleName": "Adder", "vehicleCategory": "Super",
            "vehiclePrice": 100000, "quantity": 2,
        }],
        "totalPrice": 200000,
    }
    payload.update(overrides)
    return OrderCreate(**payload)


def status(value, reason=None):
    return OrderStatusUpdate(status=value, cancellationReason=reason)


class TestCheckout:
    def test_creates_pending_order_with_items(self, db):
        order = order_service.create_order(db, checkout(), client_ip="10.0.0.1")
        assert order.status == "pending"
        assert order.phone == "0601020304"
        assert order.client_ip == "10.0.0.1"
        assert len(order.items) == 1
        assert order.items[0].quantity == 2

    def test_total_defaults_to_cart_sum(self, db):
        order = order_service.create_order(db, checkout(totalPrice=None))
        assert order.total_price == 200000

    @pytest.mark.parametrize("overrides", [
        {"firstName": ""},
        {"items": []},
        {"lastName": "Dupont3"},
        {"phone": "12-34"},
        {"uniqueId": "12a45"},
        {"uniqueId": "١٢٣٤٥"},
        {"phone": "١٢٣٤٥٦٧٨"},
        {"firstName": "   "},
        {"lastName": "\t"},
    ])
    def test_invalid_checkout_is_400(self, db, overrides):
        with pytest.raises(HTTPException) as exc:
            order_service.create_order(db, checkout(**overrides))
        assert exc.value.status_code == 400
        assert db.query(Order).count() == 0

    def test_banned_unique_id_never_creates_an_order(self, db):
        db.add(BannedUniqueId(unique_id="12345", reason="fraude", banned_by="admin"))
        db.commit()

        with pytest.raises(HTTPException) as exc:
            order_service.create_order(db, checkout())
        assert exc.value.status_code == 403
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0

    def test_second_pending_order_is_409(self, db):
        order_service.create_order(db, checkout())
        with pytest.raises(HTTPException) as exc:
            order_service.create_order(db, checkout())
        assert exc.value.status_code == 409
        assert db.query(Order).count() == 1

    def test_new_order_allowed_once_previous_is_processed(self, db, admin):
        first = order_service.create_order(db, checkout())
        order_service.update_order_status(db, first.id, status("delivered"), admin)
        second = order_service.create_order(db, checkout())
        assert second.id != first.id


class TestStatusTransitions:
    def test_deliver_stamps_validator(self, db, admin):
        order = order_service.create_order(db, checkout())
        updated = order_service.update_order_status(db, order.id, status("delivered"), admin)
        assert updated.status == "delivered"
        assert updated.validated_by == "admin"
        assert updated.validated_at is not None

        entry = db.query(ActivityLog).one()
        assert entry.details["Ancien statut"] == {"old": "pending", "new": "delivered"}
        assert entry.details["Détails véhicules"]["new"] == "Adder (2x)"

    def test_cancel_requires_reason(self, db, admin):
        order = order_service.create_order(db, checkout())
        with pytest.raises(HTTPException) as exc:
            order_service.update_order_status(db, order.id, status("cancelled"), admin)
        assert exc.value.status_code == 400

        updated = order_service.update_order_status(db, order.id, status("cancelled", "delivery_issue"), admin)
        assert updated.cancellation_reason == "delivery_issue"
        assert db.query(ActivityLog).one().details["Raison d'annulation"]["new"] == "Souci de livraison"

    def test_terminal_orders_are_409(self, db, admin):
        order = order_service.create_order(db, checkout())
        order_service.update_order_status(db, order.id, status("delivered"), admin)
        with pytest.raises(HTTPException) as exc:
            order_service.update_order_status(db, order.id, status("cancelled", "customer_cancelled"), admin)
        assert exc.value.status_code == 409

    @pytest.mark.parametrize("value", ["pending", "shipped", None])
    def test_bad_target_status_is_400(self, db, admin, value):
        order = order_service.create_order(db, checkout())
        with pytest.raises(HTTPException) as exc:
            order_service.update_order_status(db, order.id, status(value), admin)
        assert exc.value.status_code == 400

    def test_missing_order_is_404(self, db, admin):
        with pytest.raises(HTTPException) as exc:
            order_service.update_order_status(db, 999, status("delivered"), admin)
        assert exc.value.status_code == 404

    def test_denied_validation_leaves_order_pending(self, db):
        order = order_service.create_order(db, checkout())
        clerk = make_user(db, "clerk", permissions={"orders": {"view": True, "validate": False, "cancel": True}})

        with pytest.raises(HTTPException) as exc:
            order_service.update_order_status(db, order.id, status("delivered"), principal_for(clerk))
        assert exc.value.status_code == 403

        db.expire_all()
        assert db.get(Order, order.id).status == "pending"
        assert db.query(ActivityLog).count() == 0


class TestQueriesAndDelete:
    def test_list_filters_by_status(self, db, admin):
        first = order_service.create_order(db, checkout(uniqueId="1"))
        order_service.create_order(db, checkout(uniqueId="2"))
        order_service.update_order_status(db, first.id, status("delivered"), admin)

        assert len(order_service.list_orders(db, status="pending")) == 1
        assert len(order_service.list_orders(db, status="all")) == 2

    def test_delete_cascades_items(self, db, admin):
        order = order_service.create_order(db, checkout())
        order_service.delete_order(db, order.id, admin)
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0
        assert db.query(ActivityLog).one().details["Client"] == {"old": "Jean Dupont", "new": "Supprimé"}

    def test_snapshot_is_plain_data(self, db):
        order = order_service.create_order(db, checkout())
        snapshot = order_service.order_snapshot(order)
        assert snapshot["unique_id"] == "12345"
        assert snapshot["items"][0]["vehicle_name"] == "Adder"


class TestConcurrentCheckout:
    def test_pending_check_is_not_atomic(self, session_factory):
        """Two checkouts that both read before either commits each get an order.

        The one-pending-order rule is a read-then-write check with no lock or
        unique constraint; this pins that behaviour down.
        """
        first, second = session_factory(), session_factory()
        real_check = order_service.has_pending_order
        interleaved = []

        def check_then_let_other_checkout_run(db, unique_id):
            pending = real_check(db, unique_id)
            if not interleaved:
                interleaved.append(unique_id)
                order_service.create_order(second, checkout())
            return pending

        try:
            with patch("dealership.services.order_service.has_pending_order",
                       side_effect=check_then_let_other_checkout_run):
                order_service.create_order(first, checkout())

            pending = first.query(Order).filter(Order.unique_id == "12345", Order.status == "pending").count()
            assert pending == 2
        finally:
            first.close()
            second.close()
