# tests/test_api.py
"""End-to-end tests through the FastAPI app (TestClient + in-memory SQLite)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import add_vehicle, auth_headers, make_user
from dealership.models.order import Order

CHECKOUT = {
    "firstName": "Jean",
    "lastName": "Dupont",
    "phone": "0601020304",
    "uniqueId": "12345",
    "items": [{
        "vehicleId": 1, "vehicleName": "Adder", "vehicleCategory": "Super",
        "vehiclePrice": 100000, "quantity": 2,
    }],
    "totalPrice": 200000,
}


class TestShell:
    def test_ping(self, client):
        assert client.get("/api/ping").json() == {"message": "ping"}

    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["database"] == "ok"
        assert body["webhooks"] == {"generic": False, "discord": False}

    def test_errors_use_error_key(self, client):
        r = client.get("/api/vehicles/999")
        assert r.status_code == 404
        assert r.json() == {"error": "❌ Véhicule introuvable"}

    def test_validation_errors_are_400(self, client, admin_headers):
        r = client.post("/api/vehicles", json={"name": "Adder", "price": "cher"}, headers=admin_headers)
        assert r.status_code == 400
        assert "price" in r.json()["error"]


class TestAuth:
    def test_login_sets_cookie_and_returns_token(self, client):
        r = client.post("/api/auth/login", json={"username": "admin", "accessKey": "admin-key"})
        assert r.status_code == 200
        body = r.json()
        assert body["token"]
        assert body["user"]["username"] == "admin"
        assert body["user"]["permissions"]["users"]["delete"] is True
        assert "adminToken" in r.cookies

        # cookie alone authenticates
        assert client.get("/api/auth/me").status_code == 200

    def test_bad_credentials(self, client):
        r = client.post("/api/auth/login", json={"username": "admin", "accessKey": "wrong"})
        assert r.status_code == 403
        assert r.json()["error"] == "❌ Pseudonyme ou clé d'accès incorrect"
        assert client.post("/api/auth/login", json={"username": "admin"}).status_code == 400

    def test_me_requires_token(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_invalid_token(self, client):
        r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert r.status_code == 403

    def test_revoked_user(self, client, db):
        user = make_user(db, "revoked", permissions={})
        r = client.get("/api/auth/me", headers=auth_headers(user))
        assert r.status_code == 403
        assert "révoqué" in r.json()["error"]

    def test_deleted_user_token_rejected(self, client, db):
        user = make_user(db, "gone")
        headers = auth_headers(user)
        db.delete(user)
        db.commit()
        r = client.get("/api/auth/me", headers=headers)
        assert r.status_code == 403
        assert r.json()["error"] == "❌ Votre compte n'existe plus"

    def test_logout_clears_cookie(self, client):
        client.post("/api/auth/login", json={"username": "admin", "accessKey": "admin-key"})
        client.post("/api/auth/logout")
        assert client.get("/api/auth/me").status_code == 401


class TestVehicles:
    def test_public_listing(self, client, db):
        add_vehicle(db, name="Adder", price=1000000)
        add_vehicle(db, name="Sultan", category="Sports", price=250000)
        r = client.get("/api/vehicles", params={"sortBy": "price", "sortOrder": "ASC"})
        assert r.status_code == 200
        assert r.headers["cache-control"] == "public, max-age=300"
        assert [v["name"] for v in r.json()["vehicles"]] == ["Sultan", "Adder"]
        assert r.json()["total"] == 2

    def test_categories_public_vs_admin(self, client, admin_headers):
        public = client.get("/api/vehicles/categories").json()
        assert "Super" in public and isinstance(public[0], str)
        rows = client.get("/api/vehicles/categories", headers=admin_headers).json()
        assert {"name", "is_active"} <= set(rows[0])

    def test_create_is_gated(self, client, db, admin_headers):
        body = {"name": "Zentorno", "category": "Super", "price": 725000, "trunk_weight": 40,
                "image_url": "https://img/z.png", "seats": 2}
        assert client.post("/api/vehicles", json=body).status_code == 401

        viewer = make_user(db, "viewer")
        r = client.post("/api/vehicles", json=body, headers=auth_headers(viewer))
        assert r.status_code == 403

        r = client.post("/api/vehicles", json=body, headers=admin_headers)
        assert r.status_code == 201
        assert client.get(f"/api/vehicles/{r.json()['id']}").json()["name"] == "Zentorno"

    def test_max_pages(self, client, db):
        add_vehicle(db, name="A", page_catalog=2)
        assert client.get("/api/vehicles/max-pages").json() == {"Super": 2}


class TestOrders:
    def test_checkout_scenario(self, client):
        r = client.post("/api/orders", json=CHECKOUT)
        assert r.status_code == 201
        body = r.json()
        assert body["id"]
        assert body["status"] == "pending"
        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 2

    def test_non_ascii_digits_and_blank_names_rejected(self, client, db):
        for overrides in ({"uniqueId": "١٢٣٤٥"}, {"phone": "١٢٣٤٥٦٧٨"}, {"firstName": "   "}):
            r = client.post("/api/orders", json=dict(CHECKOUT, **overrides))
            assert r.status_code == 400
        assert db.query(Order).count() == 0

    def test_duplicate_pending_checkout(self, client):
        client.post("/api/orders", json=CHECKOUT)
        r = client.post("/api/orders", json=CHECKOUT)
        assert r.status_code == 409
        assert "en attente" in r.json()["error"]

    def test_validate_denied_leaves_status(self, client, db, admin_headers):
        order_id = client.post("/api/orders", json=CHECKOUT).json()["id"]
        clerk = make_user(db, "clerk", permissions={"orders": {"view": True, "validate": False}})

        r = client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"},
                       headers=auth_headers(clerk))
        assert r.status_code == 403

        assert client.get(f"/api/orders/{order_id}", headers=admin_headers).json()["status"] == "pending"

    def test_admin_delivers(self, client, admin_headers):
        order_id = client.post("/api/orders", json=CHECKOUT).json()["id"]
        r = client.put(f"/api/orders/{order_id}/status", json={"status": "delivered"}, headers=admin_headers)
        assert r.status_code == 200
        assert r.json()["validated_by"] == "admin"

        again = client.put(f"/api/orders/{order_id}/status",
                           json={"status": "cancelled", "cancellationReason": "customer_cancelled"},
                           headers=admin_headers)
        assert again.status_code == 409

    def test_list_requires_orders_view(self, client, db, admin_headers):
        client.post("/api/orders", json=CHECKOUT)
        assert client.get("/api/orders").status_code == 401
        nobody = make_user(db, "nobody", permissions={"vehicles": {"view": True}})
        assert client.get("/api/orders", headers=auth_headers(nobody)).status_code == 403
        assert len(client.get("/api/orders", headers=admin_headers).json()) == 1

    def test_delete(self, client, db, admin_headers):
        order_id = client.post("/api/orders", json=CHECKOUT).json()["id"]
        assert client.delete(f"/api/orders/{order_id}", headers=admin_headers).status_code == 200
        assert db.query(Order).count() == 0


class TestModerationFlow:
    def test_banned_id_cannot_order(self, client, admin_headers):
        r = client.post("/api/moderation/ban-id", json={"uniqueId": "12345", "reason": "fraude"},
                        headers=admin_headers)
        assert r.status_code == 201

        assert client.post("/api/orders", json=CHECKOUT).status_code == 403
        assert client.get("/api/moderation/banned-ids", headers=admin_headers).json()[0]["unique_id"] == "12345"

        r = client.request("DELETE", "/api/moderation/ban-id", json={"uniqueId": "12345"}, headers=admin_headers)
        assert r.status_code == 200
        assert client.post("/api/orders", json=CHECKOUT).status_code == 201


class TestUsersAndLogs:
    def test_user_lifecycle(self, client, admin_headers):
        r = client.post("/api/users", json={"username": "vendeur", "access_key": "k1", "unique_id": "9"},
                        headers=admin_headers)
        assert r.status_code == 201
        assert "access_key" not in r.json()
        user_id = r.json()["id"]

        r = client.put(f"/api/users/{user_id}", json={}, headers=admin_headers)
        assert r.status_code == 400

        r = client.put(f"/api/users/{user_id}", json={"username": "admin"}, headers=admin_headers)
        assert r.status_code == 409

        assert client.delete(f"/api/users/{user_id}", headers=admin_headers).status_code == 200

    def test_last_admin_protected(self, client, admin_user, admin_headers):
        r = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
        assert r.status_code == 400

    def test_activity_logs(self, client, admin_headers):
        client.put("/api/announcements", json={"content": "Promo", "is_active": True}, headers=admin_headers)
        assert client.get("/api/announcements").json()["content"] == "Promo"

        logs = client.get("/api/activity-logs", headers=admin_headers).json()
        assert logs[0]["resource_type"] == "announcements"

        page = client.get("/api/activity-logs/paginated", params={"page": 1, "pageSize": 10},
                          headers=admin_headers).json()
        assert page["pagination"]["total"] == 1

        r = client.get("/api/activity-logs/paginated", params={"pageSize": 500}, headers=admin_headers)
        assert r.status_code == 400

        audit = client.get("/api/audit-logs", params={"search": "admin", "searchType": "username"},
                           headers=admin_headers).json()
        assert audit["pagination"]["total"] == 1

    def test_announcement_empty(self, client):
        r = client.get("/api/announcements")
        assert r.status_code == 200
        assert r.json() is None
