# tests/test_webhook_service.py
"""Tests for webhook payload building and best-effort delivery."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import httpx
import pytest
from datetime import datetime, timezone
from unittest.mock import patch
from dealership.config import settings
from dealership.services.webhook_service import (
    NEW_ORDER, ORDER_CANCELLED, ORDER_DELIVERED,
    build_discord_payload, build_generic_payload, format_amount,
    format_french_datetime, notify_order_event,
)

GENERIC_URL = "http://hooks.test/generic"
DISCORD_URL = "http://hooks.test/discord"
NOW = datetime(2026, 10, 17, 14, 5, tzinfo=timezone.utc)

ORDER = {
    "id": 42,
    "unique_id": "12345",
    "first_name": "Jean",
    "last_name": "Dupont",
    "phone": "0601020304",
    "status": "pending",
    "total_price": 1250000,
    "cancellation_reason": None,
    "created_at": datetime(2026, 10, 17, 14, 0),
    "items": [
        {"vehicle_name": "Adder", "vehicle_category": "Super", "vehicle_price": 1000000, "quantity": 1},
        {"vehicle_name": "Faggio", "vehicle_category": "Motos", "vehicle_price": 125000, "quantity": 2},
    ],
}

_RealAsyncClient = httpx.AsyncClient


def mock_client(handler):
    """Replacement for httpx.AsyncClient that routes every request to `handler`."""
    def factory(**kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)
    return factory


class TestFormatting:
    def test_amount(self):
        assert format_amount(1250000) == "1 250 000$"
        assert format_amount(900) == "900$"

    def test_french_datetime(self):
        assert format_french_datetime(NOW) == "samedi 17 octobre 2026 à 14:05"


class TestPayloads:
    def test_generic_new_order(self):
        payload = build_generic_payload(NEW_ORDER, ORDER, now=NOW)
        assert payload["type"] == "new_order"
        assert payload["order"]["uniqueId"] == "12345"
        assert payload["order"]["createdAt"] == "2026-10-17T14:00:00"
        assert len(payload["order"]["items"]) == 2
        assert "validatedBy" not in payload["order"]

    def test_generic_cancelled_carries_reason_text(self):
        order = dict(ORDER, status="cancelled", cancellation_reason="inappropriate_behavior")
        payload = build_generic_payload(ORDER_CANCELLED, order, processed_by="admin", now=NOW)
        assert payload["order"]["cancellationReason"] == "Comportement du client inapproprié"
        assert payload["order"]["validatedBy"].startswith("admin (")

    def test_discord_colors(self):
        colors = {e: build_discord_payload(e, ORDER, "admin", NOW)["embeds"][0]["color"]
                  for e in (NEW_ORDER, ORDER_DELIVERED, ORDER_CANCELLED)}
        assert colors == {NEW_ORDER: 16766976, ORDER_DELIVERED: 65280, ORDER_CANCELLED: 16711680}

    def test_discord_fields(self):
        embed = build_discord_payload(NEW_ORDER, ORDER, now=NOW)["embeds"][0]
        values = {f["name"]: f["value"] for f in embed["fields"]}
        assert embed["title"] == "📦 Commande #42"
        assert values["💰 Total"] == "**1 250 000$**"
        assert "Faggio" in values["🚗 3 Véhicules"]


class TestNotify:
    @pytest.mark.asyncio
    async def test_nothing_configured(self):
        with patch.object(settings, "WEBHOOK_URL", None), patch.object(settings, "DISCORD_WEBHOOK_URL", None):
            assert await notify_order_event(NEW_ORDER, ORDER) == {"generic": None, "discord": None}

    @pytest.mark.asyncio
    async def test_posts_to_both_integrations(self):
        seen = []

        def handler(request):
            seen.append((str(request.url), json.loads(request.content)))
            return httpx.Response(204)

        with patch.object(settings, "WEBHOOK_URL", GENERIC_URL), \
                patch.object(settings, "DISCORD_WEBHOOK_URL", DISCORD_URL), \
                patch("dealership.services.webhook_service.httpx.AsyncClient", mock_client(handler)):
            result = await notify_order_event(ORDER_DELIVERED, ORDER, processed_by="admin")

        assert result == {"generic": True, "discord": True}
        assert [url for url, _ in seen] == [GENERIC_URL, DISCORD_URL]
        assert seen[0][1]["type"] == "order_delivered"
        assert "embeds" in seen[1][1]

    @pytest.mark.asyncio
    async def test_failures_are_reported_not_raised(self):
        def handler(request):
            if "discord" in str(request.url):
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(500)

        with patch.object(settings, "WEBHOOK_URL", GENERIC_URL), \
                patch.object(settings, "DISCORD_WEBHOOK_URL", DISCORD_URL), \
                patch("dealership.services.webhook_service.httpx.AsyncClient", mock_client(handler)):
            result = await notify_order_event(NEW_ORDER, ORDER)

        assert result == {"generic": False, "discord": False}
