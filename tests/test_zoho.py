"""Zoho client error mapping and the authenticated proxy routes."""

import asyncio
import json
import unittest

import httpx
from api_support import ApiTestCase

from app.main import app
from app.services.zoho import ZohoClient, ZohoServiceError


def _client(handler, forward_auth: bool = False) -> ZohoClient:
    return ZohoClient(
        "http://zoho.test/",
        forward_auth=forward_auth,
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestZohoClient(unittest.TestCase):
    def test_success_returns_json(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=[{"id": "L1"}])

        data = asyncio.run(_client(handler).get_leads("session-token"))
        self.assertEqual(data, [{"id": "L1"}])
        self.assertEqual(seen["url"], "http://zoho.test/leads")
        self.assertIsNone(seen["auth"])

    def test_forward_auth_sends_bearer(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"id": "L2"})

        client = _client(handler, forward_auth=True)
        asyncio.run(client.create_lead({"name": "Acme"}, "session-token"))
        self.assertEqual(seen["auth"], "Bearer session-token")
        self.assertEqual(seen["body"], {"name": "Acme"})

    def test_error_status_maps_to_zoho_error(self) -> None:
        client = _client(lambda request: httpx.Response(500, text="boom"))
        with self.assertRaises(ZohoServiceError) as ctx:
            asyncio.run(client.get_accounts())
        self.assertEqual(ctx.exception.code, "ZOHO_ERROR")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_timeout_maps_to_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with self.assertRaises(ZohoServiceError) as ctx:
            asyncio.run(_client(handler).get_leads())
        self.assertEqual(ctx.exception.code, "TIMEOUT")

    def test_connection_failure_maps_to_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(ZohoServiceError) as ctx:
            asyncio.run(_client(handler).get_leads())
        self.assertEqual(ctx.exception.code, "NETWORK_ERROR")

    def test_ping_reports_reachability(self) -> None:
        up = _client(lambda request: httpx.Response(200, json={"status": "ok"}))
        ok, latency = asyncio.run(up.ping(1.0))
        self.assertTrue(ok)
        self.assertIsNotNone(latency)

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        self.assertEqual(asyncio.run(_client(refuse).ping(1.0)), (False, None))


class FailingZohoClient:
    async def get_leads(self, auth_token=None):
        raise ZohoServiceError("TIMEOUT", "Request to Zoho service timed out")


class TestZohoRoutes(ApiTestCase):
    def test_requires_session(self) -> None:
        self.assertEqual(self.client.get("/api/zoho/leads").status_code, 401)

    def test_leads_and_accounts_are_wrapped_in_data(self) -> None:
        self.make_user("alice")
        self.login("alice")
        self.assertEqual(self.client.get("/api/zoho/leads").json(), {"data": [{"id": "L1"}]})
        self.assertEqual(self.client.get("/api/zoho/accounts").json(), {"data": [{"id": "A1"}]})

    def test_create_lead(self) -> None:
        self.make_user("alice")
        self.login("alice")
        resp = self.client.post("/api/zoho/create-lead", json={"name": "Acme"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["name"], "Acme")
        self.assertEqual(self.zoho.calls[-1][1], {"name": "Acme"})

    def test_create_lead_without_body_is_400(self) -> None:
        self.make_user("alice")
        self.login("alice")
        resp = self.client.post("/api/zoho/create-lead", json={})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["message"], "Lead data is required")

    def test_upstream_failure_is_502(self) -> None:
        app.state.zoho_client = FailingZohoClient()
        self.make_user("alice")
        self.login("alice")
        resp = self.client.get("/api/zoho/leads")
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(
            resp.json(), {"error": {"code": "TIMEOUT", "message": "Zoho service unavailable"}}
        )
