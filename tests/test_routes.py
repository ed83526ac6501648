"""
Tests for the HTTP surface (reorder trigger, CORS, access control).
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from discount_sorter.dependencies import get_shopify_client
from discount_sorter.main import create_app

from tests.fakes import COLLECTION_ID, FakeShopify, make_client, product

ENDPOINT = "/api/reorder-by-discount"
ORIGIN = "https://shop.example.com"


class HeldLock:
    """Stands in for an asyncio.Lock owned by another request."""

    def locked(self):
        return True


def build_client(settings, fake: FakeShopify) -> TestClient:
    app = create_app(settings)

    async def fake_client():
        async with make_client(fake.handler) as client:
            yield client

    app.dependency_overrides[get_shopify_client] = fake_client
    return TestClient(app)


@pytest.fixture
def fake():
    return FakeShopify(products=[
        product("A", ("80", "100")),
        product("B", ("50", "50")),
    ], sort_order="BEST_SELLING")


class TestHealth:
    def test_health(self, settings, fake):
        resp = build_client(settings, fake).get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_debug_hides_values(self, settings, fake):
        resp = build_client(settings, fake).get("/api/debug")
        assert resp.status_code == 200
        config = resp.json()["config"]
        assert config["shop"] == "set"
        assert config["admin_token"] == "set"
        assert config["shared_secret"] == "missing"
        assert "shpat_test" not in resp.text


class TestReorderEndpoint:
    def test_success(self, settings, fake):
        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 200
        assert resp.json() == {
            "ok": True,
            "moved": 2,
            "sortOrderChanged": True,
            "errors": [],
            "job": "gid://shopify/Job/42",
            "message": None,
        }
        assert fake.operations == ["read", "update", "reorder"]

    def test_empty_collection(self, settings):
        fake = FakeShopify(products=[])

        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": "1"})

        assert resp.status_code == 200
        assert resp.json()["moved"] == 0
        assert fake.operations == ["read"]

    def test_user_errors_reported_not_raised(self, settings):
        errors = [{"field": ["moves"], "message": "Too many moves"}]
        fake = FakeShopify(products=[product("A")], reorder_errors=errors)

        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is False
        assert body["errors"] == errors

    def test_get_not_allowed(self, settings, fake):
        resp = build_client(settings, fake).get(ENDPOINT)
        assert resp.status_code == 405

    @pytest.mark.parametrize("payload", [{}, {"collectionId": ""}, {"collectionId": "   "}, {"other": 1}])
    def test_missing_collection_id(self, settings, fake, payload):
        resp = build_client(settings, fake).post(ENDPOINT, json=payload)

        assert resp.status_code == 400
        assert fake.calls == []

    def test_unparseable_body(self, settings, fake):
        resp = build_client(settings, fake).post(
            ENDPOINT, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert resp.status_code == 400
        assert fake.calls == []

    def test_missing_configuration(self, settings, fake):
        settings.admin_token = ""

        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 500
        assert "ADMIN_TOKEN" in resp.json()["detail"]
        assert fake.calls == []

    def test_collection_not_found(self, settings):
        fake = FakeShopify()
        fake.missing_collection = True

        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 404

    def test_upstream_failure(self, settings):
        def handler(request):
            return httpx.Response(200, json={"errors": [{"message": "Internal error"}]})

        app = create_app(settings)

        async def failing_client():
            async with make_client(handler) as client:
                yield client

        app.dependency_overrides[get_shopify_client] = failing_client

        resp = TestClient(app).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 502
        assert "Internal error" in resp.json()["detail"]

    def test_non_object_upstream_body(self, settings):
        app = create_app(settings)

        async def odd_client():
            async with make_client(lambda request: httpx.Response(200, json=["oops"])) as client:
                yield client

        app.dependency_overrides[get_shopify_client] = odd_client

        resp = TestClient(app).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 502

    def test_busy_collection(self, settings, fake):
        client = build_client(settings, fake)
        locks = client.app.state.collection_locks
        locks._locks[COLLECTION_ID] = HeldLock()

        resp = client.post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 409
        assert fake.calls == []


class TestSharedSecret:
    def test_wrong_secret(self, settings, fake):
        settings.shared_secret = "s3cret"

        resp = build_client(settings, fake).post(
            ENDPOINT, json={"collectionId": COLLECTION_ID}, headers={"X-WB-Secret": "nope"}
        )

        assert resp.status_code == 401
        assert fake.calls == []

    def test_missing_secret(self, settings, fake):
        settings.shared_secret = "s3cret"

        resp = build_client(settings, fake).post(ENDPOINT, json={"collectionId": COLLECTION_ID})

        assert resp.status_code == 401

    def test_secret_checked_before_body(self, settings, fake):
        settings.shared_secret = "s3cret"

        resp = build_client(settings, fake).post(ENDPOINT, json={})

        assert resp.status_code == 401

    def test_correct_secret(self, settings, fake):
        settings.shared_secret = "s3cret"

        resp = build_client(settings, fake).post(
            ENDPOINT, json={"collectionId": COLLECTION_ID}, headers={"X-WB-Secret": "s3cret"}
        )

        assert resp.status_code == 200


class TestCors:
    def test_preflight(self, settings, fake):
        resp = build_client(settings, fake).options(ENDPOINT, headers={
            "Origin": ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type, X-WB-Secret",
        })

        assert resp.status_code == 200
        assert "access-control-allow-origin" in resp.headers
        assert "POST" in resp.headers["access-control-allow-methods"]
        assert fake.calls == []

    def test_allowed_origin_gets_grant(self, settings, fake):
        settings.allowed_origins = f"{ORIGIN}, https://www.shop.example.com"

        resp = build_client(settings, fake).post(
            ENDPOINT, json={"collectionId": COLLECTION_ID}, headers={"Origin": ORIGIN}
        )

        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == ORIGIN

    def test_disallowed_origin_gets_no_grant(self, settings, fake):
        settings.allowed_origins = ORIGIN

        resp = build_client(settings, fake).post(
            ENDPOINT, json={"collectionId": COLLECTION_ID},
            headers={"Origin": "https://evil.example.com"},
        )

        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

    def test_disallowed_origin_rejected_when_configured(self, settings, fake):
        settings.allowed_origins = ORIGIN
        settings.reject_disallowed_origins = True

        resp = build_client(settings, fake).post(
            ENDPOINT, json={"collectionId": COLLECTION_ID},
            headers={"Origin": "https://evil.example.com"},
        )

        assert resp.status_code == 403
        assert fake.calls == []
