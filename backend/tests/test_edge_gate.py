"""
Mounjaro Tracker Backend — Edge Gate Tests
============================================

What:  The optimistic, database-free page triage.
How:   EdgeGate.decide() is pure and tested directly; the middleware is
       tested through the app with redirects not followed.

What we test:
    ✅ Signed-in visitor on an auth page → /summary
    ✅ Signed-out visitor on a protected page → /login?callbackUrl=<path>
    ✅ Signed-in visitor on "/" → /summary
    ✅ API paths and assets always pass
    ✅ Invalid or expired cookies count as "no session"
    ✅ The same (path, session) always yields the same decision
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from tracker.middleware.edge_gate import EdgeGate
from tracker.security.route_table import RouteTable
from tracker.security.session_token import SessionIdentity


@pytest.fixture
def gate():
    return EdgeGate(RouteTable())


def callback_of(location: str) -> str:
    parsed = urlparse(location)
    assert parsed.path == "/login"
    return parse_qs(parsed.query)["callbackUrl"][0]


class TestDecide:

    @pytest.mark.parametrize("path", ["/login", "/register", "/forgot-password", "/reset-password"])
    def test_auth_page_with_session_goes_to_summary(self, gate, path):
        assert gate.decide(path, has_session=True).redirect_to == "/summary"

    @pytest.mark.parametrize("path", ["/login", "/register"])
    def test_auth_page_without_session_passes(self, gate, path):
        assert not gate.decide(path, has_session=False).is_redirect

    @pytest.mark.parametrize("path", ["/jabs", "/summary", "/log/weight", "/onboarding"])
    def test_protected_without_session_goes_to_login(self, gate, path):
        decision = gate.decide(path, has_session=False)
        assert callback_of(decision.redirect_to) == path

    def test_protected_with_session_passes(self, gate):
        assert not gate.decide("/jabs", has_session=True).is_redirect

    def test_root(self, gate):
        assert gate.decide("/", has_session=True).redirect_to == "/summary"
        assert not gate.decide("/", has_session=False).is_redirect

    @pytest.mark.parametrize("has_session", [True, False])
    def test_api_always_passes(self, gate, has_session):
        assert not gate.decide("/api/push/subscribe", has_session).is_redirect
        assert not gate.decide("/api/auth/login", has_session).is_redirect

    def test_excluded_paths_pass(self, gate):
        assert not gate.decide("/static/app.js", has_session=False).is_redirect
        assert not gate.decide("/~offline", has_session=False).is_redirect
        # An image under a protected prefix is still an asset
        assert not gate.decide("/summary/chart.png", has_session=False).is_redirect

    def test_public_path_passes(self, gate):
        assert not gate.decide("/about", has_session=False).is_redirect

    @pytest.mark.parametrize(
        "path",
        ["/", "/login", "/register", "/summary", "/log/weight", "/onboarding",
         "/api/profile", "/static/app.js", "/about", "/loginx", "/logs"],
    )
    @pytest.mark.parametrize("has_session", [True, False])
    def test_decision_is_repeatable(self, gate, path, has_session):
        first = gate.decide(path, has_session)
        assert gate.decide(path, has_session) == first
        assert EdgeGate(RouteTable()).decide(path, has_session) == first


class TestEdgeGateMiddleware:

    @pytest.mark.asyncio
    async def test_signed_in_user_on_login_redirects(self, test_client, auth_headers):
        response = await test_client.get("/login", headers=auth_headers)
        assert response.status_code == 307
        assert response.headers["location"] == "/summary"

    @pytest.mark.asyncio
    async def test_no_cookie_on_protected_page_redirects_to_login(self, test_client):
        response = await test_client.get("/jabs")
        assert response.status_code == 307
        assert callback_of(response.headers["location"]) == "/jabs"

    @pytest.mark.asyncio
    async def test_garbage_cookie_is_no_session(self, test_client, cookie_name):
        response = await test_client.get(
            "/summary", headers={"Cookie": f"{cookie_name}=garbage"}
        )
        assert response.status_code == 307
        assert callback_of(response.headers["location"]) == "/summary"

    @pytest.mark.asyncio
    async def test_expired_cookie_is_no_session(self, test_client, context, cookie_name):
        token = context.token_codec.issue(
            SessionIdentity(user_id=uuid4(), email="old@example.com"),
            now=datetime.now(timezone.utc) - timedelta(days=40),
        )
        response = await test_client.get("/jabs", headers={"Cookie": f"{cookie_name}={token}"})
        assert response.status_code == 307
        assert response.headers["location"].startswith("/login")

    @pytest.mark.asyncio
    async def test_api_without_session_reaches_handler(self, test_client):
        """The gate lets the API through; the handler answers 401 itself."""
        response = await test_client.post(
            "/api/push/subscribe",
            json={
                "endpoint": "https://fcm.googleapis.com/fcm/send/abc123",
                "keys": {"p256dh": "key", "auth": "secret"},
            },
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    @pytest.mark.asyncio
    async def test_root_with_session_redirects(self, test_client, auth_headers):
        response = await test_client.get("/", headers=auth_headers)
        assert response.status_code == 307
        assert response.headers["location"] == "/summary"

    @pytest.mark.asyncio
    async def test_root_without_session_is_public(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.json()["page"] == "home"

    @pytest.mark.asyncio
    async def test_request_id_header_is_returned(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/login", "/jabs", "/", "/about"])
    @pytest.mark.parametrize("signed_in", [True, False])
    async def test_same_request_twice_gets_same_answer(
        self, test_client, auth_headers, path, signed_in
    ):
        headers = auth_headers if signed_in else {}
        first = await test_client.get(path, headers=headers)
        second = await test_client.get(path, headers=headers)
        assert second.status_code == first.status_code
        assert second.headers.get("location") == first.headers.get("location")
