"""
Mounjaro Tracker Backend — Route Classification Tests
=======================================================

What we test:
    ✅ Each prefix family lands in exactly one class
    ✅ Auth-only wins over protected ("/login" vs "/log")
    ✅ Assets and the offline page are excluded
"""

import pytest

from tracker.security.route_table import RouteClass, RouteTable


@pytest.fixture
def table():
    return RouteTable()


class TestClassify:

    @pytest.mark.parametrize(
        "path",
        ["/summary", "/jabs/new", "/calendar", "/settings/profile", "/log", "/log/jab", "/weight", "/onboarding"],
    )
    def test_protected_paths(self, table, path):
        assert table.classify(path) is RouteClass.PROTECTED

    @pytest.mark.parametrize(
        "path", ["/login", "/register", "/forgot-password", "/reset-password"]
    )
    def test_auth_only_paths(self, table, path):
        assert table.classify(path) is RouteClass.AUTH_ONLY

    def test_login_is_not_the_log_hub(self, table):
        """/login shares a prefix with /log and must stay auth-only."""
        assert table.classify("/login") is RouteClass.AUTH_ONLY
        assert table.classify("/log") is RouteClass.PROTECTED

    def test_api_paths(self, table):
        assert table.classify("/api/auth/login") is RouteClass.API
        assert table.classify("/api/profile") is RouteClass.API

    def test_everything_else_is_public(self, table):
        assert table.classify("/") is RouteClass.PUBLIC
        assert table.classify("/about") is RouteClass.PUBLIC

    def test_custom_table(self):
        table = RouteTable(protected=("/private",), auth_only=("/signin",))
        assert table.classify("/private/x") is RouteClass.PROTECTED
        assert table.classify("/summary") is RouteClass.PUBLIC


class TestExcluded:

    @pytest.mark.parametrize(
        "path",
        ["/static/app.js", "/favicon.ico", "/~offline", "/icons/icon-192.png", "/img/hero.JPG", "/logo.svg"],
    )
    def test_assets_are_excluded(self, table, path):
        assert table.is_excluded(path)

    @pytest.mark.parametrize("path", ["/summary", "/login", "/api/profile", "/"])
    def test_pages_are_not_excluded(self, table, path):
        assert not table.is_excluded(path)
