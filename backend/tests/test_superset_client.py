"""SupersetClient against a mocked security API."""

from __future__ import annotations

import json

import httpx
import pytest

from portal.core.errors import SupersetAuthError, SupersetError
from portal.services.superset import SupersetClient, dashboard_for_level

BASE_URL = "http://superset.test"


class FakeSuperset:
    """Scripted security API recording every request it receives."""

    def __init__(self, *, login_body=None, login_status=200, csrf_body=None,
                 guest_body=None, guest_raw=None, refresh_status=200):
        self.requests: list[httpx.Request] = []
        self.login_body = login_body or {"access_token": "access-1", "refresh_token": "refresh-1"}
        self.login_status = login_status
        self.csrf_body = csrf_body or {"result": "csrf-1"}
        self.guest_body = guest_body or {"token": "guest-1"}
        self.guest_raw = guest_raw
        self.refresh_status = refresh_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/v1/security/login":
            return httpx.Response(
                self.login_status,
                json=self.login_body,
                headers={"set-cookie": "session=login-cookie; Path=/"},
            )
        if path == "/api/v1/security/refresh":
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status, json={"msg": "expired"})
            return httpx.Response(200, json={"access_token": "access-refreshed"})
        if path == "/api/v1/security/csrf_token/":
            return httpx.Response(
                200,
                json=self.csrf_body,
                headers={"set-cookie": "csrf_session=csrf-cookie; Path=/"},
            )
        if path == "/api/v1/security/guest_token/":
            if self.guest_raw is not None:
                return httpx.Response(200, content=self.guest_raw)
            return httpx.Response(200, json=self.guest_body)
        return httpx.Response(404)

    def paths(self) -> list[str]:
        return [r.url.path.rsplit("/security", 1)[1] for r in self.requests]

    def last(self, suffix: str) -> httpx.Request:
        return [r for r in self.requests if r.url.path.endswith(suffix)][-1]


def make_client(fake: FakeSuperset) -> SupersetClient:
    return SupersetClient(BASE_URL, "admin", "admin-pass", transport=httpx.MockTransport(fake))


async def test_guest_token_runs_login_csrf_guest_sequence():
    fake = FakeSuperset()
    guest = await make_client(fake).guest_token("T1 - Voice - CAT1 - K1 - 0 - 0", "dash-koor")

    assert guest.token == "guest-1"
    assert guest.to_dict() == {"token": "guest-1", "dashboardId": "dash-koor"}
    assert fake.paths() == ["/login", "/csrf_token/", "/guest_token/"]


async def test_login_payload_and_referer():
    fake = FakeSuperset()
    await make_client(fake).guest_token("AG1", "dash-agent")

    login = fake.last("/login")
    assert json.loads(login.content) == {
        "username": "admin",
        "password": "admin-pass",
        "provider": "db",
        "refresh": True,
    }
    assert all(r.headers["referer"] == f"{BASE_URL}/" for r in fake.requests)


async def test_guest_request_carries_tokens_cookies_and_body():
    fake = FakeSuperset()
    await make_client(fake).guest_token("AG1", "dash-agent")

    guest = fake.last("/guest_token/")
    assert guest.headers["authorization"] == "Bearer access-1"
    assert guest.headers["x-csrftoken"] == "csrf-1"
    assert "session=login-cookie" in guest.headers["cookie"]
    assert "csrf_session=csrf-cookie" in guest.headers["cookie"]
    assert json.loads(guest.content) == {
        "resources": [{"type": "dashboard", "id": "dash-agent"}],
        "rls": [],
        "user": {"username": "AG1", "first_name": "AG1", "last_name": "AG1"},
    }


async def test_csrf_request_uses_bearer_and_login_cookie():
    fake = FakeSuperset()
    await make_client(fake).guest_token("AG1", "dash-agent")

    csrf = fake.last("/csrf_token/")
    assert csrf.headers["authorization"] == "Bearer access-1"
    assert "session=login-cookie" in csrf.headers["cookie"]


async def test_exchange_logs_in_once_and_caches_refresh_token():
    fake = FakeSuperset()
    client = make_client(fake)

    await client.guest_token("AG1", "dash-agent")
    assert client.stored_refresh_token == "refresh-1"
    fake.requests.clear()

    await client.guest_token("AG1", "dash-agent")

    assert fake.paths() == ["/login", "/csrf_token/", "/guest_token/"]
    assert fake.last("/guest_token/").headers["authorization"] == "Bearer access-1"


async def test_refresh_defaults_to_cached_admin_token():
    fake = FakeSuperset()
    client = make_client(fake)
    await client.login()

    assert await client.refresh() == "access-refreshed"
    assert json.loads(fake.last("/refresh").content) == {"refresh_token": "refresh-1"}


async def test_refresh_without_any_token_raises():
    fake = FakeSuperset()

    with pytest.raises(SupersetAuthError, match="No refresh token"):
        await make_client(fake).refresh()

    assert fake.paths() == []


async def test_failed_login_raises_auth_error():
    fake = FakeSuperset(login_status=401, login_body={"message": "bad creds"})

    with pytest.raises(SupersetAuthError) as exc_info:
        await make_client(fake).guest_token("AG1", "dash-agent")

    assert exc_info.value.status_code == 401
    assert fake.paths() == ["/login"]


async def test_login_without_access_token_raises():
    fake = FakeSuperset(login_body={"refresh_token": "r"})

    with pytest.raises(SupersetAuthError):
        await make_client(fake).login()


async def test_missing_csrf_token_raises():
    fake = FakeSuperset(csrf_body={"result": None})

    with pytest.raises(SupersetError, match="CSRF"):
        await make_client(fake).guest_token("AG1", "dash-agent")


async def test_malformed_guest_response_raises():
    fake = FakeSuperset(guest_raw=b"<html>oops</html>")

    with pytest.raises(SupersetError, match="non-JSON"):
        await make_client(fake).guest_token("AG1", "dash-agent")


async def test_refresh_returns_new_access_token():
    fake = FakeSuperset()

    assert await make_client(fake).refresh("refresh-1") == "access-refreshed"
    assert json.loads(fake.last("/refresh").content) == {"refresh_token": "refresh-1"}


DASHBOARDS = {"0": "admin", "1": "admin", "2": "koor", "3": "tl", "4": "agent", "5": "tenant"}


@pytest.mark.parametrize(
    "level, expected",
    [(0, "admin"), ("1", "admin"), (2, "koor"), ("3", "tl"), (4, "agent"), ("5", "tenant"),
     ("9", "admin"), (-1, "admin"), ("abc", "admin")],
)
def test_dashboard_for_level(level, expected):
    assert dashboard_for_level(level, DASHBOARDS) == expected


def test_empty_dashboard_id_falls_back_to_level_zero():
    dashboards = dict(DASHBOARDS, **{"3": ""})

    assert dashboard_for_level(3, dashboards) == "admin"


async def test_rejected_refresh_raises_auth_error():
    fake = FakeSuperset(refresh_status=401)

    with pytest.raises(SupersetAuthError) as exc_info:
        await make_client(fake).refresh("stale")

    assert exc_info.value.status_code == 401
