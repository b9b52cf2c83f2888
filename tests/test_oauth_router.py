"""
Tests for OAuth router endpoints.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient
from respx import MockRouter

from app.main import app
from app.oauth.dependencies import get_registry
from tests.conftest import PROFILE_URL, TOKEN_URL


def start_flow(client: TestClient) -> str:
    """Call /connect and return the state sent to LinkedIn."""
    response = client.get("/oauth/linkedin/connect", follow_redirects=False)
    assert response.status_code == 302
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


# ============================================================================
# GET /oauth/{provider}/connect Tests
# ============================================================================


class TestOAuthConnectEndpoint:
    """Tests for the GET /oauth/{provider}/connect endpoint."""

    def test_connect_redirects_to_linkedin(self, oauth_client):
        response = oauth_client.get("/oauth/linkedin/connect", follow_redirects=False)

        assert response.status_code == 302
        location = response.headers["location"]
        assert location.startswith("https://www.linkedin.com/oauth/v2/authorization?")
        assert "client_id=test-app-id" in location
        assert "scope=r_basicprofile%20r_emailaddress" in location
        assert "session" in response.cookies

    def test_connect_with_custom_scopes(self, oauth_client):
        response = oauth_client.get(
            "/oauth/linkedin/connect",
            params={"scopes": "r_basicprofile,w_share"},
            follow_redirects=False,
        )

        assert "scope=r_basicprofile%20w_share" in response.headers["location"]

    def test_connect_unknown_provider_returns_404(self, oauth_client):
        response = oauth_client.get("/oauth/unknown/connect", follow_redirects=False)

        assert response.status_code == 404

    def test_connect_unconfigured_provider_returns_503(self):
        app.dependency_overrides[get_registry] = lambda: {}

        client = TestClient(app)

        try:
            response = client.get("/oauth/linkedin/connect", follow_redirects=False)
            assert response.status_code == 503
        finally:
            app.dependency_overrides.pop(get_registry, None)


# ============================================================================
# GET /oauth/{provider}/callback Tests
# ============================================================================


class TestOAuthCallbackEndpoint:
    """Tests for the GET /oauth/{provider}/callback endpoint."""

    def test_callback_success(self, respx_mock: MockRouter, oauth_client, executor):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "tok1"})
        )
        respx_mock.get(PROFILE_URL).mock(
            return_value=httpx.Response(200, json={"id": "42", "lastName": "Doe"})
        )
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "provider": "linkedin",
            "label": "Doe",
        }
        assert executor.get_current_token().access_token == "tok1"

    def test_callback_without_pending_handshake(self, oauth_client):
        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": "anything"}
        )

        assert response.status_code == 400
        assert "CSRF" in response.json()["detail"]

    def test_callback_state_mismatch(self, oauth_client, executor):
        start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": "forged"}
        )

        assert response.status_code == 400
        assert executor.get_current_token() is None

    def test_callback_stale_state_rejected(self, oauth_client):
        first = start_flow(oauth_client)
        start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": first}
        )

        assert response.status_code == 400

    def test_callback_consumes_handshake(self, respx_mock: MockRouter, oauth_client):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(401, json={"error": "invalid_grant"})
        )
        state = start_flow(oauth_client)
        params = {"code": "ABC123", "state": state}

        assert oauth_client.get("/oauth/linkedin/callback", params=params).status_code == 401
        assert oauth_client.get("/oauth/linkedin/callback", params=params).status_code == 400

    def test_callback_denied(self, oauth_client):
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback",
            params={"error": "access_denied", "state": state},
        )

        assert response.status_code == 400
        assert "access_denied" in response.json()["detail"]

    def test_callback_provider_rejected(self, respx_mock: MockRouter, oauth_client):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(
                400,
                json={
                    "error": "invalid_request",
                    "error_description": "authorization code expired",
                },
            )
        )
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == 401
        assert "authorization code expired" in response.json()["detail"]

    def test_callback_provider_unreachable(self, respx_mock: MockRouter, oauth_client):
        respx_mock.post(TOKEN_URL).mock(
            side_effect=httpx.ConnectError("Connection refused")
        )
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == 502
        assert "retry" in response.json()["detail"]

    def test_callback_invalid_response(self, respx_mock: MockRouter, oauth_client):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, text="not json")
        )
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == 502

    def test_callback_non_ascii_state(self, oauth_client, executor):
        start_flow(oauth_client)

        response = oauth_client.get("/oauth/linkedin/callback?code=x&state=%C3%A9")

        assert response.status_code == 400
        assert executor.get_current_token() is None

    @pytest.mark.parametrize(
        "profile_response, expected_status",
        [
            (httpx.Response(401, json={"message": "Invalid access token"}), 401),
            (httpx.Response(500, json={"message": "Internal error"}), 502),
            (httpx.ConnectError("Connection refused"), 502),
        ],
    )
    def test_callback_identity_lookup_fails(
        self,
        respx_mock: MockRouter,
        oauth_client,
        executor,
        profile_response,
        expected_status,
    ):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "tok1"})
        )
        if isinstance(profile_response, Exception):
            respx_mock.get(PROFILE_URL).mock(side_effect=profile_response)
        else:
            respx_mock.get(PROFILE_URL).mock(return_value=profile_response)
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == expected_status
        assert executor.get_current_token() is None
        assert executor.verify_scopes is True

    def test_callback_provider_outage_is_not_reconsent(
        self, respx_mock: MockRouter, oauth_client
    ):
        respx_mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(503, json={"error": "temporarily_unavailable"})
        )
        state = start_flow(oauth_client)

        response = oauth_client.get(
            "/oauth/linkedin/callback", params={"code": "ABC123", "state": state}
        )

        assert response.status_code == 502
        assert "retry" in response.json()["detail"]


# ============================================================================
# DELETE /oauth/{provider} Tests
# ============================================================================


class TestOAuthDisconnectEndpoint:
    def test_disconnect_drops_token(self, oauth_client, executor, access_token):
        executor.set_current_token(access_token)

        response = oauth_client.delete("/oauth/linkedin")

        assert response.status_code == 200
        assert response.json()["status"] == "success"
        assert executor.get_current_token() is None

    @pytest.mark.parametrize("provider", ["unknown", "not-a-provider"])
    def test_disconnect_unknown_provider(self, oauth_client, provider):
        response = oauth_client.delete(f"/oauth/{provider}")

        assert response.status_code == 404
