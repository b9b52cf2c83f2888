"""
Shared test configuration and fixtures.
"""

import os

import pytest
from fastapi.testclient import TestClient

# Environment must be in place before the app and its config are imported
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret")
os.environ.setdefault("BASE_URL", "http://testserver")
os.environ.setdefault("LINKEDIN_APP_ID", "test-app-id")
os.environ.setdefault("LINKEDIN_APP_SECRET", "test-app-secret")

from app.core.domain import AccessToken  # noqa: E402
from app.infrastructure.http_executor import HttpxRequestExecutor  # noqa: E402
from app.infrastructure.oauth_providers import LinkedinOAuthProvider  # noqa: E402
from app.integrations.linkedin.config import LinkedinConfig  # noqa: E402
from app.main import app  # noqa: E402
from app.oauth.dependencies import get_registry  # noqa: E402

client = TestClient(app)

TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
PROFILE_URL = "https://api.linkedin.com/v1/people/~"


@pytest.fixture
def linkedin_config():
    """LinkedIn client configuration for tests."""
    return LinkedinConfig(
        app_id="test-app-id",
        app_secret="test-app-secret",
        redirect_uri="http://testserver/oauth/linkedin/callback",
        scopes="r_basicprofile,r_emailaddress",
    )


@pytest.fixture
def executor(linkedin_config):
    """Fresh request executor with no current token."""
    return HttpxRequestExecutor(linkedin_config)


@pytest.fixture
def access_token():
    """Access token granted the basic profile scope."""
    return AccessToken(access_token="tok1", scopes=["r_basicprofile"])


@pytest.fixture
def linkedin_provider(linkedin_config, executor):
    return LinkedinOAuthProvider(linkedin_config, executor)


@pytest.fixture
def oauth_client(linkedin_provider):
    """Test client whose registry holds an isolated LinkedIn provider."""
    app.dependency_overrides[get_registry] = lambda: {"linkedin": linkedin_provider}

    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.pop(get_registry, None)
