from unittest.mock import AsyncMock


def test_dashboard_redirects_signed_out_visitors(client, signed_out):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"

def test_dashboard_renders_for_signed_in_user(client, signed_in):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 200
    assert "Welcome back, Sam Green" in response.text

def test_home_redirects_signed_in_user(client, signed_in):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/dashboard"

def test_home_renders_for_signed_out_visitor(client, signed_out):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 200
    assert "ZeroSpoil" in response.text

def test_login_page(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert "/api/auth/signin" in response.text

def test_rejected_session_token_redirects(client, mock_auth):
    client.post("/api/auth/signin", json={"email": "sam@example.com", "password": "secret123"})
    mock_auth.get_user = AsyncMock(return_value=None)

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"

def test_bearer_token_authenticates(client, mock_auth):
    response = client.get("/dashboard", headers={"Authorization": "Bearer header-token"}, follow_redirects=False)

    assert response.status_code == 200
    mock_auth.get_user.assert_awaited_once_with("header-token")

def test_page_uses_session_theme(client):
    client.put("/api/theme", json={"theme": "dark"})

    response = client.get("/login")

    assert 'data-theme="dark"' in response.text
    assert 'title="Switch to system mode"' in response.text
