"""Shared helpers for API tests."""
from tests.constants import URLs


def signup(client, email="user@example.com", password="password123", username="user") -> dict:
    """Helper to register a user, returning the response data."""
    response = client.post(
        URLs.SIGNUP,
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def upload(client, token, name="notes.txt", content=b"0123456789", content_type="text/plain", tags=None):
    """Helper to upload a file, returning the raw response."""
    data = {"tags": tags} if tags is not None else None
    return client.post(
        URLs.UPLOAD,
        headers=auth_headers(token),
        files={"file": (name, content, content_type)},
        data=data,
    )
