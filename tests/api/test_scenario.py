"""
End-to-end walkthrough of a single user's file lifecycle.
"""
from fastapi import status

from tests.constants import URLs
from tests.helpers import auth_headers, upload


def test_alice_file_lifecycle(client):
    # Register and log in
    signup_response = client.post(
        URLs.SIGNUP,
        json={"username": "alice", "email": "alice@x.com", "password": "secret1"},
    )
    assert signup_response.status_code == status.HTTP_201_CREATED

    login_response = client.post(
        URLs.LOGIN,
        json={"email": "alice@x.com", "password": "secret1"},
    )
    assert login_response.status_code == status.HTTP_200_OK
    headers = auth_headers(login_response.json()["data"]["token"])

    # Upload a 10-byte text file
    content = b"ten bytes!"
    assert len(content) == 10
    upload_response = upload(client, login_response.json()["data"]["token"], name="notes.txt", content=content)
    assert upload_response.status_code == status.HTTP_200_OK
    file_id = upload_response.json()["data"]["file_id"]

    # List: one record of size 10
    files = client.get(URLs.FILES, headers=headers).json()["data"]
    assert len(files) == 1
    assert files[0]["size_bytes"] == 10

    # Search "NOTE" finds it
    results = client.post(URLs.SEARCH, headers=headers, json={"query": "NOTE"}).json()["data"]
    assert [r["file"]["file_id"] for r in results] == [file_id]

    # Download returns the original bytes and bumps the counter
    download = client.get(URLs.DOWNLOAD.format(file_id), headers=headers)
    assert download.status_code == status.HTTP_200_OK
    assert download.content == content
    assert "notes.txt" in download.headers["content-disposition"]
    files = client.get(URLs.FILES, headers=headers).json()["data"]
    assert files[0]["access_count"] == 1

    # Delete, then the file is gone
    delete = client.delete(URLs.DELETE.format(file_id), headers=headers)
    assert delete.status_code == status.HTTP_200_OK
    assert client.get(URLs.FILES, headers=headers).json()["data"] == []

    download_again = client.get(URLs.DOWNLOAD.format(file_id), headers=headers)
    assert download_again.status_code == status.HTTP_404_NOT_FOUND
