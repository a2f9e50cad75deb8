from fastapi import status

from tests.constants import URLs
from tests.helpers import auth_headers, signup, upload


def _search(client, token, query):
    return client.post(URLs.SEARCH, headers=auth_headers(token), json={"query": query})


def test_search_empty_query_returns_empty_list(client):
    token = signup(client)["token"]
    upload(client, token, name="notes.txt")

    for query in ("", "   ", None):
        response = _search(client, token, query)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"] == []


def test_search_missing_query_field_returns_empty_list(client):
    token = signup(client)["token"]
    upload(client, token, name="notes.txt")

    response = client.post(URLs.SEARCH, headers=auth_headers(token), json={})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == []


def test_search_case_insensitive_substring(client):
    token = signup(client)["token"]
    file_id = upload(client, token, name="Meeting-Notes.txt").json()["data"]["file_id"]
    upload(client, token, name="budget.xlsx")

    response = _search(client, token, "NOTES")

    results = response.json()["data"]
    assert len(results) == 1
    assert results[0]["file"]["file_id"] == file_id
    assert results[0]["matched_on"] == "name"


def test_search_no_match(client):
    token = signup(client)["token"]
    upload(client, token, name="notes.txt")

    response = _search(client, token, "invoice")

    assert response.json()["data"] == []


def test_search_treats_wildcards_literally(client):
    token = signup(client)["token"]
    upload(client, token, name="report_2024.txt")
    upload(client, token, name="report-2024.txt")
    upload(client, token, name="100%.txt")

    underscore = _search(client, token, "_2024").json()["data"]
    percent = _search(client, token, "%").json()["data"]

    assert [r["file"]["display_name"] for r in underscore] == ["report_2024.txt"]
    assert [r["file"]["display_name"] for r in percent] == ["100%.txt"]


def test_search_scoped_to_owner(client):
    token_a = signup(client, email="a@example.com")["token"]
    token_b = signup(client, email="b@example.com")["token"]
    upload(client, token_a, name="secret-plans.txt")

    response = _search(client, token_b, "secret")

    assert response.json()["data"] == []


def test_search_query_too_long(client):
    token = signup(client)["token"]
    response = _search(client, token, "x" * 256)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_search_without_token(client):
    response = client.post(URLs.SEARCH, json={"query": "notes"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_search_matches_query_text_as_given(client):
    token = signup(client)["token"]
    upload(client, token, name="notes.txt")
    spaced_id = upload(client, token, name="my notes draft.txt").json()["data"]["file_id"]

    response = _search(client, token, "notes ")

    results = response.json()["data"]
    assert [result["file"]["file_id"] for result in results] == [spaced_id]
