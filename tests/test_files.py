import pytest

from learnvow.core.config import settings
from learnvow.core.exceptions import FileAccessError
from learnvow.services import file_service
from tests.conftest import auth_header

API = "/api/v1/files"
FILE_URL = "https://cdn.example.com/books/padma-river-boatman.epub"


@pytest.fixture
def ebook_with_file(db_session, ebook):
    ebook.file_url = FILE_URL
    db_session.commit()
    return ebook


@pytest.fixture
def owned_ebook(client, reader, ebook_with_file):
    response = client.post("/api/v1/purchases", json={"book_id": ebook_with_file.id}, headers=auth_header("token-reader"))
    assert response.status_code == 201
    return ebook_with_file


def _signed_url(client, book_id, token="token-reader"):
    return client.post(f"{API}/signed-url", json={"book_id": book_id}, headers=auth_header(token))


def test_owner_gets_a_link_that_redirects_to_the_file(client, owned_ebook):
    issued = _signed_url(client, owned_ebook.id)

    assert issued.status_code == 200
    body = issued.json()
    assert body["url"].startswith(f"{API}/secure/")
    assert body["expires_in_seconds"] == settings.FILE_URL_TTL_SECONDS

    opened = client.get(body["url"], follow_redirects=False)
    assert opened.status_code == 307
    assert opened.headers["location"] == FILE_URL


def test_issuing_a_link_requires_a_token(client, owned_ebook):
    response = client.post(f"{API}/signed-url", json={"book_id": owned_ebook.id})

    assert response.status_code == 401


def test_non_owner_cannot_get_a_link(client, reader, other_reader, owned_ebook):
    response = _signed_url(client, owned_ebook.id, token="token-other")

    assert response.status_code == 403
    assert response.json()["kind"] == "forbidden"


def test_unknown_book_is_404(client, reader):
    response = _signed_url(client, 9999)

    assert response.status_code == 404


def test_owned_book_without_a_file_is_404(client, reader, audiobook):
    client.post("/api/v1/purchases", json={"book_id": audiobook.id}, headers=auth_header("token-reader"))

    response = _signed_url(client, audiobook.id)

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_tampered_link_is_403(client, owned_ebook):
    url = _signed_url(client, owned_ebook.id).json()["url"]
    prefix, signature = url.rsplit("/", 1)
    tampered = f"{prefix}/{'x' if signature[0] != 'x' else 'y'}{signature[1:]}"

    response = client.get(tampered, follow_redirects=False)

    assert response.status_code == 403
    assert response.json()["kind"] == "forbidden"


def test_expired_link_is_403(client, owned_ebook, monkeypatch):
    url = _signed_url(client, owned_ebook.id).json()["url"]
    monkeypatch.setattr(settings, "FILE_URL_TTL_SECONDS", -1)

    response = client.get(url, follow_redirects=False)

    assert response.status_code == 403
    assert response.json()["detail"] == "File link has expired."


def test_link_stops_working_once_the_file_is_removed(client, db_session, owned_ebook):
    url = _signed_url(client, owned_ebook.id).json()["url"]
    owned_ebook.file_url = None
    db_session.commit()

    response = client.get(url, follow_redirects=False)

    assert response.status_code == 404


def test_admin_can_attach_a_file_to_a_book(client, admin, reader, ebook):
    updated = client.put(
        f"/api/v1/admin/books/{ebook.id}",
        json={"file_url": FILE_URL},
        headers=auth_header("token-admin"),
    )
    assert updated.status_code == 200
    assert "file_url" not in updated.json()

    client.post("/api/v1/purchases", json={"book_id": ebook.id}, headers=auth_header("token-reader"))
    url = _signed_url(client, ebook.id).json()["url"]

    assert client.get(url, follow_redirects=False).headers["location"] == FILE_URL


class TestSignatures:
    def test_signature_carries_user_and_book(self):
        signed = file_service.generate_signature(7, 42)

        assert file_service.verify_signature(signed["signature"]) == {"uid": 7, "book_id": 42}

    def test_signature_from_another_key_is_rejected(self, monkeypatch):
        signed = file_service.generate_signature(7, 42)
        monkeypatch.setattr(settings, "FILE_URL_SECRET_KEY", "rotated-secret")

        with pytest.raises(FileAccessError) as exc_info:
            file_service.verify_signature(signed["signature"])
        assert exc_info.value.kind == "forbidden"

    def test_garbage_is_rejected(self):
        with pytest.raises(FileAccessError):
            file_service.verify_signature("not-a-signature")
