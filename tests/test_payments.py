import asyncio
import re

from learnvow.models.payment_model import Payment
from learnvow.models.enums import PaymentStatus
from learnvow.services import payment_service
from tests.conftest import auth_header

API = "/api/v1/payments"


def _initiate(client, book_id, token="token-reader"):
    return client.post(f"{API}/initiate", json={"book_id": book_id}, headers=auth_header(token))


def test_order_id_format():
    assert re.fullmatch(r"ORDER_\d{13}_3_7", payment_service.build_order_id(3, 7))


def test_gateway_mock_always_succeeds(monkeypatch):
    monkeypatch.setattr(payment_service.settings, "PAYMENT_GATEWAY_DELAY_SECONDS", 0)

    started = asyncio.run(payment_service.initiate_payment("ORDER_1_1_1", 100, "BDT", "Gitanjali"))
    verified = asyncio.run(payment_service.verify_payment("ORDER_1_1_1", "TXN-1"))

    assert started["status"] == payment_service.GATEWAY_SUCCESS
    assert started["gateway_url"].endswith("?order_id=ORDER_1_1_1")
    assert verified == {"status": "SUCCESS", "transaction_id": "TXN-1", "order_id": "ORDER_1_1_1"}


def test_initiate_creates_pending_payment(client, db_session, reader, audiobook):
    response = _initiate(client, audiobook.id)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["order_id"].startswith("ORDER_")
    assert body["order_id"].endswith(f"_{reader.id}_{audiobook.id}")
    assert body["order_id"] in body["redirect_url"]
    assert float(body["amount"]) == 180.0

    payment = db_session.query(Payment).filter(Payment.order_id == body["order_id"]).one()
    assert payment.status == PaymentStatus.PENDING


def test_verify_settles_payment_and_adds_to_library(client, db_session, reader, audiobook):
    order_id = _initiate(client, audiobook.id).json()["order_id"]

    response = client.post(
        f"{API}/verify",
        json={"order_id": order_id, "transaction_id": "TXN-42"},
        headers=auth_header("token-reader"),
    )

    assert response.status_code == 200
    assert response.json()["purchase"]["book_id"] == audiobook.id

    payment = db_session.query(Payment).filter(Payment.order_id == order_id).one()
    assert payment.status == PaymentStatus.SUCCEEDED
    assert payment.transaction_id == "TXN-42"
    assert payment.paid_at is not None

    library = client.get("/api/v1/library", headers=auth_header("token-reader")).json()
    assert [item["book"]["id"] for item in library] == [audiobook.id]


def test_verify_is_idempotent(client, reader, audiobook):
    order_id = _initiate(client, audiobook.id).json()["order_id"]
    payload = {"order_id": order_id, "transaction_id": "TXN-42"}

    first = client.post(f"{API}/verify", json=payload, headers=auth_header("token-reader"))
    second = client.post(f"{API}/verify", json=payload, headers=auth_header("token-reader"))

    assert second.status_code == 200
    assert second.json()["purchase"]["id"] == first.json()["purchase"]["id"]


def test_verify_unknown_order_is_404(client, reader):
    response = client.post(
        f"{API}/verify",
        json={"order_id": "ORDER_0_0_0", "transaction_id": "TXN-1"},
        headers=auth_header("token-reader"),
    )

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_cannot_verify_someone_elses_order(client, reader, other_reader, audiobook):
    order_id = _initiate(client, audiobook.id).json()["order_id"]

    response = client.post(
        f"{API}/verify",
        json={"order_id": order_id, "transaction_id": "TXN-9"},
        headers=auth_header("token-other"),
    )

    assert response.status_code == 404


def test_cannot_initiate_for_owned_book(client, reader, ebook):
    client.post("/api/v1/purchases", json={"book_id": ebook.id}, headers=auth_header("token-reader"))

    response = _initiate(client, ebook.id)

    assert response.status_code == 409


def test_gateway_refusal_marks_payment_failed(client, db_session, reader, audiobook, monkeypatch):
    async def refuse(**kwargs):
        return {"status": "DECLINED"}

    monkeypatch.setattr(payment_service, "initiate_payment", refuse)

    response = _initiate(client, audiobook.id)

    assert response.status_code == 503
    payment = db_session.query(Payment).filter(Payment.book_id == audiobook.id).one()
    assert payment.status == PaymentStatus.FAILED


def test_payment_history(client, reader, ebook, audiobook):
    _initiate(client, audiobook.id)
    client.post("/api/v1/purchases", json={"book_id": ebook.id}, headers=auth_header("token-reader"))

    response = client.get(f"{API}/me", headers=auth_header("token-reader"))

    assert response.status_code == 200
    assert [p["book_id"] for p in response.json()] == [ebook.id, audiobook.id]
