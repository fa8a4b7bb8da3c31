"""HTTP API: status codes, error envelope, session handling."""

CARD_1 = "5559 0000 0000 0001"
CARD_2 = "5559 0000 0000 0002"
PETYA_CARD = "5559 0000 0000 0003"


async def _login(client, login="vasya", password="qwerty123", code="12345"):
    resp = await client.post("/api/login", json={"login": login, "password": password})
    assert resp.status_code == 200
    resp = await client.post("/api/verify", json={"pending_token": resp.json()["pending_token"], "code": code})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['session_token']}"}


async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.json() == {"status": "healthy"}


async def test_wrong_password_is_401(client):
    resp = await client.post("/api/login", json={"login": "vasya", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "invalid_credentials", "detail": "Invalid login or password"}


async def test_unknown_login_looks_like_wrong_password(client):
    resp = await client.post("/api/login", json={"login": "nobody", "password": "qwerty123"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "invalid_credentials"


async def test_wrong_code_then_retry_is_expired(client):
    resp = await client.post("/api/login", json={"login": "vasya", "password": "qwerty123"})
    token = resp.json()["pending_token"]
    resp = await client.post("/api/verify", json={"pending_token": token, "code": "54321"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "invalid_code"
    resp = await client.post("/api/verify", json={"pending_token": token, "code": "12345"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "expired_verification"


async def test_full_width_code_is_invalid_code(client):
    resp = await client.post("/api/login", json={"login": "vasya", "password": "qwerty123"})
    token = resp.json()["pending_token"]
    resp = await client.post("/api/verify", json={"pending_token": token, "code": "１２３４５"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "invalid_code"


async def test_cards_require_session(client):
    resp = await client.get("/api/cards")
    assert resp.status_code == 401
    resp = await client.get("/api/cards", headers={"Authorization": "Bearer bogus"})
    assert resp.status_code == 401


async def test_list_cards(client):
    headers = await _login(client)
    resp = await client.get("/api/cards", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == [
        {"id": "5559000000000001", "number": "**** **** **** 0001", "position": 0, "balance": 1_000_000},
        {"id": "5559000000000002", "number": "**** **** **** 0002", "position": 1, "balance": 1_000_000},
    ]


async def test_get_card_by_position_and_number(client):
    headers = await _login(client)
    by_pos = await client.get("/api/cards/1", headers=headers)
    by_num = await client.get("/api/cards/5559000000000002", headers=headers)
    assert by_pos.status_code == by_num.status_code == 200
    assert by_pos.json() == by_num.json()


async def test_get_foreign_card_is_403(client):
    headers = await _login(client)
    resp = await client.get("/api/cards/5559000000000003", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "not_authorized"


async def test_transfer_success(client):
    headers = await _login(client)
    resp = await client.post(
        "/api/transfer",
        json={"from_card_id": CARD_1, "to_card_id": CARD_2, "amount": 250_000},
        headers=headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert (body["from_balance"], body["to_balance"]) == (750_000, 1_250_000)
    assert body["reference"].startswith("TXN")


async def test_transfer_by_positions(client):
    headers = await _login(client)
    resp = await client.post(
        "/api/transfer",
        json={"from_card_id": 1, "to_card_id": 0, "amount": 1},
        headers=headers,
    )
    assert resp.status_code == 200
    assert (resp.json()["from_card_id"], resp.json()["to_card_id"]) == ("5559000000000002", "5559000000000001")


async def test_transfer_error_statuses(client):
    headers = await _login(client)
    cases = [
        ({"from_card_id": CARD_1, "to_card_id": CARD_2, "amount": 0}, 400, "invalid_amount"),
        ({"from_card_id": CARD_1, "to_card_id": CARD_2, "amount": 10.5}, 400, "invalid_amount"),
        ({"from_card_id": CARD_1, "to_card_id": PETYA_CARD, "amount": 10}, 403, "not_authorized"),
        ({"from_card_id": CARD_1, "to_card_id": CARD_1, "amount": 10}, 400, "same_card"),
        ({"from_card_id": CARD_1, "to_card_id": CARD_2, "amount": 2_000_000}, 409, "insufficient_funds"),
    ]
    for payload, status, error in cases:
        resp = await client.post("/api/transfer", json=payload, headers=headers)
        assert resp.status_code == status, payload
        assert resp.json()["error"] == error

    resp = await client.get("/api/cards", headers=headers)
    assert [c["balance"] for c in resp.json()] == [1_000_000, 1_000_000]


async def test_malformed_transfer_body_uses_error_envelope(client):
    headers = await _login(client)
    for payload in ({"from_card_id": None, "to_card_id": CARD_2, "amount": 10}, {"to_card_id": CARD_2, "amount": 10}):
        resp = await client.post("/api/transfer", json=payload, headers=headers)
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "invalid_request"
        assert body["detail"].startswith("from_card_id")


async def test_malformed_login_body_uses_error_envelope(client):
    resp = await client.post("/api/login", json={"login": "vasya"})
    assert resp.status_code == 422
    assert resp.json() == {"error": "invalid_request", "detail": "password: Field required"}


async def test_transfer_history(client):
    headers = await _login(client)
    await client.post("/api/transfer", json={"from_card_id": 0, "to_card_id": 1, "amount": 100}, headers=headers)
    await client.post("/api/transfer", json={"from_card_id": 1, "to_card_id": 0, "amount": 40}, headers=headers)
    resp = await client.get("/api/transfers", headers=headers)
    assert resp.status_code == 200
    assert sorted(t["amount"] for t in resp.json()) == [40, 100]


async def test_logout_ends_session(client):
    headers = await _login(client)
    resp = await client.post("/api/logout", headers=headers)
    assert resp.status_code == 200
    resp = await client.get("/api/cards", headers=headers)
    assert resp.status_code == 401


async def test_admin_seed_requires_token(client):
    resp = await client.post("/api/admin/seed", json={"token": "wrong"})
    assert resp.status_code == 401


async def test_admin_seed_is_idempotent(client):
    resp = await client.post("/api/admin/seed", json={"token": "letmein"})
    assert resp.status_code == 200
    assert resp.json() == {"users_created": 0, "cards_created": 0}
