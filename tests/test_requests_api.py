from conftest import register_assistant, register_user


def _send(client, user_id: int, assistant_id: int, category: str = "nursing"):
    return client.post(
        "/pending/send",
        json={
            "userId": user_id,
            "assistantId": assistant_id,
            "category": category,
            "description": "Wound dressing",
            "latitude": 12.97,
            "longitude": 77.59,
        },
    )


def test_dispatch_round_trip(client) -> None:
    user_id = register_user(client)
    assistant_id = register_assistant(client)

    sent = _send(client, user_id, assistant_id)
    assert sent.status_code == 201
    request_id = sent.json()["requestId"]

    confirmed = client.post("/pending/confirm", json={"requestId": request_id, "assistantId": assistant_id})
    assert confirmed.status_code == 200
    assert confirmed.json()["message"] == "Request confirmed"

    # busy assistants drop out of the directory
    assert client.get("/assistant/all").json() == []

    completed = client.post("/pending/completed", json={"requestId": request_id, "assistantId": assistant_id})
    assert completed.status_code == 200
    assert completed.json()["requestStatus"] == "completed"
    assert completed.json()["assistantStatus"] == "available"

    again = client.post("/pending/completed", json={"requestId": request_id, "assistantId": assistant_id})
    assert again.status_code == 409
    assert again.json()["error"]["kind"] == "ALREADY_IN_TERMINAL_STATE"
    assert again.json()["success"] is False


def test_send_to_unavailable_assistant(client) -> None:
    user_id = register_user(client)
    response = _send(client, user_id, 31337)
    assert response.status_code == 409
    assert response.json()["error"] == {
        "kind": "CONFLICT",
        "code": "ASSISTANT_UNAVAILABLE",
        "message": "Assistant is not available",
    }


def test_send_for_unknown_user(client) -> None:
    assistant_id = register_assistant(client)
    response = _send(client, 31337, assistant_id)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_send_requires_category(client) -> None:
    response = client.post("/pending/send", json={"userId": 1, "assistantId": 2})
    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "VALIDATION_ERROR"


def test_confirm_unknown_request(client) -> None:
    assistant_id = register_assistant(client)
    response = client.post("/pending/confirm", json={"requestId": 31337, "assistantId": assistant_id})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "REQUEST_NOT_FOUND"


def test_complete_by_wrong_assistant_is_forbidden(client) -> None:
    user_id = register_user(client)
    owner = register_assistant(client, "Bob", "bob@example.com")
    other = register_assistant(client, "Dan", "dan@example.com")
    request_id = _send(client, user_id, owner).json()["requestId"]
    client.post("/pending/confirm", json={"requestId": request_id, "assistantId": owner})

    response = client.post("/pending/completed", json={"requestId": request_id, "assistantId": other})

    assert response.status_code == 403
    assert response.json()["error"]["kind"] == "INVALID_OWNERSHIP"
    statuses = client.get(f"/pending/check/{user_id}").json()
    assert statuses[0]["status"] == "accepted"


def test_complete_requires_both_identifiers(client) -> None:
    response = client.post("/pending/completed", json={"requestId": 12})
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "requestId and assistantId are required"


def test_complete_accepts_identifier_as_string(client) -> None:
    user_id = register_user(client)
    assistant_id = register_assistant(client)
    request_id = _send(client, user_id, assistant_id).json()["requestId"]
    client.post("/pending/confirm", json={"requestId": request_id, "assistantId": assistant_id})

    response = client.post(
        "/pending/completed", json={"requestId": str(request_id), "assistantId": assistant_id}
    )
    assert response.status_code == 200


def test_notification_is_delivered_once_and_check_keeps_history(client) -> None:
    user_id = register_user(client)
    assistant_id = register_assistant(client)
    request_id = _send(client, user_id, assistant_id).json()["requestId"]

    assert client.get(f"/pending/notification/{user_id}").json() == []

    client.post("/pending/confirm", json={"requestId": request_id, "assistantId": assistant_id})

    first = client.get(f"/pending/notification/{user_id}")
    assert first.status_code == 200
    assert first.json() == [
        {
            "requestId": request_id,
            "latitude": 12.97,
            "longitude": 77.59,
            "assistantId": assistant_id,
            "assistantName": "Bob",
        }
    ]
    assert client.get(f"/pending/notification/{user_id}").json() == []

    checked = client.get(f"/pending/check/{user_id}").json()
    assert checked == [
        {
            "requestId": request_id,
            "status": "accepted",
            "latitude": 12.97,
            "longitude": 77.59,
            "assistantId": assistant_id,
            "assistantName": "Bob",
        }
    ]


def test_request_listings(client) -> None:
    user_id = register_user(client)
    assistant_id = register_assistant(client)
    request_id = _send(client, user_id, assistant_id, category="errand").json()["requestId"]

    by_user = client.get(f"/pending/requests/user/{user_id}")
    assert by_user.status_code == 200
    [summary] = by_user.json()
    assert summary["requestId"] == request_id
    assert summary["userName"] == "Alice"
    assert summary["assistantId"] == assistant_id
    assert summary["assistantName"] == "Bob"
    assert summary["category"] == "errand"
    assert summary["status"] == "pending"

    by_assistant = client.get(f"/pending/requests/{assistant_id}").json()
    assert [item["requestId"] for item in by_assistant] == [request_id]

    missing = client.get("/pending/requests/user/31337")
    assert missing.status_code == 404


def test_listing_for_user_without_requests_is_empty(client) -> None:
    user_id = register_user(client)
    response = client.get(f"/pending/requests/user/{user_id}")
    assert response.status_code == 200
    assert response.json() == []


def test_out_of_range_identifiers_are_not_found(client) -> None:
    assistant_id = register_assistant(client)
    huge = 2**70

    confirmed = client.post("/pending/confirm", json={"requestId": huge, "assistantId": assistant_id})
    assert confirmed.status_code == 404
    assert confirmed.json()["error"]["code"] == "REQUEST_NOT_FOUND"

    completed = client.post("/pending/completed", json={"requestId": huge, "assistantId": assistant_id})
    assert completed.status_code == 404
    assert completed.json()["error"]["code"] == "REQUEST_NOT_FOUND"

    checked = client.get(f"/pending/check/{huge}")
    assert checked.status_code == 404
    assert checked.json()["error"]["code"] == "USER_NOT_FOUND"

    listed = client.get(f"/pending/requests/{huge}")
    assert listed.status_code == 404
    assert listed.json()["error"]["code"] == "ASSISTANT_NOT_FOUND"

    sent = _send(client, huge, assistant_id)
    assert sent.status_code == 404
    assert sent.json()["error"]["code"] == "USER_NOT_FOUND"


def test_complete_with_non_ascii_digits_is_not_found(client) -> None:
    assistant_id = register_assistant(client)
    for reference in ("²", "١٢٣", "9" * 5000):
        response = client.post("/pending/completed", json={"requestId": reference, "assistantId": assistant_id})
        assert response.status_code == 404, reference
        assert response.json()["error"]["code"] == "REQUEST_NOT_FOUND"
