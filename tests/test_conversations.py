def start(client, headers, target_id):
    response = client.post("/conversations", json={"target_user_id": target_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()

def test_start_conversation_is_pending_request(client, make_user):
    alice_id, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")

    convo = start(client, alice, bob_id)
    assert convo["status"] == "PENDING"
    assert convo["requester_id"] == alice_id
    assert sorted(p["id"] for p in convo["participants"]) == sorted([alice_id, bob_id])

    # Starting again from either side returns the same conversation
    assert start(client, alice, bob_id)["id"] == convo["id"]
    assert start(client, bob, alice_id)["id"] == convo["id"]

def test_inbox_split(client, make_user):
    _, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    convo = start(client, alice, bob_id)

    assert [c["id"] for c in client.get("/conversations", params={"box": "primary"}, headers=alice).json()] == [convo["id"]]
    assert client.get("/conversations", params={"box": "requests"}, headers=alice).json() == []

    assert client.get("/conversations", params={"box": "primary"}, headers=bob).json() == []
    assert [c["id"] for c in client.get("/conversations", params={"box": "requests"}, headers=bob).json()] == [convo["id"]]

    client.post(f"/conversations/{convo['id']}/accept", headers=bob)
    assert [c["id"] for c in client.get("/conversations", params={"box": "primary"}, headers=bob).json()] == [convo["id"]]
    assert client.get("/conversations", params={"box": "requests"}, headers=bob).json() == []

    assert client.get("/conversations", params={"box": "spam"}, headers=bob).status_code == 400

def test_only_recipient_can_accept(client, make_user):
    _, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    convo = start(client, alice, bob_id)

    assert client.post(f"/conversations/{convo['id']}/accept", headers=alice).status_code == 403

    response = client.post(f"/conversations/{convo['id']}/accept", headers=bob)
    assert response.status_code == 200
    assert response.json()["status"] == "ACCEPTED"

    # Accepting twice is a state conflict
    assert client.post(f"/conversations/{convo['id']}/accept", headers=bob).status_code == 409
    assert client.post(f"/conversations/{convo['id']}/reject", headers=bob).status_code == 409

def test_outsider_cannot_see_conversation(client, make_user):
    _, alice = make_user("Alice")
    bob_id, _ = make_user("Bob")
    _, eve = make_user("Eve")
    convo = start(client, alice, bob_id)

    assert client.get(f"/conversations/{convo['id']}", headers=eve).status_code == 404
    assert client.post(f"/conversations/{convo['id']}/accept", headers=eve).status_code == 404
    assert client.get(f"/conversations/{convo['id']}/messages", headers=eve).status_code == 404

def test_pending_conversation_messaging(client, make_user):
    _, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    convo = start(client, alice, bob_id)

    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Hi Bob!"}, headers=alice)
    assert response.status_code == 201
    assert response.json()["sender"]["name"] == "Alice"

    # The recipient must accept before replying
    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Hey"}, headers=bob)
    assert response.status_code == 403

    client.post(f"/conversations/{convo['id']}/accept", headers=bob)
    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Hey"}, headers=bob)
    assert response.status_code == 201

    messages = client.get(f"/conversations/{convo['id']}/messages", headers=alice).json()
    assert [m["message"] for m in messages] == ["Hi Bob!", "Hey"]

    convo = client.get(f"/conversations/{convo['id']}", headers=alice).json()
    assert convo["last_message"] == "Hey"
    assert convo["last_message_time"] is not None

def test_rejected_conversation(client, make_user):
    alice_id, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    convo = start(client, alice, bob_id)

    response = client.post(f"/conversations/{convo['id']}/reject", headers=bob)
    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"

    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Please?"}, headers=alice)
    assert response.status_code == 403

    # The requester still sees the rejected chat in their primary inbox
    primary = client.get("/conversations", params={"box": "primary"}, headers=alice).json()
    assert [(c["id"], c["status"]) for c in primary] == [(convo["id"], "REJECTED")]
    assert client.get("/conversations", params={"box": "primary"}, headers=bob).json() == []
    assert client.get("/conversations", params={"box": "requests"}, headers=bob).json() == []

    # A new request reopens the conversation with a new requester
    reopened = start(client, bob, alice_id)
    assert reopened["id"] == convo["id"]
    assert reopened["status"] == "PENDING"
    assert reopened["requester_id"] == bob_id

def test_blocking_prevents_conversations(client, make_user):
    alice_id, alice = make_user("Alice")
    bob_id, bob = make_user("Bob")
    convo = start(client, alice, bob_id)
    client.post(f"/conversations/{convo['id']}/accept", headers=bob)

    client.post(f"/users/{alice_id}/block", headers=bob)

    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Hello?"}, headers=alice)
    assert response.status_code == 403
    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Bye"}, headers=bob)
    assert response.status_code == 403

    response = client.post("/conversations", json={"target_user_id": bob_id}, headers=alice)
    assert response.status_code == 403

    client.delete(f"/users/{alice_id}/block", headers=bob)
    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "Hello again"}, headers=alice)
    assert response.status_code == 201

def test_cannot_message_self(client, make_user):
    me_id, headers = make_user()
    response = client.post("/conversations", json={"target_user_id": me_id}, headers=headers)
    assert response.status_code == 400

def test_start_conversation_with_unknown_user(client, make_user):
    _, headers = make_user()
    response = client.post("/conversations", json={"target_user_id": 4242}, headers=headers)
    assert response.status_code == 404

def test_blank_message_rejected(client, make_user):
    _, alice = make_user("Alice")
    bob_id, _ = make_user("Bob")
    convo = start(client, alice, bob_id)
    response = client.post(f"/conversations/{convo['id']}/messages", json={"message": "   "}, headers=alice)
    assert response.status_code == 400
