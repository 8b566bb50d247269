from fastapi import status


def create_session(client, headers, title=None):
    payload = {"title": title} if title is not None else {}
    response = client.post("/api/chat/sessions", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["session"]


def test_create_session_default_title(client, auth_headers):
    session = create_session(client, auth_headers)
    assert session["title"] == "New Chat"
    assert session["is_active"] is True


def test_create_session_with_title(client, auth_headers):
    session = create_session(client, auth_headers, title="Budget questions")
    assert session["title"] == "Budget questions"


def test_list_sessions_with_stats(client, auth_headers):
    first = create_session(client, auth_headers, title="First")
    second = create_session(client, auth_headers, title="Second")
    client.post(
        f"/api/chat/sessions/{first['id']}/messages",
        json={"role": "user", "content": "hello"},
        headers=auth_headers
    )

    response = client.get("/api/chat/sessions", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    sessions = {session["id"]: session for session in response.json()["sessions"]}
    assert sessions[first["id"]]["message_count"] == 1
    assert sessions[first["id"]]["last_message_at"] is not None
    assert sessions[second["id"]]["message_count"] == 0
    assert sessions[second["id"]]["last_message_at"] is None


def test_list_sessions_newest_first(client, auth_headers):
    first = create_session(client, auth_headers, title="First")
    second = create_session(client, auth_headers, title="Second")

    sessions = client.get("/api/chat/sessions", headers=auth_headers).json()["sessions"]
    assert [session["id"] for session in sessions] == [second["id"], first["id"]]


def test_get_session(client, auth_headers):
    session = create_session(client, auth_headers, title="Lookup")
    response = client.get(f"/api/chat/sessions/{session['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["session"]["title"] == "Lookup"


def test_update_session(client, auth_headers):
    session = create_session(client, auth_headers)
    response = client.put(
        f"/api/chat/sessions/{session['id']}",
        json={"title": "Renamed", "is_active": False},
        headers=auth_headers
    )
    assert response.status_code == status.HTTP_200_OK
    updated = response.json()["session"]
    assert updated["title"] == "Renamed"
    assert updated["is_active"] is False


def test_update_session_rejects_blank_title(client, auth_headers):
    session = create_session(client, auth_headers)
    response = client.put(
        f"/api/chat/sessions/{session['id']}",
        json={"title": "   "},
        headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Title cannot be empty"}


def test_delete_session_removes_messages(client, db, auth_headers):
    from knowledge_hub.models import ChatMessage

    session = create_session(client, auth_headers)
    client.post(
        f"/api/chat/sessions/{session['id']}/messages",
        json={"role": "user", "content": "hello"},
        headers=auth_headers
    )

    response = client.delete(f"/api/chat/sessions/{session['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert client.get(f"/api/chat/sessions/{session['id']}", headers=auth_headers).status_code == 404
    assert db.query(ChatMessage).count() == 0


def test_messages_in_order(client, auth_headers):
    session = create_session(client, auth_headers)
    for role, content in [("user", "one"), ("assistant", "two"), ("user", "three")]:
        response = client.post(
            f"/api/chat/sessions/{session['id']}/messages",
            json={"role": role, "content": content, "documents_used": 1, "metadata": {"k": "v"}},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["message"]["content"] == content

    messages = client.get(f"/api/chat/sessions/{session['id']}/messages", headers=auth_headers).json()["messages"]
    assert [message["content"] for message in messages] == ["one", "two", "three"]
    assert [message["role"] for message in messages] == ["user", "assistant", "user"]
    assert messages[0]["metadata"] == {"k": "v"}
    assert messages[0]["documents_used"] == 1


def test_add_message_rejects_unknown_role(client, auth_headers):
    session = create_session(client, auth_headers)
    response = client.post(
        f"/api/chat/sessions/{session['id']}/messages",
        json={"role": "robot", "content": "beep"},
        headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_sessions_are_private(client, auth_headers, other_auth_headers):
    session = create_session(client, auth_headers)

    assert client.get("/api/chat/sessions", headers=other_auth_headers).json()["sessions"] == []
    for method, url, kwargs in [
        ("GET", f"/api/chat/sessions/{session['id']}", {}),
        ("PUT", f"/api/chat/sessions/{session['id']}", {"json": {"title": "hijacked"}}),
        ("DELETE", f"/api/chat/sessions/{session['id']}", {}),
        ("GET", f"/api/chat/sessions/{session['id']}/messages", {}),
        ("POST", f"/api/chat/sessions/{session['id']}/messages", {"json": {"role": "user", "content": "x"}}),
    ]:
        response = client.request(method, url, headers=other_auth_headers, **kwargs)
        assert response.status_code == status.HTTP_404_NOT_FOUND, (method, url)
        assert response.json() == {"error": "Session not found"}
