from bson import ObjectId


def test_create_question_starts_open(client):
    response = client.post("/api/questions", json={"text": "Was there a puzzle round?", "sessionId": "s1"})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["text"] == "Was there a puzzle round?"
    assert body["sessionId"] == "s1"
    assert body["aiSummary"] == ""


def test_created_ids_are_distinct(client):
    ids = {
        client.post("/api/questions", json={"text": f"Question {i}", "sessionId": "s1"}).json()["_id"]
        for i in range(5)
    }
    assert len(ids) == 5


def test_blank_question_rejected(client):
    response = client.post("/api/questions", json={"text": "   ", "sessionId": "s1"})
    assert response.status_code == 422
    assert client.get("/api/questions").json() == []


def test_list_questions_newest_first_with_live_counts(client, answer_body):
    older = client.post("/api/questions", json={"text": "Older", "sessionId": "s1"}).json()
    newer = client.post("/api/questions", json={"text": "Newer", "sessionId": "s1"}).json()

    listed = client.get("/api/questions").json()
    assert [q["_id"] for q in listed] == [newer["_id"], older["_id"]]
    assert all(q["answerCount"] == 0 for q in listed)

    client.post("/api/answers", json=answer_body(older["_id"]))
    client.post("/api/answers", json=answer_body(older["_id"], text="Another one"))

    listed = {q["_id"]: q for q in client.get("/api/questions").json()}
    thread = client.get(f"/api/answers/{older['_id']}").json()
    assert listed[older["_id"]]["answerCount"] == len(thread) == 2
    assert listed[newer["_id"]]["answerCount"] == 0


def test_get_question(client, question):
    response = client.get(f"/api/questions/{question['_id']}")
    assert response.status_code == 200
    assert response.json()["text"] == "How hard was the DSA round?"


def test_get_question_not_found(client):
    assert client.get(f"/api/questions/{ObjectId()}").status_code == 404
    assert client.get("/api/questions/not-an-id").status_code == 404


def test_set_status_any_transition(client, question):
    url = f"/api/questions/{question['_id']}/status"

    assert client.patch(url, json={"status": "archived"}).json()["status"] == "archived"
    # No transition rules on the moderation path
    assert client.patch(url, json={"status": "open"}).json()["status"] == "open"
    assert client.patch(url, json={"status": "reported"}).json()["status"] == "reported"


def test_set_status_validation_and_not_found(client, question):
    assert client.patch(f"/api/questions/{question['_id']}/status", json={"status": "deleted"}).status_code == 422
    assert client.patch(f"/api/questions/{ObjectId()}/status", json={"status": "active"}).status_code == 404
