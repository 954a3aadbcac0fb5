from bson import ObjectId


def test_stats_for_unknown_session_are_zero(client):
    response = client.get("/api/sessions/nobody/stats")
    assert response.status_code == 200
    assert response.json() == {"open": 0, "active": 0, "archived": 0, "reported": 0, "total": 0}


def test_stats_group_by_question_status(client, answer_body):
    q1 = client.post("/api/questions", json={"text": "Q1", "sessionId": "s1"}).json()
    q2 = client.post("/api/questions", json={"text": "Q2", "sessionId": "s1"}).json()
    client.patch(f"/api/questions/{q2['_id']}/status", json={"status": "archived"})

    client.post("/api/answers", json=answer_body(q1["_id"]))
    client.post("/api/answers", json=answer_body(q1["_id"], text="again"))
    client.post("/api/answers", json=answer_body(q2["_id"]))
    # Other sessions and orphaned answers are not counted
    client.post("/api/answers", json=answer_body(q1["_id"], sessionId="someone-else"))
    client.post("/api/answers", json=answer_body(str(ObjectId())))

    stats = client.get("/api/sessions/s2/stats").json()
    assert stats == {"open": 2, "active": 0, "archived": 1, "reported": 0, "total": 3}
