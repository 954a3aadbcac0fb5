from unittest.mock import AsyncMock

from pymongo.errors import ServerSelectionTimeoutError


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_database_errors_map_to_500(client, mocker):
    mocker.patch(
        "placehub.api.routes.question_routes.QuestionService.list_questions",
        new=AsyncMock(side_effect=ServerSelectionTimeoutError("localhost:27017: connection refused")),
    )

    response = client.get("/api/questions")

    assert response.status_code == 500
    assert "connection refused" in response.json()["detail"]
