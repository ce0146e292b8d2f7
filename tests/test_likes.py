"""Tests for liking todos."""

from conftest import create_todo
from schedule_platform.models import Like
from schedule_platform.routers import likes as likes_router


class TestToggleLike:
    def test_like_then_unlike(self, client, alice, bob):
        todo_id = create_todo(client, alice)

        liked = client.post(f"/api/todos/{todo_id}/like", headers=bob["headers"]).json()
        status = client.get(f"/api/todos/{todo_id}/likes", headers=bob["headers"]).json()
        assert liked["liked"] is True
        assert status["likeCount"] == 1
        assert status["isLiked"] is True

        unliked = client.post(f"/api/todos/{todo_id}/like", headers=bob["headers"]).json()
        status = client.get(f"/api/todos/{todo_id}/likes", headers=bob["headers"]).json()
        assert unliked["liked"] is False
        assert status["likeCount"] == 0
        assert status["isLiked"] is False

    def test_one_like_per_user(self, client, db_session, alice, bob):
        todo_id = create_todo(client, alice)
        client.post(f"/api/todos/{todo_id}/like", headers=alice["headers"])
        client.post(f"/api/todos/{todo_id}/like", headers=bob["headers"])

        assert db_session.query(Like).filter(Like.todo_id == todo_id).count() == 2

        status = client.get(f"/api/todos/{todo_id}/likes", headers=alice["headers"]).json()
        assert status["likeCount"] == 2
        assert status["isLiked"] is True

    def test_owner_may_like_own_todo(self, client, alice):
        todo_id = create_todo(client, alice)

        response = client.post(f"/api/todos/{todo_id}/like", headers=alice["headers"])

        assert response.status_code == 200
        assert response.json()["liked"] is True

    def test_unknown_todo_is_404(self, client, db_session, alice):
        response = client.post("/api/todos/999/like", headers=alice["headers"])

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert db_session.query(Like).count() == 0

    def test_losing_a_concurrent_like_is_a_conflict(self, client, db_session, monkeypatch, alice):
        todo_id = create_todo(client, alice)
        client.post(f"/api/todos/{todo_id}/like", headers=alice["headers"])
        # The other request inserted its like after this one checked for it
        monkeypatch.setattr(likes_router, "_find_like", lambda db, todo_id, user_id: None)

        response = client.post(f"/api/todos/{todo_id}/like", headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert db_session.query(Like).filter(Like.todo_id == todo_id).count() == 1


class TestLikeStatus:
    def test_no_likes(self, client, alice):
        todo_id = create_todo(client, alice)

        body = client.get(f"/api/todos/{todo_id}/likes", headers=alice["headers"]).json()

        assert body == {"success": True, "message": None, "likeCount": 0, "isLiked": False}

    def test_unknown_todo_is_404(self, client, alice):
        response = client.get("/api/todos/999/likes", headers=alice["headers"])

        assert response.status_code == 404
        assert response.json()["success"] is False
