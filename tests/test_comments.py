"""Tests for commenting on todos."""

import pytest

from conftest import create_todo
from schedule_platform.models import Comment


def add_comment(client, user, todo_id, content):
    return client.post(f"/api/todos/{todo_id}/comments", json={"content": content}, headers=user["headers"])


class TestCreateComment:
    def test_content_is_trimmed_and_author_attached(self, client, alice, bob):
        todo_id = create_todo(client, alice)

        response = add_comment(client, bob, todo_id, "  nice!  ")

        assert response.status_code == 200
        comment = response.json()["comment"]
        assert comment["content"] == "nice!"
        assert comment["userId"] == bob["id"]
        assert comment["userName"] == "Bob"
        assert comment["profileImageUrl"] is None
        assert comment["createdAt"]

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_blank_content_is_rejected(self, client, db_session, alice, content):
        todo_id = create_todo(client, alice)

        response = add_comment(client, alice, todo_id, content)

        assert response.status_code == 400
        assert db_session.query(Comment).count() == 0

    def test_unknown_todo_is_404(self, client, alice):
        response = add_comment(client, alice, 999, "hello")
        assert response.status_code == 404


class TestListComments:
    def test_oldest_first(self, client, alice, bob):
        todo_id = create_todo(client, alice)
        add_comment(client, bob, todo_id, "first")
        add_comment(client, alice, todo_id, "second")
        add_comment(client, bob, todo_id, "third")

        comments = client.get(f"/api/todos/{todo_id}/comments", headers=alice["headers"]).json()["comments"]

        assert [c["content"] for c in comments] == ["first", "second", "third"]
        assert [c["userName"] for c in comments] == ["Bob", "Alice", "Bob"]

    def test_empty(self, client, alice):
        todo_id = create_todo(client, alice)

        body = client.get(f"/api/todos/{todo_id}/comments", headers=alice["headers"]).json()

        assert body["success"] is True
        assert body["comments"] == []

    def test_unknown_todo_is_404(self, client, alice):
        response = client.get("/api/todos/999/comments", headers=alice["headers"])

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestDeleteComment:
    def test_author_can_delete(self, client, db_session, alice, bob):
        todo_id = create_todo(client, alice)
        comment_id = add_comment(client, bob, todo_id, "oops").json()["comment"]["id"]

        response = client.delete(f"/api/comments/{comment_id}", headers=bob["headers"])

        assert response.status_code == 200
        assert db_session.get(Comment, comment_id) is None

    def test_todo_owner_cannot_delete_others_comment(self, client, db_session, alice, bob):
        todo_id = create_todo(client, alice)
        comment_id = add_comment(client, bob, todo_id, "mine").json()["comment"]["id"]

        response = client.delete(f"/api/comments/{comment_id}", headers=alice["headers"])

        assert response.status_code == 403
        assert db_session.get(Comment, comment_id) is not None

    def test_missing_comment_gets_403(self, client, alice):
        response = client.delete("/api/comments/999", headers=alice["headers"])
        assert response.status_code == 403
