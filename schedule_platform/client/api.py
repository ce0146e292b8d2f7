"""HTTP client for the schedule API.

Example:
    >>> from schedule_platform.client import ScheduleClient, MemoryTokenStorage
    >>> client = ScheduleClient("http://localhost:5000", MemoryTokenStorage())
    >>> client.login("a@x.com", "pw12345678")
    >>> client.list_todos("2024-01-01")
"""

import mimetypes
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from schedule_platform.client.errors import (
    ApiError,
    ConnectionFailedError,
    SessionExpiredError,
)
from schedule_platform.client.storage import TokenStorage, is_token_valid
from schedule_platform.logging import logger


class ScheduleClient:
    """One method per API endpoint.

    Authenticated calls send the stored token as a bearer credential. A 401
    answer clears the stored token and raises :class:`SessionExpiredError`.

    Args:
        base_url: Server address, e.g. ``http://localhost:5000``
        storage: Where the session token is kept
        session: HTTP session to use (a new ``requests.Session`` by default)
        timeout: Seconds to wait for each response
    """

    def __init__(
        self,
        base_url: str,
        storage: TokenStorage,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.session = session or requests.Session()
        self.timeout = timeout

    #=======================
    # PLUMBING
    #=======================
    def _auth_headers(self) -> Dict[str, str]:
        if not is_token_valid(self.storage):
            raise SessionExpiredError()
        return {"Authorization": f"Bearer {self.storage.get()}"}

    def _request(self, method: str, path: str, auth: bool = True, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if auth:
            headers.update(self._auth_headers())

        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ConnectionFailedError(f"Could not reach the server at {self.base_url}: {e}") from e

        if response.status_code == 401 and auth:
            logger.info("Server rejected the session; clearing stored token")
            self.storage.remove()
            raise SessionExpiredError()

        try:
            data = response.json()
        except ValueError:
            raise ApiError(response.status_code, response.text or "Unexpected response from server")

        if response.status_code >= 400 or not data.get("success", False):
            raise ApiError(response.status_code, data.get("message") or "Request failed")
        return data

    @staticmethod
    def _image_part(image: Path):
        image = Path(image)
        content_type = mimetypes.guess_type(image.name)[0] or "application/octet-stream"
        return {"image": (image.name, image.read_bytes(), content_type)}

    #=======================
    # AUTH
    #=======================
    def signup(self, name: str, email: str, password: str) -> int:
        data = self._request(
            "POST",
            "/api/auth/signup",
            auth=False,
            json={"name": name, "email": email, "password": password},
        )
        return data["userId"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and store the issued token. Returns the user profile."""
        data = self._request(
            "POST",
            "/api/auth/login",
            auth=False,
            json={"email": email, "password": password},
        )
        self.storage.set(data["token"])
        return data["user"]

    def logout(self) -> None:
        self.storage.remove()

    def is_logged_in(self) -> bool:
        return is_token_valid(self.storage)

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me")["user"]

    #=======================
    # TODOS
    #=======================
    def list_todos(self, date: str) -> list:
        return self._request("GET", "/api/todos", params={"date": date})["todos"]

    def create_todo(self, date: str, content: Optional[str] = None, image: Optional[Path] = None) -> int:
        form = {"date": date}
        if content:
            form["content"] = content
        files = self._image_part(image) if image else None
        return self._request("POST", "/api/todos", data=form, files=files)["todoId"]

    def update_todo(self, todo_id: int, content: Optional[str] = None, image: Optional[Path] = None) -> None:
        form = {"content": content} if content is not None else {}
        files = self._image_part(image) if image else None
        self._request("PATCH", f"/api/todos/{todo_id}", data=form, files=files)

    def delete_todo(self, todo_id: int) -> None:
        self._request("DELETE", f"/api/todos/{todo_id}")

    def feed(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        data = self._request("GET", "/api/todos/feed", params={"page": page, "limit": limit})
        return {key: data[key] for key in ("todos", "currentPage", "totalPages", "total")}

    #=======================
    # GOALS
    #=======================
    def list_goals(self, date: str) -> list:
        return self._request("GET", "/api/goals", params={"date": date})["goals"]

    def create_goal(self, title: str, date: str) -> int:
        return self._request("POST", "/api/goals", json={"title": title, "date": date})["goalId"]

    def complete_goal(self, goal_id: int) -> None:
        self._request("PATCH", f"/api/goals/{goal_id}/complete")

    #=======================
    # LIKES & COMMENTS
    #=======================
    def toggle_like(self, todo_id: int) -> bool:
        return self._request("POST", f"/api/todos/{todo_id}/like")["liked"]

    def like_status(self, todo_id: int) -> Dict[str, Any]:
        data = self._request("GET", f"/api/todos/{todo_id}/likes")
        return {"likeCount": data["likeCount"], "isLiked": data["isLiked"]}

    def list_comments(self, todo_id: int) -> list:
        return self._request("GET", f"/api/todos/{todo_id}/comments")["comments"]

    def add_comment(self, todo_id: int, content: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/todos/{todo_id}/comments", json={"content": content})["comment"]

    def delete_comment(self, comment_id: int) -> None:
        self._request("DELETE", f"/api/comments/{comment_id}")
