"""Checks run on user input before anything is sent to the server."""

import re
from pathlib import Path
from typing import Optional

from schedule_platform.client.errors import FormError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MAX_IMAGE_BYTES = 5 * 1024 * 1024
IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif"}


def validate_signup(name: str, email: str, password: str, confirm_password: str) -> None:
    errors = {}
    if not name or not name.strip():
        errors["name"] = "Please enter your name."
    if not email or not email.strip():
        errors["email"] = "Please enter your email."
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address."
    if not password:
        errors["password"] = "Please enter a password."
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password."
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match."
    if errors:
        raise FormError(errors)


def validate_login(email: str, password: str) -> None:
    errors = {}
    if not email or not email.strip():
        errors["email"] = "Please enter your email."
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address."
    if not password:
        errors["password"] = "Please enter your password."
    if errors:
        raise FormError(errors)


def validate_image(path: Path) -> None:
    """Reject files that are missing, too large or not an allowed image type."""
    path = Path(path)
    if not path.is_file():
        raise FormError({"image": f"Image file not found: {path}"})
    if path.suffix.lower() not in IMAGE_EXTENSIONS:
        raise FormError({"image": "Only image files (jpeg, jpg, png, gif) can be uploaded."})
    if path.stat().st_size > MAX_IMAGE_BYTES:
        raise FormError({"image": "Image must be 5MB or smaller."})


def validate_todo(content: Optional[str], image: Optional[Path]) -> None:
    if not (content and content.strip()) and image is None:
        raise FormError({"content": "Please enter content or attach an image."})
    if image is not None:
        validate_image(image)


def validate_goal(title: str) -> None:
    if not title or not title.strip():
        raise FormError({"title": "Please enter a goal."})


def validate_comment(content: str) -> None:
    if not content or not content.strip():
        raise FormError({"content": "Please enter a comment."})
