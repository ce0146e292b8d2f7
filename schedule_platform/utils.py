"""Small helpers shared by the routers."""

from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from schedule_platform.errors import NotFoundError, ValidationError
from schedule_platform.models import Todo


def parse_date(value: Optional[str], field: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises:
        ValidationError: If the value is missing or not a calendar date
    """
    if not value:
        raise ValidationError(f"{field.capitalize()} is required")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field.capitalize()} must be formatted as YYYY-MM-DD")


def positive_int(value: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    """Lenient query-string integer: anything unusable falls back to ``default``."""
    try:
        number = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None:
        number = min(number, maximum)
    return number


def total_pages(total: int, limit: int) -> int:
    """Ceiling of ``total / limit``."""
    return -(-total // limit) if limit else 0


def get_todo_or_404(db: Session, todo_id: int) -> Todo:
    """Load any user's todo; likes and comments hang off existing todos only.

    Raises:
        NotFoundError: If no todo has this id
    """
    todo = db.get(Todo, todo_id)
    if todo is None:
        raise NotFoundError("Todo not found")
    return todo
