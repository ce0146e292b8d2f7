from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from schedule_platform.config import Settings
from schedule_platform.uploads import ImageStore


# One session per request, closed when the response is sent
def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store
