from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session

from schedule_platform.auth import CurrentUser, get_current_user
from schedule_platform.dependencies import get_db, get_image_store
from schedule_platform.errors import PermissionDeniedError, ValidationError
from schedule_platform.logging import logger
from schedule_platform.models import Comment, Like, Todo, User
from schedule_platform.schema import (
    ApiResponse,
    FeedItem,
    FeedResponse,
    TodoCreatedResponse,
    TodoItem,
    TodoListResponse,
)
from schedule_platform.uploads import ImageStore
from schedule_platform.utils import parse_date, positive_int, total_pages

router = APIRouter(prefix="/api/todos", tags=["todos"])

FEED_DEFAULT_LIMIT = 10
FEED_MAX_LIMIT = 50


def _has_file(image: Optional[UploadFile]) -> bool:
    return image is not None and bool(image.filename)


def _get_owned_todo(db: Session, todo_id: int, user_id: int, action: str) -> Todo:
    """Load a todo the caller owns; absent and foreign rows both answer 403."""
    todo = db.query(Todo).filter(Todo.id == todo_id, Todo.user_id == user_id).first()
    if not todo:
        raise PermissionDeniedError(f"You do not have permission to {action} this todo")
    return todo


#=======================
# GETS
#=======================
@router.get("", response_model=TodoListResponse)
async def list_todos(
    date: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Todos of the authenticated user for one day, newest first."""
    day = parse_date(date)

    rows = (
        db.query(Todo, User.name)
        .join(User, Todo.user_id == User.id)
        .filter(Todo.user_id == current_user.user_id, Todo.date == day)
        .order_by(Todo.created_at.desc(), Todo.id.desc())
        .all()
    )
    todos = [
        TodoItem(
            id=todo.id,
            content=todo.content,
            date=todo.date,
            image_url=todo.image_url,
            user_id=todo.user_id,
            user_name=user_name,
            created_at=todo.created_at,
        )
        for todo, user_name in rows
    ]
    return TodoListResponse(todos=todos)


@router.get("/feed", response_model=FeedResponse)
async def feed(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Other users' todos, newest first, with like and comment counts."""
    page_number = positive_int(page, 1)
    page_size = positive_int(limit, FEED_DEFAULT_LIMIT, maximum=FEED_MAX_LIMIT)
    offset = (page_number - 1) * page_size
    user_id = current_user.user_id

    total = db.query(func.count(Todo.id)).filter(Todo.user_id != user_id).scalar() or 0

    like_count = (
        select(func.count(Like.id)).where(Like.todo_id == Todo.id).correlate(Todo).scalar_subquery()
    )
    comment_count = (
        select(func.count(Comment.id)).where(Comment.todo_id == Todo.id).correlate(Todo).scalar_subquery()
    )
    is_liked = exists().where(Like.todo_id == Todo.id, Like.user_id == user_id).correlate(Todo)

    # Past the last page; also keeps huge offsets away from the driver
    if offset >= total:
        rows = []
    else:
        rows = (
            db.query(
                Todo,
                User.name,
                like_count.label("like_count"),
                is_liked.label("is_liked"),
                comment_count.label("comment_count"),
            )
            .join(User, Todo.user_id == User.id)
            .filter(Todo.user_id != user_id)
            .order_by(Todo.created_at.desc(), Todo.id.desc())
            .offset(offset)
            .limit(page_size)
            .all()
        )

    todos = [
        FeedItem(
            id=todo.id,
            content=todo.content,
            date=todo.date,
            image_url=todo.image_url,
            user_id=todo.user_id,
            user_name=user_name,
            created_at=todo.created_at,
            like_count=likes or 0,
            is_liked=bool(liked),
            comment_count=comments or 0,
        )
        for todo, user_name, likes, liked, comments in rows
    ]

    return FeedResponse(
        todos=todos,
        current_page=page_number,
        total_pages=total_pages(total, page_size),
        total=total,
    )


#=======================
# POSTS
#=======================
@router.post("", response_model=TodoCreatedResponse)
async def create_todo(
    date: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    """Create a todo from multipart form data; content, image or both."""
    if not date:
        raise ValidationError("Date is required")
    day = parse_date(date)

    has_image = _has_file(image)
    if not content and not has_image:
        raise ValidationError("Content or an image is required")

    image_url = await images.save(image) if has_image else None

    todo = Todo(user_id=current_user.user_id, content=content or "", date=day, image_url=image_url)
    db.add(todo)
    try:
        db.commit()
    except Exception:
        db.rollback()
        images.delete(image_url)
        raise
    db.refresh(todo)

    logger.info("Created todo {} for {}", todo.id, day.isoformat())
    return TodoCreatedResponse(message="Todo added", todo_id=todo.id)


#=======================
# PATCHES
#=======================
@router.patch("/{todo_id}", response_model=ApiResponse)
async def update_todo(
    request: Request,
    todo_id: int,
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    """Replace a todo's content and, when a new file is sent, its image.

    A ``content`` field sent empty clears the text; leaving the field out
    keeps it.
    """
    todo = _get_owned_todo(db, todo_id, current_user.user_id, "edit")

    # FastAPI reports an empty form field as None, so look at the raw form
    form = await request.form()
    if content is not None:
        new_content = content
    else:
        new_content = "" if "content" in form else todo.content
    has_image = _has_file(image)
    if not new_content and not has_image and not todo.image_url:
        raise ValidationError("Content or an image is required")

    old_image_url = todo.image_url
    new_image_url = await images.save(image) if has_image else None
    if new_image_url:
        todo.image_url = new_image_url
    todo.content = new_content or ""

    try:
        db.commit()
    except Exception:
        db.rollback()
        images.delete(new_image_url)
        raise

    if new_image_url and old_image_url:
        images.delete(old_image_url)

    logger.info("Updated todo {}", todo_id)
    return ApiResponse(message="Todo updated")


#=======================
# DELETES
#=======================
@router.delete("/{todo_id}", response_model=ApiResponse)
async def delete_todo(
    todo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
):
    """Delete a todo; its likes and comments go with it via ON DELETE CASCADE."""
    todo = _get_owned_todo(db, todo_id, current_user.user_id, "delete")

    images.delete(todo.image_url)
    db.delete(todo)
    db.commit()

    logger.info("Deleted todo {}", todo_id)
    return ApiResponse(message="Todo deleted")
