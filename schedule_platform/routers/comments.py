from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schedule_platform.auth import CurrentUser, get_current_user
from schedule_platform.dependencies import get_db
from schedule_platform.errors import PermissionDeniedError, ValidationError
from schedule_platform.logging import logger
from schedule_platform.models import Comment, User
from schedule_platform.schema import (
    ApiResponse,
    CommentCreate,
    CommentCreatedResponse,
    CommentItem,
    CommentListResponse,
)
from schedule_platform.utils import get_todo_or_404

router = APIRouter(prefix="/api", tags=["comments"])


def _comment_rows(db: Session):
    return db.query(Comment, User.name, User.profile_image_url).join(User, Comment.user_id == User.id)


def _to_item(comment: Comment, user_name: str, profile_image_url) -> CommentItem:
    return CommentItem(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        user_id=comment.user_id,
        user_name=user_name,
        profile_image_url=profile_image_url,
    )


@router.get("/todos/{todo_id}/comments", response_model=CommentListResponse)
async def list_comments(
    todo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Comments on a todo, oldest first."""
    get_todo_or_404(db, todo_id)
    rows = (
        _comment_rows(db)
        .filter(Comment.todo_id == todo_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    return CommentListResponse(comments=[_to_item(*row) for row in rows])


@router.post("/todos/{todo_id}/comments", response_model=CommentCreatedResponse)
async def create_comment(
    todo_id: int,
    body: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    content = (body.content or "").strip()
    if not content:
        raise ValidationError("Comment content is required")
    get_todo_or_404(db, todo_id)

    comment = Comment(todo_id=todo_id, user_id=current_user.user_id, content=content)
    db.add(comment)
    db.commit()

    row = _comment_rows(db).filter(Comment.id == comment.id).one()
    logger.info("Added comment {} on todo {}", comment.id, todo_id)
    return CommentCreatedResponse(message="Comment added", comment=_to_item(*row))


@router.delete("/comments/{comment_id}", response_model=ApiResponse)
async def delete_comment(
    comment_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Only the author may delete a comment."""
    comment = (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.user_id == current_user.user_id)
        .first()
    )
    if not comment:
        raise PermissionDeniedError("You do not have permission to delete this comment")

    db.delete(comment)
    db.commit()

    logger.info("Deleted comment {}", comment_id)
    return ApiResponse(message="Comment deleted")
