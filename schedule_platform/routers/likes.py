from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schedule_platform.auth import CurrentUser, get_current_user
from schedule_platform.dependencies import get_db
from schedule_platform.errors import ConflictError
from schedule_platform.logging import logger
from schedule_platform.models import Like
from schedule_platform.schema import LikeStatusResponse, LikeToggleResponse
from schedule_platform.utils import get_todo_or_404

router = APIRouter(prefix="/api/todos", tags=["likes"])


def _find_like(db: Session, todo_id: int, user_id: int):
    return db.query(Like).filter(Like.todo_id == todo_id, Like.user_id == user_id).first()


@router.post("/{todo_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    todo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Like the todo, or take the like back if the caller already gave one."""
    get_todo_or_404(db, todo_id)

    existing = _find_like(db, todo_id, current_user.user_id)
    if existing:
        db.delete(existing)
        db.commit()
        logger.info("Removed like on todo {}", todo_id)
        return LikeToggleResponse(liked=False, message="Like removed")

    db.add(Like(todo_id=todo_id, user_id=current_user.user_id))
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against another toggle from the same user
        db.rollback()
        raise ConflictError("Like was changed by another request, try again")

    logger.info("Added like on todo {}", todo_id)
    return LikeToggleResponse(liked=True, message="Like added")


@router.get("/{todo_id}/likes", response_model=LikeStatusResponse)
async def like_status(
    todo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_todo_or_404(db, todo_id)
    like_count = db.query(Like).filter(Like.todo_id == todo_id).count()
    is_liked = _find_like(db, todo_id, current_user.user_id) is not None
    return LikeStatusResponse(like_count=like_count, is_liked=is_liked)
