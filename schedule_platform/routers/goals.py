from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schedule_platform.auth import CurrentUser, get_current_user
from schedule_platform.dependencies import get_db
from schedule_platform.errors import PermissionDeniedError, ValidationError
from schedule_platform.logging import logger
from schedule_platform.models import Goal
from schedule_platform.schema import (
    ApiResponse,
    GoalCreate,
    GoalCreatedResponse,
    GoalItem,
    GoalListResponse,
)
from schedule_platform.utils import parse_date

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=GoalListResponse)
async def list_goals(
    date: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Goals of the authenticated user for one day, in creation order."""
    day = parse_date(date)
    goals = (
        db.query(Goal)
        .filter(Goal.user_id == current_user.user_id, Goal.date == day)
        .order_by(Goal.created_at.asc(), Goal.id.asc())
        .all()
    )
    return GoalListResponse(goals=[GoalItem.model_validate(goal) for goal in goals])


@router.post("", response_model=GoalCreatedResponse)
async def create_goal(
    body: GoalCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.title or not body.date:
        raise ValidationError("Title and date are required")

    goal = Goal(
        user_id=current_user.user_id,
        title=body.title,
        date=parse_date(body.date),
        is_completed=False,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)

    logger.info("Created goal {}", goal.id)
    return GoalCreatedResponse(message="Goal added", goal_id=goal.id)


@router.patch("/{goal_id}/complete", response_model=ApiResponse)
async def complete_goal(
    goal_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark a goal completed.

    There is no "uncomplete"; calling this again on a completed goal moves
    ``completed_at`` to the time of the latest call.
    """
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == current_user.user_id).first()
    if not goal:
        raise PermissionDeniedError("You do not have permission to update this goal")

    goal.is_completed = True
    goal.completed_at = datetime.now(timezone.utc)
    db.commit()

    logger.info("Completed goal {}", goal_id)
    return ApiResponse(message="Goal completed")
