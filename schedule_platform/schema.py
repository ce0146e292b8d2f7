from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Response/request base: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(ApiModel):
    success: bool = True
    message: Optional[str] = None


class ErrorResponse(ApiModel):
    success: bool = False
    message: str


#=======================
# AUTH
#=======================
class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(ApiModel):
    id: int
    name: str
    email: str


class UserProfile(UserPublic):
    profile_image_url: Optional[str] = None


class SignupResponse(ApiResponse):
    user_id: int


class LoginResponse(ApiResponse):
    token: str
    user: UserPublic


class MeResponse(ApiResponse):
    user: UserProfile


#=======================
# TODOS
#=======================
class TodoItem(ApiModel):
    id: int
    content: str
    date: date_type
    image_url: Optional[str] = None
    user_id: int
    user_name: str
    created_at: Optional[datetime] = None


class FeedItem(TodoItem):
    like_count: int = 0
    is_liked: bool = False
    comment_count: int = 0


class TodoListResponse(ApiResponse):
    todos: List[TodoItem]


class TodoCreatedResponse(ApiResponse):
    todo_id: int


class FeedResponse(ApiResponse):
    todos: List[FeedItem]
    current_page: int
    total_pages: int
    total: int


#=======================
# GOALS
#=======================
class GoalCreate(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None


class GoalItem(ApiModel):
    id: int
    user_id: int
    title: str
    date: date_type
    is_completed: bool
    completed_at: Optional[datetime] = None


class GoalListResponse(ApiResponse):
    goals: List[GoalItem]


class GoalCreatedResponse(ApiResponse):
    goal_id: int


#=======================
# LIKES
#=======================
class LikeToggleResponse(ApiResponse):
    liked: bool


class LikeStatusResponse(ApiResponse):
    like_count: int
    is_liked: bool


#=======================
# COMMENTS
#=======================
class CommentCreate(BaseModel):
    content: Optional[str] = None


class CommentItem(ApiModel):
    id: int
    content: str
    created_at: Optional[datetime] = None
    user_id: int
    user_name: str
    profile_image_url: Optional[str] = None


class CommentListResponse(ApiResponse):
    comments: List[CommentItem]


class CommentCreatedResponse(ApiResponse):
    comment: CommentItem
