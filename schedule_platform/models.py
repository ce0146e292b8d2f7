from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from schedule_platform.database import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    profile_image_url = Column(String(500))
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    todos = relationship("Todo", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    goals = relationship("Goal", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)


class Todo(Base):
    __tablename__ = "todos"
    __table_args__ = (
        Index("idx_todos_user_date", "user_id", "date"),
        Index("idx_todos_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False)
    image_url = Column(String(500))
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    owner = relationship("User", back_populates="todos")
    # Rows are removed by ON DELETE CASCADE; the ORM mirrors it for already-loaded children
    likes = relationship("Like", back_populates="todo", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="todo", cascade="all, delete-orphan", passive_deletes=True)


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (Index("idx_goals_user_date", "user_id", "date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    owner = relationship("User", back_populates="goals")


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("todo_id", "user_id", name="uq_likes_todo_user"),)

    id = Column(Integer, primary_key=True, index=True)
    todo_id = Column(Integer, ForeignKey("todos.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    todo = relationship("Todo", back_populates="likes")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    todo_id = Column(Integer, ForeignKey("todos.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    todo = relationship("Todo", back_populates="comments")
    author = relationship("User")
