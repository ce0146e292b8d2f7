from schedule_platform.routers import auth, comments, goals, likes, todos

__all__ = ["auth", "comments", "goals", "likes", "todos"]
