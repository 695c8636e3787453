"""API routers package."""

from app.routers import exercises, sets, users, workouts

__all__ = ["exercises", "sets", "users", "workouts"]
