from quizcore.routers import attempts, health, quizzes, users

__all__ = [
    "attempts",
    "health",
    "quizzes",
    "users",
]
