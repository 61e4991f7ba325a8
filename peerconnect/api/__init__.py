from . import auth, doubts, answers, users, notifications

routers = [
    auth.router,
    doubts.router,
    answers.router,
    users.router,
    notifications.router,
]

__all__ = ['routers']
