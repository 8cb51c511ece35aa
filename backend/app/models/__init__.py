from app.models.projects import Project
from app.models.reviews import Review
from app.models.tasks import Task
from app.models.users import User

__all__ = [
    "Project",
    "Review",
    "Task",
    "User",
]
