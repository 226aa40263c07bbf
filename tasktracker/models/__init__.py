from .user import User, UserRole
from .department import Department
from .task import Task, TaskStatus, TaskPriority
