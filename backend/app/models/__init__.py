"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account, credentials and role
- Role: Enumeration of user roles
- Task: Task record managed through the tasks API
"""
from .user import Role, User
from .task import Task
