# app/models/task.py
"""
Database model for tasks.
"""
from tortoise import fields, models


class Task(models.Model):
    """
    Task database model.

    A task is not owned by any user; any caller allowed by the access rules
    may create, update or (admins only) delete it. Deletes are hard deletes.
    """
    id = fields.IntField(pk=True)
    title = fields.CharField(max_length=255, null=True)
    description = fields.TextField(null=True)
    completed = fields.BooleanField(default=False)

    class Meta:
        table = "task"
