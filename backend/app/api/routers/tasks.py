# app/api/routers/tasks.py
from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import require_operation
from app.core.access import Principal
from app.models.task import Task
from app.schemas.task import TaskIn, TaskOut

router = APIRouter(prefix="/tasks", tags=["tasks"])


async def _get_or_404(task_id: int) -> Task:
    task = await Task.get_or_none(id=task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="TASK_NOT_FOUND")
    return task


@router.get("", response_model=list[TaskOut])
async def list_tasks(principal: Principal = Depends(require_operation("list_tasks"))):
    return await Task.all().order_by("id")


@router.post("", response_model=TaskOut)
async def create_task(body: TaskIn, principal: Principal = Depends(require_operation("create_task"))):
    return await Task.create(
        title=body.title,
        description=body.description,
        completed=body.completed,
    )


@router.get("/{task_id}", response_model=TaskOut)
async def get_task(task_id: int, principal: Principal = Depends(require_operation("get_task"))):
    return await _get_or_404(task_id)


@router.put("/{task_id}", response_model=TaskOut)
async def update_task(
    task_id: int,
    body: TaskIn,
    principal: Principal = Depends(require_operation("update_task")),
):
    """
    Replace a task's title, description and completed flag.

    Raises:
        HTTPException (404): If the task does not exist
    """
    task = await _get_or_404(task_id)
    task.title = body.title
    task.description = body.description
    task.completed = body.completed
    await task.save()
    return task


@router.delete("/{task_id}")
async def delete_task(task_id: int, principal: Principal = Depends(require_operation("delete_task"))):
    """
    Delete a task (admins only).

    Raises:
        HTTPException (404): If the task does not exist
    """
    deleted = await Task.filter(id=task_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="TASK_NOT_FOUND")
    return Response(status_code=status.HTTP_200_OK)
