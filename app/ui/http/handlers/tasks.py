from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.domain.tasks.models import TaskFilter, TaskSort
from app.domain.tasks.service import TaskManager
from app.ui.http.middlewares.auth import current_user_id
from app.ui.http.middlewares.di import get_task_manager
from app.ui.http.presenters import task_to_dict
from app.ui.http.responses import ok
from app.ui.http.schemas import TaskCreateBody, TaskUpdateBody

router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(current_user_id)])


@router.get("")
async def list_tasks(
    status: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    order: str = Query(default="desc"),
    user_id: str = Depends(current_user_id),
    tasks: TaskManager = Depends(get_task_manager),
) -> JSONResponse:
    items = await tasks.list(
        user_id,
        TaskFilter(status=status, priority=priority, search=search),
        TaskSort(key=sort_by, direction=order),
    )
    return ok(
        "Tasks retrieved successfully",
        {"tasks": [task_to_dict(t) for t in items], "count": len(items)},
    )


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    user_id: str = Depends(current_user_id),
    tasks: TaskManager = Depends(get_task_manager),
) -> JSONResponse:
    task = await tasks.get(user_id, task_id)
    return ok("Task retrieved successfully", {"task": task_to_dict(task)})


@router.post("")
async def create_task(
    body: TaskCreateBody,
    user_id: str = Depends(current_user_id),
    tasks: TaskManager = Depends(get_task_manager),
) -> JSONResponse:
    task = await tasks.create(user_id, body.to_input())
    return ok("Task created successfully", {"task": task_to_dict(task)}, status_code=201)


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdateBody,
    user_id: str = Depends(current_user_id),
    tasks: TaskManager = Depends(get_task_manager),
) -> JSONResponse:
    task = await tasks.update(user_id, task_id, body.to_patch())
    return ok("Task updated successfully", {"task": task_to_dict(task)})


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user_id: str = Depends(current_user_id),
    tasks: TaskManager = Depends(get_task_manager),
) -> JSONResponse:
    await tasks.delete(user_id, task_id)
    return ok("Task deleted successfully")
