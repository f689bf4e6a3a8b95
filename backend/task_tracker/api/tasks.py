# backend/task_tracker/api/tasks.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import repository
from ..database import get_db
from ..models import Account, Task
from ..schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate
from ..security import get_current_account
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_owned_task(db: Session, task_id: str, account: Account) -> Task:
    """Load a task and check its parent project belongs to the caller"""
    task = repository.find_task_by_id(db, task_id)
    if not task:
        api_logger.warning("Task not found", extra={"task_id": task_id})
        raise HTTPException(status_code=404, detail="Task not found")

    if not repository.find_project_by_id(db, task.project_id, account.id):
        api_logger.warning("Task access denied", extra={
            "task_id": task_id,
            "account_id": account.id
        })
        raise HTTPException(status_code=403, detail="Forbidden")
    return task


@router.get("", response_model=List[TaskSchema])
async def list_tasks(
    project_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    """List the caller's tasks, optionally for one project"""
    try:
        tasks = repository.list_tasks_for_owner(db, current_account.id, project_id=project_id)
    except SQLAlchemyError as e:
        api_logger.error("Failed to fetch tasks", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")

    api_logger.info(f"Found {len(tasks)} tasks", extra={"project_id": project_id})
    return tasks


@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    api_logger.info("Creating task", extra={"project_id": task.project_id, "task_name": task.name})

    project = repository.find_project_by_id(db, task.project_id, current_account.id)
    if not project:
        api_logger.warning("Project not found for task", extra={"project_id": task.project_id})
        raise HTTPException(status_code=404, detail="Project not found or unauthorized")

    try:
        db_task = repository.insert_task(db, project.id, task.name, task.status)
    except SQLAlchemyError as e:
        db.rollback()
        api_logger.error("Failed to create task", extra={"project_id": project.id, "error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to create task")

    api_logger.info("Task created successfully", extra={"task_id": db_task.id})
    return db_task


@router.patch("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    api_logger.info("Updating task", extra={"task_id": task_id})
    task = get_owned_task(db, task_id, current_account)

    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        task = repository.update_task(db, task, **fields)
    except SQLAlchemyError as e:
        db.rollback()
        api_logger.error("Failed to update task", extra={"task_id": task_id, "error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to update task")

    api_logger.info("Task updated successfully", extra={"task_id": task_id, "fields": list(fields)})
    return task


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    api_logger.info("Deleting task", extra={"task_id": task_id})
    task = get_owned_task(db, task_id, current_account)

    try:
        repository.delete_task(db, task)
    except SQLAlchemyError as e:
        db.rollback()
        api_logger.error("Failed to delete task", extra={"task_id": task_id, "error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to delete task")

    api_logger.info(f"Successfully deleted task {task_id}")
    return {"success": True}
