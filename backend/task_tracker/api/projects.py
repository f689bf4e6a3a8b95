# backend/task_tracker/api/projects.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .. import repository
from ..database import get_db
from ..models import Account
from ..schemas.project import ProjectCreate, Project as ProjectSchema, ProjectDetail
from ..schemas.task import Task as TaskSchema
from ..security import get_current_account
from ..services.mailer import get_mail_transport
from ..services.notifications import evaluate_and_notify
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/projects", tags=["projects"])

@router.get("", response_model=List[ProjectSchema])
async def list_projects(
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    """List the caller's projects, newest first"""
    api_logger.info("Starting projects list operation", extra={
        "endpoint": "/api/projects",
        "method": "GET",
        "account_id": current_account.id
    })

    try:
        projects = repository.list_projects_for_owner(db, current_account.id)
    except SQLAlchemyError as e:
        api_logger.error("Failed to list projects", extra={"error": str(e)})
        raise HTTPException(status_code=500, detail="Failed to fetch projects")

    api_logger.info(f"Found {len(projects)} projects")
    return projects

@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account)
):
    api_logger.info("Fetching project", extra={"project_id": project_id})

    project = repository.find_project_by_id(db, project_id, current_account.id)
    if not project:
        api_logger.warning("Project not found", extra={"project_id": project_id})
        raise HTTPException(status_code=404, detail="Project not found")

    tasks = repository.find_tasks_for_project(db, project.id)
    return ProjectDetail(
        **ProjectSchema.model_validate(project).model_dump(),
        tasks=[TaskSchema.model_validate(task) for task in tasks]
    )

@router.post("", response_model=ProjectSchema, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
    transport=Depends(get_mail_transport)
):
    api_logger.info("Creating new project", extra={"project_title": project.title})

    try:
        db_project = repository.insert_project(
            db,
            owner_id=current_account.id,
            title=project.title,
            client_name=project.client_name,
            deadline=project.deadline
        )
    except SQLAlchemyError as e:
        api_logger.error("Failed to create project", extra={
            "project_title": project.title,
            "error": str(e)
        })
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to create project")

    api_logger.info("Project created successfully", extra={"project_id": db_project.id})

    # A reminder problem must not undo the create
    try:
        outcome = await evaluate_and_notify(db, db_project, transport, recipient=current_account.email)
        api_logger.info("Creation-time notification check", extra={
            "project_id": db_project.id,
            "status": outcome.status.value,
            "error": outcome.error
        })
    except Exception as e:
        db.rollback()
        api_logger.error("Creation-time notification check failed", extra={
            "project_id": db_project.id,
            "error": str(e)
        }, exc_info=True)

    db.refresh(db_project)
    return db_project
