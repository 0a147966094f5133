# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.schemas.task_schemas import TaskActionRequest, TaskCreateRequest, TaskUpdateRequest
from dayplanner.services import task_service
from dayplanner.utils.auth_utils import ensure_token_user_match, require_token

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("")
def list_tasks(
    userId: str,
    when: str = "today",
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], userId)
    if when not in ("today", "tomorrow"):
        raise HTTPException(status_code=400, detail="when must be 'today' or 'tomorrow'")

    tasks = task_service.list_tasks(db, userId, when, context.now())
    return {"tasks": [t.to_dict() for t in tasks]}


@router.get("/history")
def task_history(
    userId: str,
    limit: int = 50,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], userId)
    history = task_service.list_history(db, userId, max(1, min(limit, 200)))
    return {"history": [t.to_dict() for t in history]}


@router.post("", status_code=201)
def create_task(
    payload: TaskCreateRequest,
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    task = task_service.create_task(db, payload.userId, payload.model_dump(exclude={"userId"}), context.now())
    return task.to_dict()


@router.patch("/{task_id}")
def update_task(
    task_id: str,
    payload: TaskUpdateRequest,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    return task_service.update_task(db, payload.userId, task_id, payload.changes()).to_dict()


@router.post("/{task_id}/toggle-priority")
def toggle_priority(
    task_id: str,
    payload: TaskActionRequest,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    return task_service.toggle_priority(db, payload.userId, task_id).to_dict()


@router.post("/{task_id}/toggle-complete")
def toggle_complete(
    task_id: str,
    payload: TaskActionRequest,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    return task_service.toggle_complete(db, payload.userId, task_id).to_dict()


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    userId: str,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], userId)
    task_service.delete_task(db, userId, task_id)
    return {"status": "deleted", "id": task_id}
