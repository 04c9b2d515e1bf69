"""Admin engine: manage results, statuses and timeline entries."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from participa.api.auth import require_user
from participa.api.deps import get_db, component_dependency
from participa.db.models import User
from .permissions import Permissions, PermissionAction, PermissionDenied
from .schemas import (
    ResultCreateRequest, ResultUpdateRequest, ResultResponse, ResultDetailResponse,
    StatusCreateRequest, StatusResponse,
    TimelineEntryCreateRequest, TimelineEntryResponse,
)
from .service import ResultService
from .engine import detail

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/spaces/{space_slug}/components/{component_id}/manage",
    tags=["accountability-admin"],
)

load_component = component_dependency("accountability", published_only=False)


def ensure_admin(user, action: str, subject: str, component, **context):
    """Evaluate an admin permission, turning a denial into a 403."""
    context["component"] = component
    try:
        Permissions(user, PermissionAction("admin", action, subject), context).ensure()
    except PermissionDenied as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


def run(fn, *args, **kwargs):
    """Call a service method, mapping domain errors to HTTP errors."""
    try:
        return fn(*args, **kwargs)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e))


def service_for(db, component, user: User) -> ResultService:
    return ResultService(db, component, user=db.get(User, user.id))


def get_result_or_404(results: ResultService, result_id: int):
    result = results.get(result_id)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Result #{result_id} not found"
        )
    return result


# Results

@router.get("/results", response_model=List[ResultResponse])
async def admin_list_results(
    parent_id: Optional[int] = None,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "read", "result", component)
    return [r.to_dict() for r in service_for(db, component, user).list(parent_id=parent_id)]


@router.post("/results", response_model=ResultDetailResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_result(
    request: ResultCreateRequest,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    """
    Create a result.

    When no progress is given, the status progress is used. The parent's
    progress is recalculated from its children.
    """
    ensure_admin(user, "create", "result", component)
    result = run(service_for(db, component, user).create, **request.model_dump())
    return detail(result)


@router.put("/results/{result_id}", response_model=ResultDetailResponse)
async def admin_update_result(
    result_id: int,
    request: ResultUpdateRequest,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "update", "result", component)
    results = service_for(db, component, user)
    result = get_result_or_404(results, result_id)
    run(results.update, result, **request.model_dump(exclude_unset=True))
    return detail(result)


@router.delete("/results/{result_id}")
async def admin_delete_result(
    result_id: int,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "destroy", "result", component)
    results = service_for(db, component, user)
    result = get_result_or_404(results, result_id)
    run(results.delete, result)
    return {"success": True, "result_id": result_id}


# Statuses

@router.get("/statuses", response_model=List[StatusResponse])
async def admin_list_statuses(
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "read", "status", component)
    return [s.to_dict() for s in service_for(db, component, user).list_statuses()]


@router.post("/statuses", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_status(
    request: StatusCreateRequest,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "create", "status", component)
    new_status = run(service_for(db, component, user).create_status, **request.model_dump())
    return new_status.to_dict()


@router.delete("/statuses/{status_id}")
async def admin_delete_status(
    status_id: int,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    results = service_for(db, component, user)
    existing = results.get_status(status_id)
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Status #{status_id} not found"
        )
    ensure_admin(user, "destroy", "status", component, status=existing)
    run(results.delete_status, existing)
    return {"success": True, "status_id": status_id}


# Timeline entries

@router.get("/results/{result_id}/timeline_entries", response_model=List[TimelineEntryResponse])
async def admin_list_timeline_entries(
    result_id: int,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "read", "timeline_entry", component)
    result = get_result_or_404(service_for(db, component, user), result_id)
    return [entry.to_dict() for entry in result.timeline_entries]


@router.post("/results/{result_id}/timeline_entries", response_model=TimelineEntryResponse,
             status_code=status.HTTP_201_CREATED)
async def admin_create_timeline_entry(
    result_id: int,
    request: TimelineEntryCreateRequest,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    ensure_admin(user, "create", "timeline_entry", component)
    results = service_for(db, component, user)
    result = get_result_or_404(results, result_id)
    entry = run(results.add_timeline_entry, result, **request.model_dump())
    return entry.to_dict()
