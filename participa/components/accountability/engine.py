"""Public engine: browse results and comment on them."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from participa.api.auth import current_user, require_user
from participa.api.deps import get_db, component_dependency
from participa.db.models import User
from participa.services.comments import CommentService
from .permissions import Permissions, PermissionAction, PermissionDenied
from .schemas import ResultResponse, ResultDetailResponse, CommentCreateRequest, CommentResponse
from .service import ResultService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spaces/{space_slug}/f/{component_id}", tags=["accountability"])

load_component = component_dependency("accountability")


def ensure_allowed(user, action: str, component):
    """Evaluate a public permission, turning a denial into a 403."""
    try:
        Permissions(user, PermissionAction("public", action, "result"), {"component": component}).ensure()
    except PermissionDenied as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


def detail(result) -> dict:
    data = result.to_dict()
    data["children"] = [child.to_dict() for child in result.children]
    data["timeline_entries"] = [entry.to_dict() for entry in result.timeline_entries]
    return data


def get_result_or_404(results: ResultService, result_id: int):
    result = results.get(result_id)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Result #{result_id} not found"
        )
    return result


@router.get("/results", response_model=List[ResultResponse])
async def list_results(
    parent_id: Optional[int] = None,
    component=Depends(load_component),
    db=Depends(get_db),
    user: Optional[User] = Depends(current_user),
):
    """List top-level results, or the children of `parent_id`."""
    ensure_allowed(user, "read", component)
    return [r.to_dict() for r in ResultService(db, component).list(parent_id=parent_id)]


@router.get("/results/{result_id}", response_model=ResultDetailResponse)
async def show_result(
    result_id: int,
    component=Depends(load_component),
    db=Depends(get_db),
    user: Optional[User] = Depends(current_user),
):
    """Show a result with its status, children and timeline."""
    ensure_allowed(user, "read", component)
    return detail(get_result_or_404(ResultService(db, component), result_id))


@router.post("/results/{result_id}/comments", response_model=CommentResponse,
             status_code=status.HTTP_201_CREATED)
async def comment_result(
    result_id: int,
    request: CommentCreateRequest,
    component=Depends(load_component),
    db=Depends(get_db),
    user: User = Depends(require_user),
):
    """
    Comment on a result.

    Requires comments to be enabled and not blocked in the current step.
    """
    ensure_allowed(user, "comment", component)
    result = get_result_or_404(ResultService(db, component), result_id)

    max_length = component.global_settings.get("comments_max_length")
    if max_length and len(request.body) > max_length:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=f"Comment is longer than {max_length} characters"
        )

    author = db.get(User, user.id)
    locale = component.organization.default_locale
    comment = CommentService(db).add(result, author, {locale: request.body}, alignment=request.alignment)
    logger.info(f"User {author.id} commented on result #{result.id}")

    return {
        "id": comment.id,
        "author_id": author.id,
        "body": comment.body,
        "alignment": comment.alignment,
        "depth": comment.depth,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
    }
