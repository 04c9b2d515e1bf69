"""Pydantic models for the Accountability engines."""

from datetime import date
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


# Request models
class ResultCreateRequest(BaseModel):
    """Request to create a result."""
    title: Dict[str, str] = Field(..., description="Title by locale")
    description: Optional[Dict[str, str]] = Field(None, description="Description by locale")
    parent_id: Optional[int] = Field(None, description="Parent result (results nest one level)")
    status_id: Optional[int] = Field(None, description="Status of this component")
    scope_id: Optional[int] = Field(None, description="Scope of the organization")
    category_id: Optional[int] = Field(None, description="Category of the space")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: Optional[float] = Field(None, ge=0, le=100, description="Defaults to the status progress")
    weight: int = Field(0, description="Ordering weight")
    external_id: Optional[str] = None


class ResultUpdateRequest(BaseModel):
    """Request to update a result. Only fields sent are changed."""
    title: Optional[Dict[str, str]] = None
    description: Optional[Dict[str, str]] = None
    parent_id: Optional[int] = None
    status_id: Optional[int] = None
    scope_id: Optional[int] = None
    category_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: Optional[float] = Field(None, ge=0, le=100)
    weight: Optional[int] = None
    external_id: Optional[str] = None


class StatusCreateRequest(BaseModel):
    """Request to create a status."""
    key: str = Field(..., min_length=1, max_length=100)
    name: Dict[str, str]
    description: Optional[Dict[str, str]] = None
    progress: Optional[int] = Field(None, ge=0, le=100)


class TimelineEntryCreateRequest(BaseModel):
    """Request to add a timeline entry to a result."""
    entry_date: date
    title: Dict[str, str]
    description: Optional[Dict[str, str]] = None


class CommentCreateRequest(BaseModel):
    """Request to comment on a result."""
    body: str = Field(..., min_length=1)
    alignment: int = Field(0, ge=-1, le=1, description="-1 against, 0 neutral, 1 in favor")


# Response models
class StatusResponse(BaseModel):
    id: int
    key: str
    name: Dict[str, str]
    description: Optional[Dict[str, str]] = None
    progress: Optional[int] = None


class TimelineEntryResponse(BaseModel):
    id: int
    result_id: int
    entry_date: str
    title: Dict[str, str]
    description: Optional[Dict[str, str]] = None


class ResultResponse(BaseModel):
    """Result information."""
    id: int
    component_id: int
    parent_id: Optional[int]
    scope_id: Optional[int]
    category_id: Optional[int]
    status: Optional[StatusResponse]
    title: Dict[str, str]
    description: Optional[Dict[str, str]]
    start_date: Optional[str]
    end_date: Optional[str]
    progress: Optional[float]
    weight: int
    external_id: Optional[str]
    reference: Optional[str]
    children_count: int
    created_at: Optional[str]
    updated_at: Optional[str]


class ResultDetailResponse(ResultResponse):
    """Result with its children and timeline."""
    children: List[ResultResponse] = []
    timeline_entries: List[TimelineEntryResponse] = []


class CommentResponse(BaseModel):
    id: int
    author_id: int
    body: Dict[str, str]
    alignment: int
    depth: int
    created_at: Optional[str]
