"""Services for the Participa platform."""

from .comments import CommentService, CommentSerializer
from .components import ComponentService
from .exports import ExportService

__all__ = ["CommentService", "CommentSerializer", "ComponentService", "ExportService"]
