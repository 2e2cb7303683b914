"""Response envelopes shared by every resource."""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PaginatedResponse(BaseModel):
    """Pagination contract; subclasses add the resource-named item list."""
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
