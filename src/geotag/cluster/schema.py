from typing import List, Optional

from pydantic import BaseModel, Field


class OrganizeRequest(BaseModel):
    photo_dir: str = Field(description="Directory scanned recursively for photos")
    timeline_path: Optional[str] = Field(None, description="Location-history JSON export")
    webhook_url: Optional[str] = Field(None, description="Web hook URL")
    request_id: str = Field(..., description="Request ID")


class ClusterNode(BaseModel):
    id: int
    label: str
    photos: List[str]
    count: int
    is_noise: bool = False


class OrganizeResponse(BaseModel):
    places: List[ClusterNode]
    events: List[ClusterNode]
    total_photos: int
    located_photos: int
    named_photos: int


class OrganizeTaskResponse(BaseModel):
    task_id: str
    status: str = "processing"
    message: str = "Organize task accepted."
    request_id: Optional[str] = None
