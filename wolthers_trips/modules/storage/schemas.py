from pydantic import BaseModel
from typing import Dict, List, Optional


class StorageStatusResponse(BaseModel):
    connected: bool
    buckets: List[str]
    missing: List[str]
    required: List[str]
    error: Optional[str] = None


class EnsureBucketsRequest(BaseModel):
    buckets: Optional[List[str]] = None


class EnsureBucketsResponse(BaseModel):
    buckets: Dict[str, str]


class UploadResponse(BaseModel):
    bucket: str
    path: str


class SignedUrlResponse(BaseModel):
    url: str
    expires_in: int
