"""
Storage module for S3-compatible object storage (Cloudflare R2).

Files go directly from the browser to R2 through presigned URLs.
The backend never receives file bytes.
"""
from app.storage.gateway import ObjectStorageGateway, PresignedUpload, build_storage_key

__all__ = ["ObjectStorageGateway", "PresignedUpload", "build_storage_key"]
