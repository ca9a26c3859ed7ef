"""Service layer helpers shared by the controllers."""

from .storage import StorageError, StoredUpload, delete_upload, save_upload

__all__ = [
    "StorageError",
    "StoredUpload",
    "delete_upload",
    "save_upload",
]
