# dataup/__init__.py
from .models import Video, VideoState, VideoStatus
from .registry import VideoRegistry
from .blobstore import BlobStore, FileBlobStore, MemoryBlobStore
from .errors import DataUpError, VideoNotFound, VideoUnreadable

__all__ = [
    "Video", "VideoState", "VideoStatus",
    "VideoRegistry",
    "BlobStore", "FileBlobStore", "MemoryBlobStore",
    "DataUpError", "VideoNotFound", "VideoUnreadable",
]
