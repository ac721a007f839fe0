# dataup/blobstore.py
from __future__ import annotations
import logging
import threading
from pathlib import Path
from typing import BinaryIO, Protocol

from .errors import VideoNotFound, VideoUnreadable

logger = logging.getLogger("dataup.blobstore")

CHUNK_SIZE = 1024 * 1024


class BlobStore(Protocol):
    def save(self, video_id: int, stream: BinaryIO) -> None: ...

    def copy_out(self, video_id: int, sink: BinaryIO) -> None: ...

    def exists(self, video_id: int) -> bool: ...


def _copy(src: BinaryIO, dst: BinaryIO, chunk: int = CHUNK_SIZE) -> int:
    total = 0
    while True:
        data = src.read(chunk)
        if not data:
            return total
        dst.write(data)
        total += len(data)


class FileBlobStore:
    """
    One file per video id under ``directory`` (video<id>.mpg).
    A save that fails part way removes what it wrote, so a later copy_out
    sees "no data" instead of a truncated payload.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def path_for(self, video_id: int) -> Path:
        return self.directory / f"video{video_id}.mpg"

    def exists(self, video_id: int) -> bool:
        return self.path_for(video_id).is_file()

    def save(self, video_id: int, stream: BinaryIO) -> None:
        target = self.path_for(video_id)
        with self._lock:
            try:
                with target.open("wb") as out:
                    size = _copy(stream, out)
            except OSError as e:
                target.unlink(missing_ok=True)
                raise VideoUnreadable(video_id, str(e)) from e
        logger.info("stored %d bytes for video %d at %s", size, video_id, target)

    def copy_out(self, video_id: int, sink: BinaryIO) -> None:
        path = self.path_for(video_id)
        if not path.is_file():
            raise VideoNotFound(video_id, "data for video")
        try:
            with path.open("rb") as f:
                _copy(f, sink)
        except FileNotFoundError as e:
            raise VideoNotFound(video_id, "data for video") from e
        except OSError as e:
            raise VideoUnreadable(video_id, str(e)) from e

    def purge(self) -> int:
        removed = 0
        with self._lock:
            for p in self.directory.glob("video*.mpg"):
                p.unlink(missing_ok=True)
                removed += 1
        if removed:
            logger.info("purged %d stale payloads from %s", removed, self.directory)
        return removed


class MemoryBlobStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._blobs: dict[int, bytes] = {}

    def exists(self, video_id: int) -> bool:
        with self._lock:
            return video_id in self._blobs

    def save(self, video_id: int, stream: BinaryIO) -> None:
        try:
            data = stream.read()
        except OSError as e:
            raise VideoUnreadable(video_id, str(e)) from e
        with self._lock:
            self._blobs[video_id] = bytes(data)

    def copy_out(self, video_id: int, sink: BinaryIO) -> None:
        with self._lock:
            data = self._blobs.get(video_id)
        if data is None:
            raise VideoNotFound(video_id, "data for video")
        sink.write(data)
