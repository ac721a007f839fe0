# dataup/registry.py
import logging
import threading

from .errors import VideoNotFound
from .models import Video

logger = logging.getLogger("dataup.registry")

DATA_PATH = "/video/{id}/data"


def data_url_for(base_url: str, video_id: int) -> str:
    return base_url.rstrip("/") + DATA_PATH.format(id=video_id)


class VideoRegistry:
    """
    In-memory id -> Video mapping.
    Ids come from a counter that starts at 1 and is never reused; the lock
    covers both the counter and the mapping.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last_id = 0
        self._videos: dict[int, Video] = {}

    def list(self) -> list[Video]:
        with self._lock:
            return list(self._videos.values())

    def create(self, candidate: Video, base_url: str) -> Video:
        with self._lock:
            video = candidate.model_copy()
            if video.id < 0:
                raise ValueError(f"video id must not be negative, got {video.id}")
            if video.id == 0 or video.id in self._videos:
                # a taken id is never overwritten; the candidate gets a fresh one
                self._last_id += 1
                while self._last_id in self._videos:
                    self._last_id += 1
                video.id = self._last_id
            video.data_url = data_url_for(base_url, video.id)
            self._videos[video.id] = video
        logger.info("registered video %d (%s)", video.id, video.title)
        return video

    def get(self, video_id: int) -> Video:
        with self._lock:
            video = self._videos.get(video_id)
        if video is None:
            raise VideoNotFound(video_id)
        return video

    def __contains__(self, video_id: int) -> bool:
        with self._lock:
            return video_id in self._videos

    def __len__(self) -> int:
        with self._lock:
            return len(self._videos)
