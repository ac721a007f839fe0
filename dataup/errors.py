# dataup/errors.py


class DataUpError(Exception):
    pass


class VideoNotFound(DataUpError):
    def __init__(self, video_id: int, what: str = "video"):
        self.video_id = video_id
        super().__init__(f"{what} {video_id} not found")


class VideoUnreadable(DataUpError):
    """Raised when the bytes of a video cannot be read or stored."""

    def __init__(self, video_id: int, reason: str = ""):
        self.video_id = video_id
        msg = f"cannot read video {video_id}"
        super().__init__(f"{msg}: {reason}" if reason else msg)
