# dataup/uploader.py
from __future__ import annotations
import mimetypes, sys
from pathlib import Path
from typing import List

import httpx  # sync client

from .models import Video, VideoStatus

VIDEO_PATTERNS = ("*.mp4", "*.mpg", "*.mpeg")


class VideoClient:
    """Thin httpx wrapper around the /video endpoints."""

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None, timeout: float = 60.0):
        if client is None:
            if not base_url:
                raise ValueError("base_url or client is required")
            client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)
        self.http = client

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def list_videos(self) -> list[Video]:
        r = self.http.get("/video")
        r.raise_for_status()
        return [Video.model_validate(v) for v in r.json()]

    def add_video(self, video: Video) -> Video:
        r = self.http.post("/video", json=video.model_dump(by_alias=True))
        r.raise_for_status()
        return Video.model_validate(r.json())

    def set_video_data(self, video_id: int, data, filename: str = "data", content_type: str = "application/octet-stream") -> VideoStatus:
        r = self.http.post(
            f"/video/{video_id}/data",
            files={"data": (filename, data, content_type)},
        )
        r.raise_for_status()
        if r.status_code == 204:
            raise httpx.HTTPStatusError(f"video {video_id}: server could not read upload", request=r.request, response=r)
        return VideoStatus.model_validate(r.json())

    def get_video_data(self, video_id: int) -> bytes:
        r = self.http.get(f"/video/{video_id}/data")
        r.raise_for_status()
        if r.status_code == 204:
            raise httpx.HTTPStatusError(f"video {video_id}: server could not read data", request=r.request, response=r)
        return r.content


def find_videos(videos_dir: Path) -> List[Path]:
    files: set[Path] = set()
    for pattern in VIDEO_PATTERNS:
        files.update(videos_dir.glob(pattern))
    return sorted(files)


def upload_one(client: VideoClient, path: Path) -> tuple[bool, str]:
    ct, _ = mimetypes.guess_type(path.name)
    ct = ct or "application/octet-stream"
    try:
        video = client.add_video(Video(title=path.stem, content_type=ct))
        with path.open("rb") as f:
            status = client.set_video_data(video.id, f, filename=path.name, content_type=ct)
        return True, f"id={video.id} {status.state.value} {video.data_url}"
    except httpx.HTTPStatusError as e:
        return False, f"HTTP {e.response.status_code} {e.response.text[:120]}"
    except (httpx.HTTPError, OSError) as e:
        return False, f"EXC {type(e).__name__}: {e}"


def main(argv: list[str] | None = None, client: VideoClient | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("usage: dataup-upload <server-url> [videos-dir]", file=sys.stderr)
        return 2
    server = args[0]
    videos_dir = Path(args[1]) if len(args) > 1 else Path("videos")

    if not videos_dir.is_dir():
        print(f"[upload] ERROR: missing videos dir: {videos_dir}", file=sys.stderr)
        return 2
    files = find_videos(videos_dir)
    if not files:
        print(f"[upload] ERROR: no video files found in {videos_dir}", file=sys.stderr)
        return 2

    print(f"[upload] Server        : {server}")
    print(f"[upload] Videos dir    : {videos_dir}")
    print(f"[upload] Files to send : {', '.join(p.name for p in files)}")
    print("--------------------------------------------------")

    ok = 0
    fail = 0
    owned = client is None
    client = client or VideoClient(server)
    try:
        for p in files:
            success, msg = upload_one(client, p)
            status = "SUCCESS" if success else "FAIL"
            print(f"[upload] {status}: {p.name}  [{msg}]")
            ok += 1 if success else 0
            fail += 0 if success else 1
    finally:
        if owned:
            client.close()

    print("\n[upload] Upload summary")
    print("--------------------------------------------------")
    print(f"  Success: {ok}")
    print(f"  Failed : {fail}")

    return 2 if fail else 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
