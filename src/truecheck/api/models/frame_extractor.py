"""
Video frame extraction.

Hosted classifiers only accept still images, so videos are sampled into a
handful of evenly spaced JPEG frames before classification.
"""

import io
import logging
import os
import tempfile

from truecheck import config

logger = logging.getLogger(__name__)


def _to_jpeg(image, quality: int = config.FRAME_JPEG_QUALITY) -> bytes:
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def extract_frames(data: bytes, max_frames: int = config.VIDEO_MAX_FRAMES) -> list[bytes]:
    """
    Extract up to ``max_frames`` evenly spaced frames from video bytes.

    Falls back to treating the bytes as a still image. Returns a list of
    JPEG-encoded frames; empty if nothing could be decoded.
    """
    from PIL import Image

    # Some "videos" are really animated or mislabelled images.
    try:
        with Image.open(io.BytesIO(data)) as img:
            return [_to_jpeg(img)]
    except Exception:
        pass

    import cv2

    with tempfile.NamedTemporaryFile(suffix=".mp4", delete=False) as tmp:
        tmp.write(data)
        tmp_path = tmp.name

    frames: list[bytes] = []
    cap = cv2.VideoCapture(tmp_path)
    try:
        total_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        if total_frames <= 0:
            logger.debug("Video has no readable frames")
            return []

        count = min(max_frames, total_frames)
        indices = [int(i * total_frames / count) for i in range(count)]
        for idx in indices:
            cap.set(cv2.CAP_PROP_POS_FRAMES, idx)
            ret, frame = cap.read()
            if not ret:
                continue
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            frames.append(_to_jpeg(Image.fromarray(rgb)))
    finally:
        cap.release()
        os.unlink(tmp_path)

    logger.debug("Extracted %d frame(s) from video", len(frames))
    return frames
