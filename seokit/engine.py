from __future__ import annotations

import io
import os
import tempfile
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps


def encode_webp(
    data: bytes,
    quality: int = 80,
    max_width: Optional[int] = None,
    method: int = 4,
) -> bytes:
    """
    Re-encode raster image bytes as WebP.

    If max_width is set and the image is wider, it is scaled down keeping the
    aspect ratio. Narrower images are never enlarged. Animated GIFs keep
    their frames. Raises if Pillow cannot decode *data*.
    """
    if not 1 <= int(quality) <= 100:
        raise ValueError(f"quality must be between 1 and 100, got {quality}")

    with Image.open(io.BytesIO(data)) as im:
        im.load()

        if getattr(im, "is_animated", False):
            return _encode_animated(im, quality, max_width, method)

        # Respect camera orientation; the EXIF block is not carried over.
        im = ImageOps.exif_transpose(im)
        im = _apply_resize(im, max_width)
        im = _to_webp_mode(im)

        buf = io.BytesIO()
        im.save(buf, format="WEBP", quality=int(quality), method=int(method))
        return buf.getvalue()


def _encode_animated(im: Image.Image, quality: int, max_width: Optional[int], method: int) -> bytes:
    frames = []
    durations = []
    for i in range(im.n_frames):
        im.seek(i)
        frame = _apply_resize(im.convert("RGBA"), max_width)
        frames.append(frame)
        durations.append(im.info.get("duration", 100))

    buf = io.BytesIO()
    frames[0].save(
        buf,
        format="WEBP",
        save_all=True,
        append_images=frames[1:],
        duration=durations,
        loop=im.info.get("loop", 0),
        quality=int(quality),
        method=int(method),
    )
    return buf.getvalue()


def write_atomic(data: bytes, out_path: Path) -> None:
    """
    Write *data* to a temp file next to out_path, then rename it into place.

    On failure the temp file is removed, so no partial output is left behind.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=".seokit_", suffix=".tmp", dir=str(out_path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        tmp_path.replace(out_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _to_webp_mode(im: Image.Image) -> Image.Image:
    if im.mode in ("RGB", "RGBA"):
        return im
    return im.convert("RGBA" if _has_alpha(im) else "RGB")


def _has_alpha(im: Image.Image) -> bool:
    if im.mode in ("RGBA", "LA", "PA"):
        return True
    if im.mode == "P" and "transparency" in im.info:
        return True
    return False


def _apply_resize(im: Image.Image, max_width: Optional[int]) -> Image.Image:
    """Fit within max_width, keeping aspect. Never upscales."""
    if max_width is None:
        return im

    w, h = im.size
    if w <= max_width:
        return im

    scale = max_width / w
    new_w = max(1, int(max_width))
    new_h = max(1, int(h * scale))

    return im.resize((new_w, new_h), Image.Resampling.LANCZOS)
