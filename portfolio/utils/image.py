from __future__ import annotations

import io
import os
import uuid
from typing import Tuple, Literal

from PIL import Image, ImageOps


ALLOWED_FORMATS = {"PNG", "JPEG", "WEBP"}  # normalize JPG->JPEG
MAX_PIXELS = 20_000_000  # ~20MP safety cap

FMT_TO_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}
FMT_TO_DEFAULT_EXT = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "WEBP": ".webp",
}

# name -> (max box, crop to exact box)
IMAGE_SIZES: dict[str, tuple[tuple[int, int] | None, bool]] = {
    "thumbnail": ((150, 150), True),
    "medium": ((300, 300), False),
    "large": ((1024, 1024), False),
    "full": (None, False),
}


def _detect(image_bytes: bytes) -> tuple[str, int, int] | None:
    try:
        with Image.open(io.BytesIO(image_bytes)) as im:
            im.verify()  # header check
        with Image.open(io.BytesIO(image_bytes)) as im2:
            fmt = (im2.format or "").upper()
            w, h = im2.size
        if fmt == "JPG":
            fmt = "JPEG"
        return fmt, w, h
    except Exception:
        return None


def validate_image(data: bytes, max_bytes: int = 5 * 1024 * 1024) -> Tuple[bool, str | None, dict]:
    """Validate image bytes. Returns (ok, error, info). info: format,width,height."""
    if not data:
        return False, "empty_file", {}
    if len(data) > max_bytes:
        return False, "file_too_large", {"max_bytes": max_bytes}

    detected = _detect(data)
    if not detected:
        return False, "invalid_image", {}
    fmt, width, height = detected

    if fmt not in ALLOWED_FORMATS:
        return False, "unsupported_format", {"format": fmt}

    if width * height > MAX_PIXELS:
        return False, "too_many_pixels", {"width": width, "height": height}

    return True, None, {"format": fmt, "width": width, "height": height}


def rewrite_image(
    data: bytes,
    target_format: Literal["PNG", "JPEG", "WEBP"] | None = None,
    max_size: tuple[int, int] | None = None,
    crop: bool = False,
) -> tuple[bytes, str, str]:
    """Re-encode the image to strip metadata, optionally shrinking it.
    With ``crop`` the image is cut to exactly ``max_size`` around its centre.
    Returns (bytes, format, mime).
    """
    detected = _detect(data)
    if not detected:
        raise ValueError("invalid_image")
    src_fmt, _, _ = detected

    fmt = target_format or src_fmt
    if fmt not in ALLOWED_FORMATS:
        fmt = "PNG"  # safest default

    with Image.open(io.BytesIO(data)) as im:
        im = ImageOps.exif_transpose(im)
        if max_size and crop:
            im = ImageOps.fit(im, max_size, Image.Resampling.LANCZOS)
        elif max_size and (im.width > max_size[0] or im.height > max_size[1]):
            im.thumbnail(max_size, Image.Resampling.LANCZOS)

        # Convert modes for target formats
        if fmt in {"JPEG", "WEBP"}:
            if im.mode in ("RGBA", "LA"):
                # flatten alpha to white background
                bg = Image.new("RGB", im.size, (255, 255, 255))
                bg.paste(im, mask=im.split()[-1])
                im = bg
            elif im.mode != "RGB":
                im = im.convert("RGB")
        elif fmt == "PNG":
            if im.mode not in ("RGBA", "RGB", "LA", "L"):
                im = im.convert("RGBA")

        out = io.BytesIO()
        save_kwargs: dict = {"optimize": True}
        if fmt == "JPEG":
            save_kwargs.update({"quality": 85})
        elif fmt == "WEBP":
            save_kwargs.update({"quality": 85, "method": 5})
        elif fmt == "PNG":
            save_kwargs.update({"compress_level": 6})

        im.save(out, format=fmt, **save_kwargs)
        rewritten = out.getvalue()

    mime = FMT_TO_MIME[fmt]
    return rewritten, fmt, mime


def save_image_variants(
    data: bytes,
    static_folder: str,
    subdir: str = "uploads/case-studies",
    max_bytes: int = 5 * 1024 * 1024,
) -> tuple[bool, str | None, dict, dict[str, str]]:
    """Validate image bytes and write one re-encoded file per entry in IMAGE_SIZES
    under <static_folder>/<subdir>.
    Returns (ok, error, info, paths) where paths maps size name to a path like
    'uploads/case-studies/<hex>-medium.jpg'. Never raises; returns structured errors.
    """
    ok, err, info = validate_image(data, max_bytes=max_bytes)
    if not ok:
        return False, err, info, {}

    # Normalize subdir like 'uploads/case-studies' (avoid leading/trailing slashes)
    subdir_norm = subdir.strip("/ ") or "uploads"
    base_dir = os.path.abspath(os.path.join(static_folder, *subdir_norm.split("/")))
    os.makedirs(base_dir, exist_ok=True)

    # Always assign a safe randomized name (we do not trust user-supplied names)
    stem = uuid.uuid4().hex
    paths: dict[str, str] = {}
    written: list[str] = []
    for name, (max_size, crop) in IMAGE_SIZES.items():
        try:
            rewritten, fmt, _ = rewrite_image(data, max_size=max_size, crop=crop)
        except Exception as e:
            _unlink_all(written)
            return False, "processing_error", {**info, "exception": type(e).__name__}, {}
        filename = f"{stem}-{name}{FMT_TO_DEFAULT_EXT[fmt]}"
        full_path = os.path.join(base_dir, filename)
        try:
            with open(full_path, "wb") as f:
                written.append(full_path)
                f.write(rewritten)
        except OSError as e:
            _unlink_all(written)
            return False, "write_failed", {"exception": type(e).__name__}, {}
        paths[name] = f"{subdir_norm}/{filename}"

    return True, None, info, paths


def _unlink_all(files: list[str]) -> None:
    # Partial variant sets are never kept
    for path in files:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
