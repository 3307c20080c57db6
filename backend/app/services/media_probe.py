from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from urllib.parse import urlparse
import base64
import binascii
import logging
import mimetypes

from PIL import Image, UnidentifiedImageError

from ..models.instagram import MediaAsset, MediaKind
from .instagram_errors import MediaInputError

logger = logging.getLogger("uvicorn.error")

_DEFAULT_MIME = {
    MediaKind.IMAGE: ("image/jpeg", "jpg"),
    MediaKind.VIDEO: ("video/mp4", "mp4"),
}

# ISO base media brands (bytes 8..12 of an ``ftyp`` box)
_FTYP_BRANDS = {
    b"qt  ": ("video/quicktime", "mov"),
    b"M4V ": ("video/x-m4v", "m4v"),
    b"M4VH": ("video/x-m4v", "m4v"),
    b"M4A ": ("audio/mp4", "m4a"),
    b"heic": ("image/heic", "heic"),
    b"heix": ("image/heic", "heic"),
    b"mif1": ("image/heif", "heif"),
    b"msf1": ("image/heif", "heif"),
    b"avif": ("image/avif", "avif"),
}


@dataclass(frozen=True)
class MediaProbe:
    mime_type: str
    file_extension: str


def decode_data_uri(data_uri: str) -> tuple[str | None, bytes]:
    """Split a ``data:`` URI into its declared MIME type and decoded bytes."""
    if not data_uri.startswith("data:"):
        raise MediaInputError("Media is not a data URI.")
    header, sep, payload = data_uri.partition(",")
    if not sep:
        raise MediaInputError("Invalid data URI: missing ',' separator.")

    params = header[len("data:"):].split(";")
    if "base64" not in (p.strip().lower() for p in params[1:]):
        raise MediaInputError("Invalid data URI: payload must be base64 encoded.")
    declared = params[0].strip().lower() or None

    compact = "".join(payload.split())
    try:
        data = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MediaInputError("Invalid data URI: payload is not valid base64.") from exc
    if not data:
        raise MediaInputError("Invalid data URI: payload is empty.")
    return declared, data


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


class MediaProbeService:
    """Detects binary content types and turns caller media into MediaAssets."""

    @classmethod
    def probe(cls, data: bytes) -> MediaProbe | None:
        """Best-effort content sniffing; ``None`` when the type is unknown."""
        head = data[:64]
        if head.startswith(b"\xff\xd8\xff"):
            return MediaProbe("image/jpeg", "jpg")
        if head.startswith(b"\x89PNG\r\n\x1a\n"):
            return MediaProbe("image/png", "png")
        if head.startswith((b"GIF87a", b"GIF89a")):
            return MediaProbe("image/gif", "gif")
        if head.startswith(b"RIFF") and head[8:12] == b"WEBP":
            return MediaProbe("image/webp", "webp")
        if head.startswith(b"RIFF") and head[8:12] == b"AVI ":
            return MediaProbe("video/x-msvideo", "avi")
        if head.startswith((b"II*\x00", b"MM\x00*")):
            return MediaProbe("image/tiff", "tif")
        if head[4:8] == b"ftyp":
            mime_type, ext = _FTYP_BRANDS.get(head[8:12], ("video/mp4", "mp4"))
            return MediaProbe(mime_type, ext)
        if head.startswith(b"\x1a\x45\xdf\xa3"):
            if b"webm" in head:
                return MediaProbe("video/webm", "webm")
            return MediaProbe("video/x-matroska", "mkv")
        if head.startswith(b"BM") and len(data) > 26:
            return MediaProbe("image/bmp", "bmp")
        return cls._probe_with_pillow(data)

    @classmethod
    def _probe_with_pillow(cls, data: bytes) -> MediaProbe | None:
        try:
            with Image.open(BytesIO(data)) as image:
                image_format = image.format
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
            # Header claims dimensions past Pillow's bomb limit; let the kind default apply
            return None
        mime_type = Image.MIME.get(image_format or "")
        if not mime_type:
            return None
        ext = (mimetypes.guess_extension(mime_type) or f".{image_format.lower()}").lstrip(".")
        return MediaProbe(mime_type, ext)

    @classmethod
    def _matches_kind(cls, mime_type: str | None, kind: MediaKind) -> bool:
        return bool(mime_type) and mime_type.startswith(f"{kind.value}/")

    @classmethod
    def from_data_uri(cls, data_uri: str, kind: MediaKind) -> MediaAsset:
        declared, data = decode_data_uri(data_uri)
        probed = cls.probe(data)
        if probed is not None and cls._matches_kind(probed.mime_type, kind):
            return MediaAsset(
                kind=kind,
                mime_type=probed.mime_type,
                file_extension=probed.file_extension,
                data=data,
            )

        if probed is not None:
            logger.warning(
                "Probed media type %s does not match requested kind %s; using fallback",
                probed.mime_type,
                kind.value,
            )
        if declared and cls._matches_kind(declared, kind):
            ext = (mimetypes.guess_extension(declared) or "").lstrip(".")
            mime_type = declared
        else:
            mime_type, ext = _DEFAULT_MIME[kind]
        return MediaAsset(
            kind=kind,
            mime_type=mime_type,
            file_extension=ext or _DEFAULT_MIME[kind][1],
            data=data,
        )

    @classmethod
    def from_url(cls, url: str, kind: MediaKind) -> MediaAsset:
        guessed, _ = mimetypes.guess_type(urlparse(url).path)
        if cls._matches_kind(guessed, kind):
            mime_type = guessed
            ext = (mimetypes.guess_extension(guessed) or "").lstrip(".") or _DEFAULT_MIME[kind][1]
        else:
            mime_type, ext = _DEFAULT_MIME[kind]
        return MediaAsset(kind=kind, mime_type=mime_type, file_extension=ext, remote_url=url)

    @classmethod
    def resolve(cls, source: str, kind: MediaKind | str) -> MediaAsset:
        """Build a MediaAsset from a data URI or a remote http(s) URL."""
        try:
            kind = MediaKind(kind)
        except ValueError as exc:
            raise MediaInputError(f"Unsupported media kind: {kind}") from exc

        source = (source or "").strip()
        if source.startswith("data:"):
            return cls.from_data_uri(source, kind)
        parsed = urlparse(source)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return cls.from_url(source, kind)
        raise MediaInputError("Unsupported media source: expected a data URI or an http(s) URL.")
