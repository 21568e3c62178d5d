import mimetypes

DEFAULT_TYPE = "application/octet-stream"

if not mimetypes.inited:
    mimetypes.init()

# Platform tables disagree on these; pin what browsers expect
for _ext, _type in {
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".map": "application/json",
    ".svg": "image/svg+xml",
    ".wasm": "application/wasm",
    ".webmanifest": "application/manifest+json",
    ".txt": "text/plain",
}.items():
    mimetypes.add_type(_type, _ext)

TEXT_TYPES = {
    "application/json",
    "application/javascript",
    "application/manifest+json",
    "image/svg+xml",
}
JAVASCRIPT_TYPES = {"text/javascript", "application/javascript"}


def mime(extension: str) -> str:
    """Return the MIME type for a file extension (with or without the dot)."""
    ext = extension.lower()
    if not ext:
        return DEFAULT_TYPE
    if not ext.startswith("."):
        ext = "." + ext
    guessed, _ = mimetypes.guess_type("file" + ext, strict=False)
    return guessed or DEFAULT_TYPE


def content_type(mime_type: str) -> str:
    if mime_type.startswith("text/") or mime_type in TEXT_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def is_html(mime_type: str) -> bool:
    return mime_type == "text/html"


def is_revalidated(mime_type: str) -> bool:
    return mime_type.startswith("image/") or mime_type in JAVASCRIPT_TYPES
