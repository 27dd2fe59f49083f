"""Google Cloud service snippets."""

__all__ = [
    "dlp",
    "healthcare",
]
