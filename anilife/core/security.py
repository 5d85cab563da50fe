import hashlib


def redact_viewer_id(viewer_id: str | None) -> str:
    """
    Log-safe label for a viewer.

    The raw id never reaches the logs: it is replaced by a short, stable
    SHA-256 fingerprint, so lines from one viewer still group together and
    viewers sharing a prefix (e.g. the same e-mail domain) stay distinct.
    """
    if not viewer_id:
        return "viewer:anonymous"
    digest = hashlib.sha256(viewer_id.encode("utf-8")).hexdigest()
    return f"viewer:{digest[:10]}"
