import os
from pathlib import Path
from typing import Optional

# Paths owned by the API; these never fall back to the SPA entry page
API_PREFIXES = ("analyze", "healthz")
INDEX_FILE = "index.html"


# --- Helper: safe path normalize & reject traversal/abs paths ---
def _safe_normalize(p: str) -> Optional[str]:
    if not isinstance(p, str) or p.strip() == "":
        return None
    p = p.replace("\\", "/")
    # disallow absolute paths
    if os.path.isabs(p) or p.startswith("/"):
        return None
    clean = os.path.normpath(p).replace("\\", "/")
    if clean == "." or clean == ".." or clean.startswith("../") or "/../" in clean:
        return None
    return clean


def is_api_path(path: str) -> bool:
    head = path.lstrip("/").split("/", 1)[0]
    return head in API_PREFIXES


def resolve_static(static_dir: Path, path: str) -> Optional[Path]:
    """
    Map a request path to a file in static_dir, SPA style:
      - an existing file inside static_dir is served as-is
      - anything else (including '/') gets index.html
    Returns None for API paths or when there is no index.html to fall back to.
    """
    if is_api_path(path):
        return None

    root = static_dir.resolve()
    rel = _safe_normalize(path.lstrip("/"))
    if rel is not None:
        candidate = (root / rel).resolve()
        if candidate.is_file() and root in candidate.parents:
            return candidate

    index = root / INDEX_FILE
    return index if index.is_file() else None
