import json
import os
from typing import Any, Dict


def response_path(response_dir: str, name: str) -> str:
    # Name is used as-is: separators or ".." in it reach the filesystem unchanged.
    return os.path.join(response_dir, f"{name}.json")


def write_response(response_dir: str, name: str, data: Dict[str, Any]) -> str:
    """
    Write `data` to <response_dir>/<name>.json (2-space indent) and return
    the path. Existing files are truncated; the directory must already exist.
    """
    path = response_path(response_dir, name)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    return path
