"""
Input discovery and decoding.

- A path naming a file yields exactly that file (whatever its suffix).
- A path naming a directory is walked recursively; every regular file whose
  name ends in one of the wanted suffixes is yielded (case-sensitive).
- An unreadable sub-directory is reported through `on_error` and skipped.
  An unreadable top directory aborts the walk.
"""

import errno
import json
import os
import sys
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

import yaml

from .errors import InputDecodeError

JSON_SUFFIXES: Tuple[str, ...] = (".json",)
YAML_SUFFIXES: Tuple[str, ...] = (".yml", ".yaml")

ErrorHandler = Callable[[OSError], None]


def report_walk_error(err: OSError) -> None:
    print(f"[!] Error reading {err.filename}: {err.strerror or err}", file=sys.stderr)


def iter_rule_files(
        path: str,
        suffixes: Tuple[str, ...] = JSON_SUFFIXES,
        on_error: Optional[ErrorHandler] = None,
) -> Iterator[str]:
    """
    Resolve `path` to the rule files it designates.

    Raises FileNotFoundError right away when `path` does not exist; the
    returned iterator is lazy and follows directory-walk order (sorted per
    directory so runs are reproducible).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(errno.ENOENT, "JSON file or directory not found", path)

    if not os.path.isdir(path):
        return iter([path])

    return _walk(path, suffixes, on_error or report_walk_error)


def _walk(top: str, suffixes: Tuple[str, ...], on_error: ErrorHandler) -> Iterator[str]:
    top_norm = os.path.normpath(top)

    def _onerror(err: OSError) -> None:
        if err.filename is not None and os.path.normpath(err.filename) == top_norm:
            raise err
        on_error(err)

    for dirpath, dirnames, filenames in os.walk(top, onerror=_onerror):
        dirnames.sort()
        for name in sorted(filenames):
            if not name.endswith(suffixes):
                continue
            full = os.path.join(dirpath, name)
            if os.path.isfile(full):
                yield full


def is_yaml_path(path: str) -> bool:
    return path.endswith(YAML_SUFFIXES)


def load_document(path: str) -> Dict[str, Any]:
    """
    Read one rule file and return its top-level object.

    OSError propagates unchanged; anything that is not a well-formed
    JSON (or YAML, by suffix) object raises InputDecodeError.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = f.read()
        except UnicodeDecodeError as e:
            raise InputDecodeError(f"Error decoding {path}: {e}") from e

    if is_yaml_path(path):
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise InputDecodeError(f"Error decoding YAML file {path}: {e}") from e
    else:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InputDecodeError(f"Error decoding JSON file {path}: {e}") from e

    if not isinstance(data, dict):
        raise InputDecodeError(
            f"Error decoding {path}: expected an object at the root, got {type(data).__name__}"
        )
    return data
