"""Controller discovery, source reading and router file output."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .config import get_scan_rules

SCAN_RULES = get_scan_rules()

IGNORE_DIRS = {
    str(d).lower()
    for d in SCAN_RULES.get("ignore_dirs", [])
    if isinstance(d, str) and d.strip()
}
CONTROLLER_SUFFIX = str(SCAN_RULES.get("controller_suffix") or "Controller")
SOURCE_EXT = str(SCAN_RULES.get("source_ext") or ".php")
CONTROLLER_FILE_SUFFIX = CONTROLLER_SUFFIX + SOURCE_EXT

PathLike = Union[str, Path]


def relposix(base: Path, p: Path) -> str:
    """Return a POSIX-style relative path."""
    return p.relative_to(base).as_posix()


def is_controller_file(p: Path, *, suffix: str = CONTROLLER_FILE_SUFFIX) -> bool:
    """Check the controller naming convention."""
    return p.name.endswith(suffix)


def list_controller_files(root: Path, *, suffix: str = CONTROLLER_FILE_SUFFIX) -> List[Path]:
    """Recursively list controller files under a directory in a stable order."""
    files: List[Path] = []
    for dirpath, dirs, filenames in os.walk(root):
        dirs[:] = sorted(d for d in dirs if d.lower() not in IGNORE_DIRS)
        for fn in sorted(filenames):
            p = Path(dirpath) / fn
            if p.is_file() and is_controller_file(p, suffix=suffix):
                files.append(p)
    return files


def resolve_inputs(
    inputs: Iterable[PathLike],
    *,
    suffix: str = CONTROLLER_FILE_SUFFIX,
    log: Optional[Callable[[str], None]] = None,
) -> List[Path]:
    """Expand files and directories into a de-duplicated controller file list.

    Explicit files are taken as given; directories are walked. Paths that are
    neither are skipped.
    """
    resolved: List[Path] = []
    for raw in inputs:
        p = Path(raw).expanduser()
        if p.is_file():
            resolved.append(p)
        elif p.is_dir():
            found = list_controller_files(p, suffix=suffix)
            if log is not None:
                log(f"[SCAN] {p} controllers={len(found)}")
            resolved.extend(found)
        elif log is not None:
            log(f"[SKIP] {p} not a file or directory")

    seen = set()
    out: List[Path] = []
    for p in resolved:
        key = p.resolve()
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out


def read_source_text(p: Path) -> str:
    """Read a source file as UTF-8, dropping undecodable bytes."""
    return p.read_bytes().decode("utf-8", errors="ignore")


def write_router_file(
    out_path: Path,
    text: str,
    *,
    log: Optional[Callable[[str], None]] = None,
) -> bool:
    """Write the generated router file; return False if the write failed."""
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    except OSError as e:
        if log is not None:
            log(f'[ERROR] failed to write "{out_path}": {e}')
        return False
    return True


def validate_catalog(root: Path, routers: list[dict]) -> Tuple[List[Tuple[str, List[Path], Path]], List[str]]:
    """Validate catalog entries and return resolved ``(name, inputs, out)`` jobs."""
    errors: List[str] = []
    ok: List[Tuple[str, List[Path], Path]] = []

    if not root.exists():
        errors.append(f'Catalog root does not exist: "{root}"')
        return ok, errors
    if not root.is_dir():
        errors.append(f'Catalog root is not a directory: "{root}"')
        return ok, errors

    def _inside_root(p: Path) -> bool:
        try:
            p.relative_to(root)
        except ValueError:
            return False
        return True

    seen_names: set[str] = set()
    seen_outs: set[Path] = set()

    for i, r in enumerate(routers):
        if not isinstance(r, dict):
            errors.append(f"routers[{i}] is not a mapping")
            continue
        name = r.get("name")
        controllers = r.get("controllers")
        out = r.get("out")

        if not name or not isinstance(name, str):
            errors.append(f"routers[{i}].name is missing or not a string")
            continue
        if isinstance(controllers, str):
            controllers = [controllers]
        if not controllers or not isinstance(controllers, list) or not all(isinstance(c, str) for c in controllers):
            errors.append(f"routers[{i}].controllers is missing or not a list of strings (router={name})")
            continue
        if not out or not isinstance(out, str):
            errors.append(f"routers[{i}].out is missing or not a string (router={name})")
            continue

        if name in seen_names:
            errors.append(f'Duplicate router name "{name}"')
        seen_names.add(name)

        inputs: List[Path] = []
        escaped = False
        for c in controllers:
            p = (root / c).expanduser().resolve()
            if not _inside_root(p):
                errors.append(f'Router "{name}" controllers path escapes root: "{c}" -> "{p}" (root="{root}")')
                escaped = True
                continue
            inputs.append(p)

        out_abs = (root / out).expanduser().resolve()
        if not _inside_root(out_abs):
            errors.append(f'Router "{name}" out path escapes root: "{out}" -> "{out_abs}" (root="{root}")')
            continue
        if escaped:
            continue

        if out_abs in seen_outs:
            errors.append(f'Duplicate router out path "{out_abs}" (router={name})')
        seen_outs.add(out_abs)

        ok.append((name, inputs, out_abs))

    return ok, errors
