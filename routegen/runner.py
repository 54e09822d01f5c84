"""CLI runner for router file generation."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

import yaml

from .config import get_catalog_config, get_config_path
from .generator import RouterGenerator
from .output import format_routes_text, write_model_jsonl
from .render import render_router
from .repo_scan import validate_catalog, write_router_file


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate a router file from annotated controller classes")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument(
        "--controllers",
        nargs="+",
        help="Controller files or directories (directories are searched for *Controller files)",
    )
    src.add_argument("--catalog", help="Path to a routers.yaml catalog describing several router files")
    ap.add_argument("--out", help="Router file to write (required with --controllers unless --stdout)")
    ap.add_argument("--model-out", help="Also write the routing model as JSONL to this path")
    ap.add_argument("--stdout", action="store_true", help="Print the router file instead of writing it")
    ap.add_argument("--verbose", action="store_true", help="Log per-file discovery and parsing details")
    ap.add_argument("--log-file", help="Append log lines to this file")
    return ap


def _run_job(
    name: str,
    inputs: List[Path],
    out_path: Optional[Path],
    *,
    model_out: Optional[Path],
    to_stdout: bool,
    verbose: bool,
    log: Callable[[str], None],
) -> bool:
    """Generate one router file; return False when an output write failed."""

    def _job_log(msg: str) -> None:
        log(f"[{name}] {msg}" if name else msg)

    generator = RouterGenerator(inputs[0] if inputs else Path("."), log=_job_log, verbose=verbose)
    model = generator.build_model(inputs)
    if verbose:
        for line in format_routes_text(model).splitlines():
            _job_log(line)

    ok = True
    if model_out is not None:
        try:
            count = write_model_jsonl(model, model_out)
            _job_log(f"[OK] wrote {model_out} routes={count}")
        except OSError as e:
            _job_log(f'[ERROR] failed to write "{model_out}": {e}')
            ok = False

    text = render_router(model)
    if to_stdout:
        sys.stdout.write(text)
        return ok

    if write_router_file(out_path, text, log=_job_log):
        _job_log(f"[OK] wrote {out_path}")
    else:
        ok = False
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI; exit 0 on success, 1 on write failure, 2 on bad input."""
    args = _build_parser().parse_args(argv)

    log_path: Optional[Path] = None
    if args.log_file:
        log_path = Path(args.log_file).expanduser().resolve()
    else:
        default_log = str(get_catalog_config().get("log_file") or "").strip()
        if args.catalog and default_log:
            log_path = Path(default_log).expanduser().resolve()

    def _append_log(line: str) -> None:
        if log_path is None:
            return
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")

    def _log(msg: str, *, stderr: bool = False) -> None:
        # Keep stdout clean for the rendered file in --stdout mode.
        stream = sys.stderr if (stderr or args.stdout or "[ERROR]" in msg) else sys.stdout
        print(msg, file=stream)
        _append_log(msg)

    _append_log(f"[RUN] start {time.strftime('%Y-%m-%d %H:%M:%S')} config={get_config_path()}")

    model_out = Path(args.model_out).expanduser().resolve() if args.model_out else None

    if args.controllers:
        if not args.out and not args.stdout:
            _log("[ERROR] --out is required unless --stdout is given", stderr=True)
            return 2
        out_path = Path(args.out).expanduser().resolve() if args.out else None
        inputs = [Path(c).expanduser() for c in args.controllers]
        ok = _run_job(
            "",
            inputs,
            out_path,
            model_out=model_out,
            to_stdout=args.stdout,
            verbose=args.verbose,
            log=_log,
        )
        return 0 if ok else 1

    catalog_path = Path(args.catalog).expanduser().resolve()
    if not catalog_path.exists():
        _log(f'[ERROR] Catalog file not found: "{catalog_path}"', stderr=True)
        return 2

    try:
        catalog = yaml.safe_load(catalog_path.read_text(encoding="utf-8"))
    except Exception as e:
        _log(f'[ERROR] Failed to read YAML: "{catalog_path}": {e}', stderr=True)
        return 2

    if not isinstance(catalog, dict) or "routers" not in catalog:
        _log('[ERROR] Catalog YAML must contain key: "routers"', stderr=True)
        return 2

    root_raw = catalog.get("root") or "."
    root = (catalog_path.parent / str(root_raw)).expanduser().resolve()
    routers = catalog["routers"]
    if not isinstance(routers, list):
        _log('[ERROR] "routers" must be a list', stderr=True)
        return 2

    jobs, errors = validate_catalog(root, routers)
    if errors:
        _log("[ERROR] Catalog validation failed:", stderr=True)
        for e in errors:
            _log(f"  - {e}", stderr=True)
        return 2

    failed = 0
    for name, inputs, out_path in jobs:
        job_model_out = None
        if model_out is not None:
            job_model_out = model_out.parent / f"{name}.{model_out.name}"
        ok = _run_job(
            name,
            inputs,
            out_path,
            model_out=job_model_out,
            to_stdout=args.stdout,
            verbose=args.verbose,
            log=_log,
        )
        if not ok:
            failed += 1

    if failed:
        _log(f"[WARN] {failed} of {len(jobs)} router files failed", stderr=True)
        return 1
    return 0
