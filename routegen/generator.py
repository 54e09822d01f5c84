"""Generate a router file from annotated controller classes."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .builder import RouteModelBuilder
from .model import RoutingModel
from .reflection import SourceReflector
from .render import render_router
from .repo_scan import CONTROLLER_FILE_SUFFIX, PathLike, resolve_inputs, write_router_file


class RouterGenerator:
    """Builds the routing model from controllers and writes the router file.

    ``controller_dir`` is the directory used by ``generate``; explicit inputs
    can always be passed to ``generate_from_files`` instead.
    """

    def __init__(
        self,
        controller_dir: PathLike,
        *,
        suffix: str = CONTROLLER_FILE_SUFFIX,
        reflector_factory: Optional[Callable[[], SourceReflector]] = None,
        log: Optional[Callable[[str], None]] = None,
        verbose: bool = False,
    ) -> None:
        self.controller_dir = Path(controller_dir)
        self.suffix = suffix
        self.reflector_factory = reflector_factory
        self.log = log
        self.verbose = verbose

    def _scan_log(self, msg: str) -> None:
        if self.log is not None and self.verbose:
            self.log(msg)

    def resolve(self, inputs: Iterable[PathLike]) -> List[Path]:
        return resolve_inputs(inputs, suffix=self.suffix, log=self._scan_log)

    def build_model(self, inputs: Iterable[PathLike]) -> RoutingModel:
        """Build a fresh model from files and directories."""
        reflector = self.reflector_factory() if self.reflector_factory is not None else None
        builder = RouteModelBuilder(reflector, log=self.log, verbose=self.verbose)
        files = self.resolve(inputs)
        names = builder.add_files(files)
        if self.log is not None:
            self.log(f"[MODEL] files={len(files)} controllers={len(set(names))}")
        return builder.build()

    def render(self, inputs: Iterable[PathLike]) -> str:
        return render_router(self.build_model(inputs))

    def generate_from_files(self, inputs: Iterable[PathLike], router_file: PathLike) -> bool:
        """Generate from explicit controller files/directories into ``router_file``."""
        started = time.perf_counter()
        text = self.render(inputs)
        out_path = Path(router_file)
        ok = write_router_file(out_path, text, log=self.log)
        if ok and self.log is not None:
            elapsed = time.perf_counter() - started
            self.log(f"[OK] wrote {out_path} in {elapsed:.2f}s")
        return ok

    def generate(self, router_file: PathLike) -> bool:
        """Generate from every controller under the bound directory."""
        return self.generate_from_files([self.controller_dir], router_file)
