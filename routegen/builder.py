"""Aggregate handler classes into a RoutingModel."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from .annotations import lex_comment
from .class_meta import extract_qualified_class_name
from .directives import parse_action, parse_routing_name
from .model import Controller, RoutingModel
from .reflection import PhpSourceReflector, SourceReflector
from .repo_scan import read_source_text


class RouteModelBuilder:
    """Owns the model for one generation run.

    Inputs must be fed in discovery order: the first class to claim a routing
    name keeps its class name, and URL index writes are last-writer-wins.
    """

    def __init__(
        self,
        reflector: Optional[SourceReflector] = None,
        *,
        log: Optional[Callable[[str], None]] = None,
        verbose: bool = False,
    ) -> None:
        self.reflector = reflector if reflector is not None else PhpSourceReflector()
        self.model = RoutingModel()
        self._log = log
        self._verbose = verbose

    def _debug(self, msg: str) -> None:
        if self._log is not None and self._verbose:
            self._log(msg)

    def add_class(
        self,
        qualified_name: str,
        class_comment: str,
        methods: Iterable[Tuple[str, str]],
    ) -> Optional[str]:
        """Add one handler class; return its routing name, or None if skipped."""
        routing_name = parse_routing_name(lex_comment(class_comment))
        if not routing_name:
            self._debug(f"[SKIP] {qualified_name} no routing name")
            return None

        controller = self.model.controllers.get(routing_name)
        if controller is None:
            controller = Controller(qualified_class_name=qualified_name)
            self.model.controllers[routing_name] = controller
        elif controller.qualified_class_name != qualified_name:
            self._debug(
                f"[MERGE] {qualified_name} into {routing_name} "
                f"(owned by {controller.qualified_class_name})"
            )

        def _register(url: str) -> None:
            self.model.register_url(url, routing_name)

        for method_name, comment in methods:
            controller.actions[method_name] = parse_action(lex_comment(comment), register_url=_register)
        controller.order_actions()

        self._debug(f"[CONTROLLER] {routing_name} {qualified_name} actions={len(controller.actions)}")
        return routing_name

    def add_source(self, text: str, *, label: str = "") -> Optional[str]:
        """Add the handler class declared in one source text."""
        qualified_name = extract_qualified_class_name(text)
        if not qualified_name:
            self._debug(f"[SKIP] {label or '<source>'} no class declaration")
            return None
        self.reflector.index_source(qualified_name, text)
        return self.add_class(
            qualified_name,
            self.reflector.get_class_comment(qualified_name),
            self.reflector.list_public_methods(qualified_name),
        )

    def add_file(self, path: Path) -> Optional[str]:
        try:
            text = read_source_text(path)
        except OSError as e:
            if self._log is not None:
                self._log(f"[SKIP] {path} read_error={type(e).__name__}")
            return None
        return self.add_source(text, label=str(path))

    def add_files(self, paths: Iterable[Path]) -> List[str]:
        """Add files in order; return the routing names that were accepted."""
        names: List[str] = []
        for p in paths:
            routing_name = self.add_file(p)
            if routing_name:
                names.append(routing_name)
        return names

    def build(self) -> RoutingModel:
        """Return the model built so far."""
        return self.model
