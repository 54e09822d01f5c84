"""Routing model: controllers, actions, routes and the URL index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class RouteEntry:
    """One dispatcher registration collected from a ``@route(...)`` block."""
    method: str = ""
    url: str = ""
    name: str = ""
    asserts: Tuple[str, ...] = ()
    values: Tuple[str, ...] = ()


@dataclass
class Action:
    """A public handler method with its routes and ACL rule lines."""
    routes: List[RouteEntry] = field(default_factory=list)
    acl: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.routes and not self.acl

    def sort_key(self) -> str:
        """Greatest URL across routes, case-insensitive; empty sorts lowest."""
        return max((r.url.lower() for r in self.routes), default="")


@dataclass
class Controller:
    """A handler class registered under a routing name."""
    qualified_class_name: str
    actions: Dict[str, Action] = field(default_factory=dict)

    def order_actions(self) -> None:
        """Re-order actions by descending greatest URL, keeping ties in place."""
        ordered = sorted(self.actions.items(), key=lambda kv: kv[1].sort_key(), reverse=True)
        self.actions = dict(ordered)


def action_id(routing_name: str, action_name: str) -> str:
    """Return the dispatcher identifier ``<routing_name>:<action_name>``."""
    return f"{routing_name}:{action_name}"


@dataclass
class RoutingModel:
    """Aggregate built once per generation run."""
    controllers: Dict[str, Controller] = field(default_factory=dict)
    url_index: Dict[str, str] = field(default_factory=dict)

    def register_url(self, url: str, routing_name: str) -> None:
        # Last writer wins when the same URL is declared twice.
        self.url_index[url] = routing_name

    def reduced_index(self) -> List[Tuple[str, str]]:
        """Return ``(url, routing_name)`` pairs fixing the output order.

        URLs are sorted in descending order and only the first URL seen for
        each routing name is kept.
        """
        seen = set()
        reduced: List[Tuple[str, str]] = []
        for url in sorted(self.url_index, reverse=True):
            routing_name = self.url_index[url]
            if routing_name in seen:
                continue
            seen.add(routing_name)
            reduced.append((url, routing_name))
        return reduced
