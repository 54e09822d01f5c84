"""Parse routing directives out of lexed docblock lines.

Class docblocks only carry ``name=<routing name>``. Method docblocks carry
any number of blocks of the form::

    @route(
        method=GET
        url=/users/{id}
        name=user_show
        assert('id', '\\d+')
        value('id', 1)
    )
    @acl(
        $self->isAdmin()
    )

The parser is permissive: unknown lines are ignored and a block that is
never closed is dropped without complaint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .model import Action, RouteEntry

ROUTE_OPEN = "@route"
ACL_OPEN = "@acl"
BLOCK_CLOSE = ")"
CHAIN_PREFIX = "->"


def _directive_value(line: str) -> str:
    return line.split("=", 1)[1].strip()


def parse_routing_name(lines: Iterable[str]) -> str:
    """Return the first class-level ``name=`` value, or an empty string."""
    for line in lines:
        if line.startswith("name="):
            return _directive_value(line)
    return ""


@dataclass
class _RouteDraft:
    method: str = ""
    url: str = ""
    name: str = ""
    asserts: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def close(self) -> RouteEntry:
        return RouteEntry(
            method=self.method,
            url=self.url,
            name=self.name,
            asserts=tuple(self.asserts),
            values=tuple(self.values),
        )


def parse_action(
    lines: Iterable[str],
    *,
    register_url: Optional[Callable[[str], None]] = None,
) -> Action:
    """Build an Action from the lexed lines of one method docblock.

    ``register_url`` is called for every ``url=`` directive as soon as it is
    read, including ones inside a block that is later dropped.
    """
    action = Action()
    draft: Optional[_RouteDraft] = None
    in_acl = False

    for line in lines:
        if in_acl:
            if line == BLOCK_CLOSE:
                in_acl = False
            else:
                action.acl.append(line)
            continue

        if line.startswith(ROUTE_OPEN):
            draft = _RouteDraft()
            continue
        if line.startswith(ACL_OPEN):
            # @acl is not allowed inside @route; an open route is abandoned.
            draft = None
            in_acl = True
            continue
        if draft is None:
            continue

        if line == BLOCK_CLOSE:
            action.routes.append(draft.close())
            draft = None
        elif line.startswith("name="):
            draft.name = _directive_value(line)
        elif line.startswith("url="):
            draft.url = _directive_value(line)
            if register_url is not None:
                register_url(draft.url)
        elif line.startswith("method="):
            draft.method = _directive_value(line)
        elif line.startswith("assert"):
            draft.asserts.append(CHAIN_PREFIX + line)
        elif line.startswith("value"):
            draft.values.append(CHAIN_PREFIX + line)

    return action
