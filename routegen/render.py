"""Render a RoutingModel into a PHP router file."""

from __future__ import annotations

from typing import List

from .model import Action, RouteEntry, RoutingModel, action_id
from .templates import (
    ACL_ALLOW_CLOSE,
    ACL_ALLOW_OPEN,
    ACL_RESOURCE,
    ACL_RULE,
    ACTION_RULE,
    ACTION_TITLE,
    BIND,
    CHAIN_INDENT,
    CONTROLLER,
    CONTROLLER_RULE,
    CONTROLLER_TITLE,
    HEADER,
    METHOD,
    ROUTE,
)


def render_route(route: RouteEntry, aid: str) -> List[str]:
    """Render one route registration statement, chained calls included."""
    head = ROUTE.format(url=route.url, action_id=aid)
    if route.method:
        head += METHOD.format(method=route.method)
    chain: List[str] = []
    if route.name:
        chain.append(BIND.format(name=route.name))
    chain.extend(route.asserts)
    chain.extend(route.values)
    lines = [head] + [CHAIN_INDENT + call for call in chain]
    lines[-1] += ";"
    return lines


def render_acl(aid: str, rules: List[str]) -> List[str]:
    """Render the resource declaration and its allow-set."""
    lines = [ACL_RESOURCE.format(action_id=aid)]
    lines.extend(ACL_ALLOW_OPEN.format(action_id=aid).splitlines())
    lines.extend(ACL_RULE.format(rule=rule) for rule in rules)
    lines.extend(ACL_ALLOW_CLOSE.format(action_id=aid).splitlines())
    return lines


def render_action(routing_name: str, action_name: str, action: Action) -> List[str]:
    """Render one action block; empty actions render nothing."""
    if action.is_empty():
        return []
    aid = action_id(routing_name, action_name)
    lines = [ACTION_RULE, ACTION_TITLE.format(action_id=aid)]
    for route in action.routes:
        lines.extend(render_route(route, aid))
    if action.acl:
        lines.extend(render_acl(aid, action.acl))
    return lines


def render_router(model: RoutingModel) -> str:
    """Render the whole router file in reduced URL index order."""
    lines: List[str] = HEADER.splitlines()
    for url, routing_name in model.reduced_index():
        controller = model.controllers[routing_name]
        lines.append("")
        lines.append(CONTROLLER_RULE)
        lines.append(CONTROLLER_TITLE.format(routing_name=routing_name, url=url))
        lines.append(CONTROLLER_RULE)
        lines.extend(
            CONTROLLER.format(
                routing_name=routing_name,
                class_name=controller.qualified_class_name,
            ).splitlines()
        )
        for action_name, action in controller.actions.items():
            block = render_action(routing_name, action_name, action)
            if block:
                lines.append("")
                lines.extend(block)
    return "\n".join(lines) + "\n"
