"""Machine- and human-readable dumps of the routing model."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from .model import RoutingModel, action_id


def model_records(model: RoutingModel) -> List[dict]:
    """Flatten the model into one record per route, in rendering order."""
    records: List[dict] = []
    for _, routing_name in model.reduced_index():
        controller = model.controllers[routing_name]
        for action_name, action in controller.actions.items():
            for route in action.routes:
                records.append(
                    {
                        "controller": routing_name,
                        "class": controller.qualified_class_name,
                        "action": action_name,
                        "method": route.method,
                        "url": route.url,
                        "name": route.name,
                        "asserts": list(route.asserts),
                        "values": list(route.values),
                        "acl": list(action.acl),
                    }
                )
    return records


def write_model_jsonl(model: RoutingModel, out_path: Path) -> int:
    """Write the flattened model as JSONL and return the record count."""
    records = model_records(model)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    body = "\n".join(json.dumps(r, ensure_ascii=False) for r in records)
    out_path.write_text(body + "\n" if body else "", encoding="utf-8")
    return len(records)


def format_routes_text(model: RoutingModel, *, limit: int = 2000) -> str:
    """Render routes into a compact text block for logs."""
    records = model_records(model)
    lines = ["ROUTES (method url | action):", "-----"]
    for r in records[:limit]:
        method = r["method"] or "ANY"
        url = r["url"] or "<unknown>"
        aid = action_id(r["controller"], r["action"])
        if r["acl"]:
            lines.append(f"{method} {url} | {aid} | acl={len(r['acl'])}")
        else:
            lines.append(f"{method} {url} | {aid}")
    if len(records) > limit:
        lines.append(f"... truncated, total_routes={len(records)}")
    return "\n".join(lines)
