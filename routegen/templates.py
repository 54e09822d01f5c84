"""Load router file templates from configuration."""

from .config import get_render_templates

_TEMPLATES = get_render_templates()

HEADER = _TEMPLATES["header"]
CONTROLLER_RULE = _TEMPLATES["controller_rule"]
ACTION_RULE = _TEMPLATES["action_rule"]
CONTROLLER_TITLE = _TEMPLATES.get("controller_title", "// {routing_name}")
CONTROLLER = _TEMPLATES["controller"]
ACTION_TITLE = _TEMPLATES.get("action_title", "// {action_id}")
ROUTE = _TEMPLATES["route"]
METHOD = _TEMPLATES["method"]
BIND = _TEMPLATES.get("bind", "->bind('{name}')")
CHAIN_INDENT = _TEMPLATES.get("chain_indent", "    ")
ACL_RESOURCE = _TEMPLATES["acl_resource"]
ACL_ALLOW_OPEN = _TEMPLATES["acl_allow_open"]
ACL_RULE = _TEMPLATES["acl_rule"]
ACL_ALLOW_CLOSE = _TEMPLATES["acl_allow_close"]
