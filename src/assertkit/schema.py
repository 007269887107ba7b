"""Generate JSON Schema and docs for the assertkit YAML config."""

from __future__ import annotations

import json
from pathlib import Path

from assertkit.config import DEFAULT_CONFIG_NAME, AssertKitConfig


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def generate_json_schema() -> dict:
    schema = AssertKitConfig.model_json_schema()
    schema["title"] = "assertkit config"
    return schema


def write_json_schema(path: Path) -> None:
    _ensure_parent(path)
    schema = generate_json_schema()
    path.write_text(json.dumps(schema, indent=2) + "\n")


_DESCRIPTIONS = {
    "report": "path of the junit XML report of recorded assertion failures; ${VAR} references are expanded",
    "debug_log": "path of the debug log file; ${VAR} references are expanded",
    "verbose": "also write debug logging to stderr",
    "max_message_length": "longest failure message shown in test reports (at least 80)",
}


def _type_label(prop: dict) -> str:
    if "type" in prop:
        return prop["type"]
    return " | ".join(p.get("type", "?") for p in prop.get("anyOf", []))


def generate_schema_doc() -> str:
    schema = generate_json_schema()
    props = schema.get("properties", {})

    lines: list[str] = []
    lines.append("# assertkit YAML Schema")
    lines.append("")
    lines.append("This doc is generated from the Pydantic models.")
    lines.append("")
    lines.append(f"The pytest plugin reads `{DEFAULT_CONFIG_NAME}` from the rootdir, or the")
    lines.append("file named by `--assertkit-config` / the `assertkit_config` ini option.")
    lines.append("")
    lines.append("## Keys")
    for name, prop in props.items():
        default = json.dumps(prop.get("default"))
        description = _DESCRIPTIONS.get(name, "")
        lines.append(f"- `{name}`: {_type_label(prop)} (default {default}) - {description}")

    lines.append("")
    return "\n".join(lines)


def write_schema_doc(path: Path) -> None:
    _ensure_parent(path)
    path.write_text(generate_schema_doc())
