"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

Serializes the app's OpenAPI schema to interfaces/openapi.json (relative to
the working directory unless a path is given) so API clients and
documentation tools can consume a stable schema without running the server.

Usage:
    python -m task_api.generate_openapi [output_path]
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .application import create_app, openapi_tags
from .settings import Settings

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the expected tags metadata. Existing
    tag definitions are left as they are.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Write the OpenAPI schema file and return its path."""
    # Schema generation needs no data; keep the store empty
    app = create_app(Settings(seed_sample_data=False))
    schema = app.openapi()
    _ensure_tags(schema)

    out_path = out_path or DEFAULT_OUTPUT
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
