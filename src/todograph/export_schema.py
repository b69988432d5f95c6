"""
Utility script to generate and write the GraphQL schema (SDL) of the app.

The schema is serialized to interfaces/schema.graphql so that API clients and
code generators can consume a stable contract without running the server.

Usage:
    python -m todograph.export_schema [output-path]
"""
from __future__ import annotations

import os
import sys
from typing import Optional

from .api import schema


def _default_path() -> str:
    # <project_root>/interfaces/schema.graphql, relative to src/todograph/
    package_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(os.path.dirname(package_dir))
    return os.path.join(project_root, "interfaces", "schema.graphql")


# PUBLIC_INTERFACE
def export_schema(out_path: Optional[str] = None) -> str:
    """Write the SDL of the app schema and return the written file path."""
    out_path = out_path or _default_path()
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(schema.as_str())
        f.write("\n")
    return out_path


def main() -> None:
    path = export_schema(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote GraphQL schema to: {path}")


if __name__ == "__main__":
    main()
