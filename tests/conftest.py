"""Shared fixtures: a small synthetic API documentation drop."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from llmdocs.index.generator import Generator

VERSION = "2.0.9"

RUNTIME_API: Dict[str, Any] = {
    "application": "factorio",
    "stage": "runtime",
    "application_version": VERSION,
    "api_version": 6,
    "classes": [
        {
            "name": "LuaFoo",
            "order": 0,
            "description": "A foo. See [LuaBar](runtime:LuaBar).",
            "parent": "LuaBar",
            "attributes": [
                {
                    "name": "valid",
                    "order": 0,
                    "description": "Is this object valid?",
                    "read_type": "boolean",
                    "optional": False,
                },
                {
                    "name": "health",
                    "order": 1,
                    "description": "Current health.",
                    "read_type": "float",
                    "write_type": "float",
                    "optional": True,
                },
            ],
            "methods": [
                {
                    "name": "teleport",
                    "order": 1,
                    "description": "Teleport to a [MapPosition](runtime:MapPosition).",
                    "parameters": [
                        {"name": "position", "order": 0, "type": "MapPosition", "optional": False, "description": "Where to."},
                        {"name": "surface", "order": 1, "type": "string", "optional": True},
                    ],
                    "format": {"takes_table": False, "table_optional": False},
                    "return_values": [
                        {"order": 0, "type": "boolean", "optional": False, "description": "Whether it worked."}
                    ],
                },
                {
                    "name": "create",
                    "order": 0,
                    "description": "Create a thing.",
                    "parameters": [
                        {"name": "name", "order": 0, "type": "string", "optional": False},
                        {"name": "amount", "order": 1, "type": "uint", "optional": True},
                    ],
                    "format": {"takes_table": True, "table_optional": False},
                    "return_values": [],
                },
            ],
        },
        {"name": "LuaBar", "order": 1, "description": "A bar.", "attributes": [], "methods": []},
    ],
    "concepts": [
        {
            "name": "MapPosition",
            "order": 0,
            "description": "A position on a map.",
            "type": {
                "complex_type": "table",
                "parameters": [
                    {"name": "x", "order": 0, "type": "double", "optional": False},
                    {"name": "y", "order": 1, "type": "double", "optional": False},
                ],
            },
        }
    ],
    "events": [
        {
            "name": "on_tick",
            "order": 0,
            "description": "Called every tick.",
            "data": [
                {"name": "tick", "order": 0, "type": "uint", "optional": False, "description": "Current tick."}
            ],
        }
    ],
    "defines": [
        {
            "name": "direction",
            "order": 0,
            "description": "Compass directions.",
            "values": [
                {"name": "north", "order": 0, "description": "Up."},
                {"name": "east", "order": 1, "description": ""},
            ],
        }
    ],
    "global_functions": [
        {
            "name": "log",
            "order": 0,
            "description": "Write a message to the log.",
            "parameters": [{"name": "message", "order": 0, "type": "LocalisedString", "optional": False}],
            "return_values": [],
            "format": {"takes_table": False, "table_optional": False},
        }
    ],
    "global_objects": [
        {"name": "game", "order": 0, "description": "The main game object.", "type": "LuaBar"}
    ],
}

PROTOTYPE_API: Dict[str, Any] = {
    "application": "factorio",
    "stage": "prototype",
    "application_version": VERSION,
    "api_version": 6,
    "prototypes": [
        {
            "name": "PrototypeBase",
            "order": 0,
            "description": "The base of all prototypes.",
            "abstract": True,
            "properties": [
                {"name": "name", "order": 0, "type": "string", "optional": False, "override": False, "description": "Unique name."}
            ],
        },
        {
            "name": "FooPrototype",
            "order": 1,
            "typename": "foo",
            "parent": "PrototypeBase",
            "description": "A foo prototype.",
            "properties": [
                {
                    "name": "type",
                    "order": 0,
                    "type": {"complex_type": "literal", "value": "foo"},
                    "optional": False,
                    "override": True,
                },
                {
                    "name": "speed",
                    "order": 1,
                    "type": "double",
                    "optional": True,
                    "override": False,
                    "default": "1.0",
                    "examples": ["```\nspeed = 2\n```"],
                },
            ],
        },
    ],
    "types": [
        {
            "name": "Color",
            "order": 0,
            "description": "A color.",
            "type": {"complex_type": "union", "options": ["string", {"complex_type": "struct"}]},
            "properties": [
                {"name": "type", "order": 0, "type": "string", "optional": True, "description": "Color space."},
                {"name": "r", "order": 1, "type": "float", "optional": True},
            ],
        }
    ],
    "defines": [
        {
            "name": "direction",
            "order": 0,
            "description": "Compass directions.",
            "values": [{"name": "north", "order": 0, "description": "Up."}],
        }
    ],
}

STORAGE_HTML = """<html><head><title>Storage</title><script>var x = 1;</script></head>
<body>
<div class="docs-sidebar">Sidebar</div>
<h1>Storage</h1>
<h2>Storage</h2>
<p>The <code>storage</code> table persists. See <a href="classes/LuaFoo.html#teleport">LuaFoo.teleport</a> and <a href="libraries.html">Libraries</a>.</p>
<h3>Details</h3>
<p>More text.</p>
<div class="footer">Footer</div>
</body></html>
"""

LIBRARIES_HTML = """<html><body>
<h2>Libraries</h2>
<p>Lua libraries shipped with the game.</p>
</body></html>
"""


def write_input(base: Path) -> Path:
    """Lay out an input drop one directory below ``base`` and return ``base``."""
    docs = base / "nested"
    (docs / "auxiliary").mkdir(parents=True)
    (docs / "runtime-api.json").write_text(json.dumps(RUNTIME_API, indent=2), encoding="utf-8")
    (docs / "prototype-api.json").write_text(json.dumps(PROTOTYPE_API, indent=2), encoding="utf-8")
    (docs / "auxiliary" / "storage.html").write_text(STORAGE_HTML, encoding="utf-8")
    (docs / "auxiliary" / "libraries.html").write_text(LIBRARIES_HTML, encoding="utf-8")
    return base


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    return write_input(tmp_path / "input")


@pytest.fixture
def docs_root(tmp_path: Path, input_dir: Path) -> Path:
    """A generated docs root holding one version."""
    out = tmp_path / "llm-docs"
    Generator(input_dir, out).run()
    return out


@pytest.fixture
def version_dir(docs_root: Path) -> Path:
    return docs_root / VERSION
