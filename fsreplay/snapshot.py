"""
JSON tree snapshots of a DirectoryTable.

A snapshot uses the fs.json node shape: directories are
{"type": "dir", "name": ..., "children": [...]} and files are
{"type": "file", "name": ..., "size": int}.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path as FilePath
from typing import Any, Dict, List, Mapping

import jsonschema

from .dir_table import ROOT, DirectoryTable, Path
from .errors import SnapshotError

logger = logging.getLogger(__name__)

ROOT_NAME = "/"

FS_TREE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "definitions": {
        "file": {
            "type": "object",
            "properties": {
                "type": {"const": "file"},
                "name": {"type": "string", "pattern": "^[^ ]+$"},
                "size": {"type": "integer", "minimum": 0},
            },
            "required": ["type", "name", "size"],
            "additionalProperties": False,
        },
        "dir": {
            "type": "object",
            "properties": {
                "type": {"const": "dir"},
                "name": {"type": "string", "pattern": "^[a-z]+$"},
                "children": {"$ref": "#/definitions/children"},
            },
            "required": ["type", "name", "children"],
            "additionalProperties": False,
        },
        "children": {
            "type": "array",
            "items": {
                "oneOf": [
                    {"$ref": "#/definitions/file"},
                    {"$ref": "#/definitions/dir"},
                ]
            },
        },
        "root": {
            "type": "object",
            "properties": {
                "type": {"const": "dir"},
                "name": {"const": ROOT_NAME},
                "children": {"$ref": "#/definitions/children"},
            },
            "required": ["type", "name", "children"],
            "additionalProperties": False,
        },
    },
    "$ref": "#/definitions/root",
}


def _dir_node(table: DirectoryTable, path: Path) -> Dict[str, Any]:
    children: List[Dict[str, Any]] = [
        _dir_node(table, child) for child in table.children(path)
    ]
    children.extend(
        {"type": "file", "name": name, "size": size}
        for name, size in sorted(table.files(path).items())
    )
    return {"type": "dir", "name": path[-1] if path else ROOT_NAME, "children": children}


def table_to_tree(table: DirectoryTable) -> Dict[str, Any]:
    """
    Nest the table under the root. Directories whose parent was never
    visited are not reachable from the root and are left out.
    """
    return _dir_node(table, ROOT)


def _index_node(table: DirectoryTable, node: Mapping[str, Any], rel_path: Path) -> None:
    table.ensure(rel_path)
    for child in node.get("children", []):
        name = child["name"]
        if child["type"] == "dir":
            _index_node(table, child, rel_path + (name,))
        else:
            table.insert_file(rel_path, name, child["size"])


def table_from_tree(tree: Mapping[str, Any]) -> DirectoryTable:
    try:
        jsonschema.validate(instance=tree, schema=FS_TREE_SCHEMA)
    except jsonschema.ValidationError as e:
        raise SnapshotError(f"invalid snapshot: {e.message}") from e
    table = DirectoryTable()
    _index_node(table, tree, ROOT)
    return table


def dump_snapshot(table: DirectoryTable, path: FilePath) -> None:
    path = FilePath(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(table_to_tree(table), indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote snapshot of %d directories to %s", len(table), path)


def load_snapshot(path: FilePath) -> DirectoryTable:
    path = FilePath(path)
    try:
        tree = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SnapshotError(f"cannot read snapshot {path}: {e}") from e
    return table_from_tree(tree)
