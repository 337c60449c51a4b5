# cloudbox_app/services/paths.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Optional

from ..errors import CorruptHierarchyError
from ..models import Folder
from .repository import repo


def resolve_path(folder_id: Optional[int]) -> list[dict]:
    """
    Ancestor chain of ``folder_id`` from the top-level folder down to the
    folder itself, as ``[{"id", "name"}, ...]``. Empty for the root (None).
    The synthetic "Home" entry is added by the contents aggregator, not here.
    """
    chain: list[dict] = []
    seen: set[int] = set()
    current = folder_id
    while current is not None:
        if current in seen:
            raise CorruptHierarchyError(
                f"Cycle detected in folder hierarchy at folder {current}",
                details={"folderId": folder_id},
            )
        seen.add(current)
        folder = repo.get(Folder, current)
        if folder is None:
            break
        chain.insert(0, {"id": folder.id, "name": folder.name})
        current = folder.parent_id
    return chain


def materialized_path(parent_id: Optional[int], name: str) -> str:
    names = [p["name"] for p in resolve_path(parent_id)]
    return "/" + "/".join(names + [name])


def is_descendant(folder_id: int, ancestor_id: int) -> bool:
    """True when ``ancestor_id`` appears in the chain of ``folder_id`` (itself included)."""
    return any(p["id"] == ancestor_id for p in resolve_path(folder_id))


def refresh_subtree_paths(folder: Folder) -> int:
    """Recomputes ``path`` for ``folder`` and every folder below it; returns how many changed."""
    changed = 0
    stack = [(folder, materialized_path(folder.parent_id, folder.name))]
    seen: set[int] = set()
    while stack:
        node, new_path = stack.pop()
        if node.id in seen:
            raise CorruptHierarchyError(f"Cycle detected in folder hierarchy at folder {node.id}")
        seen.add(node.id)
        if node.path != new_path:
            node.path = new_path
            changed += 1
        for child in repo.find_folders_by_parent(node.user_id, node.id, status=None):
            stack.append((child, f"{new_path}/{child.name}"))
    repo.session.flush()
    return changed
