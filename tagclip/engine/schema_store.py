"""
File-backed tag registry with inheritance resolution.

The registry snapshot is written by an external sync process. Every lookup
stats the file and reloads only when its modification time changed, so the
store heals itself after a sync without any explicit invalidation.
"""

import json
from collections import deque
from pathlib import Path
from typing import Dict, List, Optional, Set

from loguru import logger
from pydantic import ValidationError

from .config import Config
from .models import RegistrySnapshot, ResolvedField, ResolvedSchema, TagSchema


class SchemaStore:
    """
    Name-indexed cache of one workspace's tag registry.

    Lifecycle: loads lazily on first lookup, refreshes on demand when the
    snapshot changes, no teardown. A missing or corrupt snapshot makes every
    lookup return None / [] rather than raise.
    """

    def __init__(self, snapshot_path: Path):
        self.snapshot_path = Path(snapshot_path)
        self._by_name: Optional[Dict[str, TagSchema]] = None
        self._by_id: Dict[str, TagSchema] = {}
        self._last_mtime: Optional[int] = None
        self.load_count = 0

    @classmethod
    def for_workspace(cls, config: Config, workspace: Optional[str] = None) -> "SchemaStore":
        """Create a store for a workspace using the configured registry layout."""
        registry = config.registry
        name = workspace or registry.workspace
        return cls(registry.root / name / registry.filename)

    def get_tag(self, name: str) -> Optional[ResolvedSchema]:
        """Get a tag's resolved schema by name, or None."""
        self._refresh_if_needed()
        if not self._by_name:
            return None
        tag = self._by_name.get(name)
        if tag is None:
            return None
        return self._resolve(tag)

    def list_tags(self) -> List[ResolvedSchema]:
        """All tags in snapshot order, resolved. Empty if unavailable."""
        self._refresh_if_needed()
        if not self._by_name:
            return []
        return [self._resolve(tag) for tag in self._by_name.values()]

    def get_raw_tag(self, name: str) -> Optional[TagSchema]:
        """The tag as stored in the snapshot, own fields only."""
        self._refresh_if_needed()
        if not self._by_name:
            return None
        return self._by_name.get(name)

    @property
    def is_available(self) -> bool:
        self._refresh_if_needed()
        return self._by_name is not None

    def _refresh_if_needed(self) -> None:
        """Reload the snapshot when it is new to us or its mtime moved."""
        try:
            if not self.snapshot_path.exists():
                if self._by_name is not None:
                    logger.info(f"Schema snapshot removed: {self.snapshot_path}")
                self._clear()
                self._last_mtime = None
                return

            current_mtime = self.snapshot_path.stat().st_mtime_ns
        except OSError as e:
            # Keep whatever we already have
            logger.warning(f"Cannot stat schema snapshot {self.snapshot_path}: {e}")
            return

        if self._by_name is None or self._last_mtime != current_mtime:
            self._load()
            self._last_mtime = current_mtime
        else:
            logger.debug(f"Schema snapshot unchanged: {self.snapshot_path}")

    def _load(self) -> None:
        """Parse the snapshot into the name and id indexes."""
        self.load_count += 1
        try:
            raw = self.snapshot_path.read_text(encoding="utf-8")
            snapshot = RegistrySnapshot.model_validate(json.loads(raw))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load schema snapshot {self.snapshot_path}: {e}")
            self._clear()
            return

        by_name: Dict[str, TagSchema] = {}
        by_id: Dict[str, TagSchema] = {}
        for tag in snapshot.supertags:
            by_name[tag.name] = tag
            by_id[tag.id] = tag

        self._by_name = by_name
        self._by_id = by_id
        logger.info(
            f"Loaded {len(by_name)} tags from {self.snapshot_path} (version {snapshot.version})"
        )

    def _clear(self) -> None:
        self._by_name = None
        self._by_id = {}

    def _resolve(self, tag: TagSchema) -> ResolvedSchema:
        """
        Flatten own and inherited fields.

        Ancestors are visited level by level (own fields, then parents in
        `extends` order, then grandparents...). A visited set keyed by tag id
        stops cycles and diamonds from contributing twice. The first field
        seen with a given name wins.
        """
        fields: List[ResolvedField] = []
        seen_names: Set[str] = set()
        visited: Set[str] = set()
        queue = deque([(tag, 0)])

        while queue:
            current, depth = queue.popleft()
            if current.id in visited:
                continue
            visited.add(current.id)

            for definition in current.fields:
                if definition.name in seen_names:
                    continue
                seen_names.add(definition.name)
                fields.append(ResolvedField.from_definition(definition, current, depth))

            for parent_id in current.extends:
                parent = self._by_id.get(parent_id)
                if parent is None:
                    logger.debug(f"Tag '{current.name}' extends unknown tag id {parent_id}")
                    continue
                if parent.id not in visited:
                    queue.append((parent, depth + 1))

        return ResolvedSchema(
            id=tag.id,
            name=tag.name,
            fields=fields,
            normalized_name=tag.normalized_name,
            description=tag.description,
            color=tag.color,
            extends=list(tag.extends),
        )
