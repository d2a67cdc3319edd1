"""
Preset persistence.

CRUD over named prompt templates, grouped by category, backed by a single
JSON array file.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ..core.default_presets import DEFAULT_PRESETS
from .errors import DuplicateError, NotFoundError, ValidationError
from .json_file import JsonArrayFile
from .models import DEFAULT_CATEGORY, Preset

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "model", "prompt")
EDITABLE_FIELDS = ("name", "category", "model", "prompt", "size", "quality", "style", "notes")

# Keys managed by the store; never taken from caller payloads
PROTECTED_KEYS = frozenset({
    "id",
    "createdAt", "created_at",
    "updatedAt", "updated_at",
    "usageCount", "usage_count",
    "lastUsedAt", "last_used_at",
})


def validate_preset_fields(data: Mapping[str, Any]) -> None:
    """Check that the required preset fields are present and non-empty.

    Args:
        data: Preset payload from the caller

    Raises:
        ValidationError: Naming every missing field
    """
    missing = [
        name for name in REQUIRED_FIELDS
        if not isinstance(data.get(name), str) or not data[name].strip()
    ]
    if missing:
        raise ValidationError(
            f"Missing required preset fields: {', '.join(missing)}",
            fields=missing
        )


def _editable_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop store-managed keys and reject anything that is not a preset field."""
    values = {}
    unknown = []
    for key, value in data.items():
        if key in PROTECTED_KEYS:
            continue
        if key not in EDITABLE_FIELDS:
            unknown.append(key)
            continue
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"Preset field '{key}' must be a string", fields=[key])
        values[key] = value

    if unknown:
        raise ValidationError(
            f"Unknown preset fields: {', '.join(sorted(unknown))}",
            fields=sorted(unknown)
        )
    return values


class PresetStore:
    """File-backed collection of presets.

    Every mutation reads the whole collection, applies the change, and
    rewrites the whole collection before returning. Storage failures
    propagate as StorageError.
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Callable[[], datetime] = datetime.now
    ):
        """Initialize the store, creating an empty file if none exists.

        Args:
            path: Location of the presets JSON file
            clock: Source of timestamps
        """
        self.file = JsonArrayFile(path)
        self._clock = clock
        self.file.ensure_exists()

    @property
    def path(self) -> Path:
        return self.file.path

    def _now(self) -> str:
        return self._clock().isoformat(timespec="milliseconds")

    def list_all(self) -> List[Preset]:
        """Return every stored preset, in stored order."""
        return [Preset.from_dict(item) for item in self.file.read()]

    def list_categories(self) -> List[str]:
        """Return the sorted unique categories."""
        return sorted({preset.category for preset in self.list_all()})

    def list_by_category(self, category: str) -> List[Preset]:
        """Return presets whose category matches exactly."""
        return [preset for preset in self.list_all() if preset.category == category]

    def get(self, preset_id: str) -> Preset:
        """Look up a preset by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        for preset in self.list_all():
            if preset.id == preset_id:
                return preset
        raise NotFoundError(preset_id)

    def create(self, data: Mapping[str, Any]) -> Preset:
        """Save a new preset.

        Args:
            data: Preset fields; id and timestamps are assigned here

        Returns:
            The stored preset

        Raises:
            ValidationError: If required fields are missing
            DuplicateError: If (name, category) is already taken
        """
        with self.file.modify() as items:
            preset = self._build(data, items)
            items.append(preset.to_dict())

        logger.info("Created preset %s (%s / %s)", preset.id, preset.category, preset.name)
        return preset

    def _build(self, data: Mapping[str, Any], items: List[Dict[str, Any]]) -> Preset:
        """Validate a payload against the current items and return the new preset."""
        validate_preset_fields(data)
        values = _editable_values(data)
        values["category"] = values.get("category") or DEFAULT_CATEGORY

        self._check_unique(items, values["name"], values["category"])

        return Preset(
            id=uuid.uuid4().hex,
            created_at=self._now(),
            usage_count=0,
            **values
        )

    def update(self, preset_id: str, updates: Mapping[str, Any]) -> Preset:
        """Apply a shallow field update to an existing preset.

        The id and creation timestamp are always kept, whatever the payload says.

        Raises:
            NotFoundError: If the id is unknown
            ValidationError: If a required field is emptied or a field is unknown
            DuplicateError: If the new (name, category) is already taken
        """
        changes = _editable_values(updates)

        with self.file.modify() as items:
            index = self._index_of(items, preset_id)
            current = Preset.from_dict(items[index])

            merged = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            merged.update(changes)
            merged["category"] = merged.get("category") or DEFAULT_CATEGORY
            validate_preset_fields(merged)

            if (merged["name"], merged["category"]) != (current.name, current.category):
                others = items[:index] + items[index + 1:]
                self._check_unique(others, merged["name"], merged["category"])

            updated = replace(current, updated_at=self._now(), **merged)
            items[index] = updated.to_dict()

        logger.info("Updated preset %s", preset_id)
        return updated

    def delete(self, preset_id: str) -> None:
        """Remove a preset.

        Raises:
            NotFoundError: If the id is unknown
        """
        with self.file.modify() as items:
            index = self._index_of(items, preset_id)
            del items[index]

        logger.info("Deleted preset %s", preset_id)

    def increment_usage(self, preset_id: str) -> Optional[Preset]:
        """Bump the usage counter and last-used timestamp.

        Unknown ids are ignored and nothing is written.

        Returns:
            The updated preset, or None if the id is unknown
        """
        with self.file.modify() as items:
            try:
                index = self._index_of(items, preset_id)
            except NotFoundError:
                logger.debug("Usage increment for unknown preset %s ignored", preset_id)
                return None
            current = Preset.from_dict(items[index])
            used = replace(
                current,
                usage_count=current.usage_count + 1,
                last_used_at=self._now()
            )
            items[index] = used.to_dict()
        return used

    def seed_defaults_if_empty(
        self,
        defaults: Sequence[Mapping[str, Any]] = DEFAULT_PRESETS
    ) -> int:
        """Insert the default catalog into an empty store.

        Entries that would break (name, category) uniqueness are skipped.

        Returns:
            Number of presets inserted
        """
        inserted = 0
        with self.file.modify() as items:
            if items:
                return 0
            for data in defaults:
                try:
                    preset = self._build(data, items)
                except DuplicateError as e:
                    logger.debug("Skipping default preset: %s", e)
                    continue
                items.append(preset.to_dict())
                inserted += 1

        logger.info("Seeded %d default presets into %s", inserted, self.path)
        return inserted

    @staticmethod
    def _index_of(items: List[Dict[str, Any]], preset_id: str) -> int:
        for index, item in enumerate(items):
            if item.get("id") == preset_id:
                return index
        raise NotFoundError(preset_id)

    @staticmethod
    def _check_unique(items: List[Dict[str, Any]], name: str, category: str) -> None:
        for item in items:
            if item.get("name") == name and (item.get("category") or DEFAULT_CATEGORY) == category:
                raise DuplicateError(name, category)
