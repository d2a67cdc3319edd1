"""
Data models for storage layer.

Defines presets, usage records, and the statistics derived from them.
"""

from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Dict, Optional, Union


DEFAULT_CATEGORY = "General"
PROMPT_PREVIEW_LENGTH = 200


class Operation(Enum):
    """Kinds of image requests that are tracked."""
    GENERATION = "generation"
    EDIT = "edit"
    VARIATION = "variation"


# Persisted key for each Preset attribute
_PRESET_KEYS = {
    "id": "id",
    "name": "name",
    "category": "category",
    "model": "model",
    "prompt": "prompt",
    "size": "size",
    "quality": "quality",
    "style": "style",
    "notes": "notes",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "usage_count": "usageCount",
    "last_used_at": "lastUsedAt",
}


@dataclass(frozen=True)
class Preset:
    """Named, reusable template of generation parameters."""
    id: str
    name: str
    model: str
    prompt: str
    created_at: str
    category: str = DEFAULT_CATEGORY
    size: Optional[str] = None
    quality: Optional[str] = None
    style: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[str] = None
    usage_count: int = 0
    last_used_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the stable on-disk key names, omitting unset optionals."""
        data = {}
        for attr, key in _PRESET_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        """Build a preset from its on-disk representation."""
        values = {attr: data.get(key) for attr, key in _PRESET_KEYS.items()}
        values["category"] = values["category"] or DEFAULT_CATEGORY
        values["usage_count"] = int(values["usage_count"] or 0)
        return cls(**values)


@dataclass(frozen=True)
class UsageEvent:
    """Outcome of one image request, as handed to the ledger."""
    model: Optional[str]
    operation: Union[Operation, str, None] = Operation.GENERATION
    size: Optional[str] = None
    quality: Optional[str] = None
    style: Optional[str] = None
    n: int = 1
    cost: Optional[float] = None
    prompt: Optional[str] = None
    preset_name: Optional[str] = None
    success: bool = True
    error_message: Optional[str] = None


@dataclass(frozen=True)
class UsageRecord:
    """Immutable ledger entry for one tracked request.

    Records are append-only: once written they are never edited or removed.
    """
    id: str
    timestamp: str
    model: Optional[str]
    operation: Optional[str]
    size: Optional[str]
    quality: Optional[str]
    style: Optional[str]
    n: int
    cost: float
    prompt_preview: Optional[str]
    preset_name: Optional[str]
    success: bool
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageRecord":
        """Build a record, tolerating missing keys and the 1/0 success encoding."""
        return cls(
            id=str(data.get("id", "")),
            timestamp=str(data.get("timestamp", "")),
            model=data.get("model"),
            operation=data.get("operation"),
            size=data.get("size"),
            quality=data.get("quality"),
            style=data.get("style"),
            n=data.get("n") or 1,
            cost=data.get("cost") or 0,
            prompt_preview=data.get("prompt_preview"),
            preset_name=data.get("preset_name"),
            success=bool(data.get("success")),
            error_message=data.get("error_message"),
        )


@dataclass(frozen=True)
class UsageStats:
    """Aggregate statistics over successful records."""
    total_images: int
    total_generated: int
    total_cost: float
    avg_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModelStats:
    """Aggregate statistics for a single model."""
    model: Optional[str]
    count: int
    images_generated: int
    total_cost: float
    avg_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SessionStats:
    """Statistics for the current calendar day."""
    total_requests: int
    images_generated: int
    total_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ExportRow:
    """Flat, human-formatted view of a record for tabular export."""
    date_time: str
    model: Optional[str]
    size: Optional[str]
    quality: Optional[str]
    num_images: int
    cost: float
    prompt_preview: Optional[str]
    preset_name: Optional[str]
    success: str

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
