"""
Usage ledger.

Append-only log of image requests with aggregate, windowed and
per-model statistics. Tracking is best-effort: storage failures are
logged and never propagated to the caller.
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from ..core.pricing import calculate_cost
from .errors import StorageError
from .json_file import JsonArrayFile
from .models import (
    PROMPT_PREVIEW_LENGTH,
    ExportRow,
    ModelStats,
    Operation,
    SessionStats,
    UsageEvent,
    UsageRecord,
    UsageStats,
)

logger = logging.getLogger(__name__)

EXPORT_DATETIME_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


class UsageLedger:
    """File-backed, append-only ledger of usage records.

    Aggregates are always derived by scanning the full log, never
    maintained incrementally.
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Callable[[], datetime] = datetime.now
    ):
        """Initialize the ledger, creating an empty file if none exists.

        Args:
            path: Location of the usage JSON file
            clock: Source of timestamps and of the session date
        """
        self.file = JsonArrayFile(path)
        self._clock = clock
        try:
            self.file.ensure_exists()
        except StorageError as e:
            logger.warning("Usage ledger unavailable: %s", e)

    @property
    def path(self) -> Path:
        return self.file.path

    def track(self, event: UsageEvent) -> Optional[str]:
        """Append one record describing a request and its outcome.

        Failed events always cost 0. When a successful event carries no
        cost, it is priced with calculate_cost.

        Args:
            event: Request outcome

        Returns:
            Id of the new record, or None if it could not be stored
        """
        try:
            record = self._build_record(event)
        except (TypeError, ValueError):
            logger.exception("Discarding malformed usage event for model %s", event.model)
            return None

        try:
            with self.file.modify() as items:
                items.append(record.to_dict())
        except StorageError:
            logger.exception("Failed to track usage for model %s", event.model)
            return None
        return record.id

    def _build_record(self, event: UsageEvent) -> UsageRecord:
        if not event.success:
            cost = 0
        elif event.cost is None:
            cost = calculate_cost(event.model, event.size, event.quality, event.n)
        else:
            cost = event.cost

        return UsageRecord(
            id=uuid.uuid4().hex,
            timestamp=self._clock().isoformat(timespec="milliseconds"),
            model=event.model,
            operation=_operation_value(event.operation),
            size=event.size,
            quality=event.quality or None,
            style=event.style or None,
            n=event.n or 1,
            cost=cost,
            prompt_preview=event.prompt[:PROMPT_PREVIEW_LENGTH] if event.prompt else None,
            preset_name=event.preset_name or None,
            success=event.success,
            error_message=None if event.success else event.error_message,
        )

    def _load(self) -> List[UsageRecord]:
        """Read every record, degrading to an empty ledger on storage failures."""
        try:
            items = self.file.read()
        except StorageError as e:
            logger.warning("Error loading usage data, treating as empty: %s", e)
            return []

        records = []
        for item in items:
            if not isinstance(item, dict):
                logger.warning("Skipping malformed usage entry in %s", self.path)
                continue
            records.append(UsageRecord.from_dict(item))
        return records

    @staticmethod
    def _in_window(
        record: UsageRecord,
        start: Optional[str],
        end: Optional[str]
    ) -> bool:
        # ISO-8601 strings sort lexically
        if start and record.timestamp < start:
            return False
        if end and record.timestamp > end:
            return False
        return True

    def stats(self, start: Optional[str] = None, end: Optional[str] = None) -> UsageStats:
        """Aggregate successful records, optionally within inclusive bounds.

        Args:
            start: Earliest ISO-8601 timestamp to include
            end: Latest ISO-8601 timestamp to include

        Returns:
            UsageStats for the window
        """
        successful = [
            r for r in self._load()
            if r.success and self._in_window(r, start, end)
        ]

        total_images = len(successful)
        total_cost = sum(r.cost for r in successful)
        return UsageStats(
            total_images=total_images,
            total_generated=sum(r.n for r in successful),
            total_cost=total_cost,
            avg_cost=total_cost / total_images if total_images else 0,
        )

    def stats_by_model(self) -> List[ModelStats]:
        """Aggregate successful records per model, in first-seen order."""
        by_model: Dict[Optional[str], Dict[str, float]] = {}
        for record in self._load():
            if not record.success:
                continue
            totals = by_model.setdefault(
                record.model,
                {"count": 0, "images_generated": 0, "total_cost": 0}
            )
            totals["count"] += 1
            totals["images_generated"] += record.n
            totals["total_cost"] += record.cost

        return [
            ModelStats(
                model=model,
                count=totals["count"],
                images_generated=totals["images_generated"],
                total_cost=totals["total_cost"],
                avg_cost=totals["total_cost"] / totals["count"] if totals["count"] else 0,
            )
            for model, totals in by_model.items()
        ]

    def recent(self, limit: int = 50) -> List[UsageRecord]:
        """Return the newest records first, successes and failures alike."""
        records = sorted(self._load(), key=lambda r: r.timestamp, reverse=True)
        return records[:limit]

    def session_stats(self) -> SessionStats:
        """Aggregate today's successful records, by local calendar date."""
        today = self._clock().date().isoformat()
        todays = [
            r for r in self._load()
            if r.success and r.timestamp[:10] == today
        ]
        return SessionStats(
            total_requests=len(todays),
            images_generated=sum(r.n for r in todays),
            total_cost=sum(r.cost for r in todays),
        )

    def export_rows(
        self,
        start: Optional[str] = None,
        end: Optional[str] = None,
        limit: int = 1000
    ) -> List[ExportRow]:
        """Flatten records for tabular export, newest first.

        Args:
            start: Earliest ISO-8601 timestamp to include
            end: Latest ISO-8601 timestamp to include
            limit: Maximum number of rows

        Returns:
            Export rows with human-formatted dates and Yes/No outcomes
        """
        records = [r for r in self._load() if self._in_window(r, start, end)]
        records.sort(key=lambda r: r.timestamp, reverse=True)

        return [
            ExportRow(
                date_time=_format_timestamp(r.timestamp),
                model=r.model,
                size=r.size,
                quality=r.quality,
                num_images=r.n,
                cost=r.cost,
                prompt_preview=r.prompt_preview,
                preset_name=r.preset_name,
                success="Yes" if r.success else "No",
            )
            for r in records[:limit]
        ]


def _operation_value(operation: Union[Operation, str, None]) -> Optional[str]:
    """Persisted form of an operation; unknown names are kept as given."""
    if operation is None:
        return None
    try:
        return Operation(operation).value
    except ValueError:
        logger.warning("Unknown usage operation %r, storing as given", operation)
        return str(operation)


def _format_timestamp(timestamp: str) -> str:
    """Render an ISO-8601 timestamp in local time; unparseable values pass through."""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.strftime(EXPORT_DATETIME_FORMAT)
