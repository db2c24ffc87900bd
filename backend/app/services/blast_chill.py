"""Blast-chill batch reconciliation and verdicts.

A blast-chill batch is never stored as a row of its own.  It is rebuilt
on every read from the START and END rows in `food_temperature_logs`
by `reconcile()`, a pure function over `ChillEvent` values, so the same
slice of rows always yields the same batches.

Pairing rules:
    - Rows are processed oldest first (START before END on a tie).
    - A START waits in a pending map keyed by batch_id, or by food name
      for legacy rows that have no batch_id.
    - An END consumes the pending START with its key; failing that, the
      pending START found by the other key.
    - A START whose key is already pending replaces it; the replaced
      START is reported with status SUPERSEDED.
    - STARTs still pending at the end are open (IN_PROGRESS).
    - ENDs with no START are reported with empty start fields.

The verdict (`compute_verdict`) is decided once, when the END is
written, and persisted in the END row's `status`.  Reconciliation
reports that stored status and never re-scores old batches.
"""

from __future__ import annotations

import logging
import math
import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime

from app.models.tenant.food_temperature_log import BlastEvent, FoodTempStatus
from app.models.tenant.property_settings import (
    DEFAULT_BLAST_CHILL_MAX_MINUTES,
    DEFAULT_BLAST_CHILL_TARGET_TENTH_C,
)

logger = logging.getLogger(__name__)

# ── Legacy note tags ─────────────────────────────────────────
BLAST_START_TAG = "[BLAST_CHILL_START]"
BLAST_END_TAG = "[BLAST_CHILL_END]"
BLAST_TAG_PREFIX = "[BLAST_CHILL_"

_BATCH_TAG_RE = re.compile(r"\[BC:([^\]]+)\]")
_BLAST_TAGS_RE = re.compile(r"\[BLAST_CHILL_(?:START|END)\]\s*|\[BC:[^\]]+\]\s*")
_MINUTES_NOTE_RE = re.compile(r"\(mins=-?\d+\)\s*")

# ── Derived batch statuses ───────────────────────────────────
IN_PROGRESS = "IN_PROGRESS"
SUPERSEDED = "SUPERSEDED"

_BATCH_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_batch_id() -> str:
    """Fresh correlation token, e.g. ``bc_k3x9a0qz``."""
    return "bc_" + "".join(secrets.choice(_BATCH_ID_ALPHABET) for _ in range(8))


# ── Note parsing ─────────────────────────────────────────────

def parse_blast_event(notes: str | None) -> BlastEvent | None:
    if not notes:
        return None
    if BLAST_START_TAG in notes:
        return BlastEvent.START
    if BLAST_END_TAG in notes:
        return BlastEvent.END
    return None


def parse_batch_id(notes: str | None) -> str | None:
    if not notes:
        return None
    match = _BATCH_TAG_RE.search(notes)
    return match.group(1) if match else None


def strip_blast_tags(notes: str | None) -> str | None:
    """Remove START/END/BC tags, leaving the human part of the note."""
    if not notes:
        return None
    return _BLAST_TAGS_RE.sub("", notes).strip() or None


def clean_notes(notes: str | None) -> str | None:
    """Display form of a note: tags and the minutes annotation removed."""
    stripped = strip_blast_tags(notes)
    if not stripped:
        return None
    return _MINUTES_NOTE_RE.sub("", stripped).strip() or None


def minutes_annotation(notes: str | None, minutes: int) -> str:
    return f"{notes or ''} (mins={minutes})".strip()


# ── Verdict ──────────────────────────────────────────────────

def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def elapsed_minutes(start_at: datetime, end_at: datetime) -> int:
    """Whole minutes between two timestamps, halves rounded up."""
    return _round_half_up((end_at - start_at).total_seconds() / 60)


@dataclass(frozen=True)
class ChillLimits:
    target_tenth_c: int = DEFAULT_BLAST_CHILL_TARGET_TENTH_C
    max_minutes: int = DEFAULT_BLAST_CHILL_MAX_MINUTES

    @classmethod
    def from_settings(cls, settings) -> ChillLimits:
        if settings is None:
            return cls()
        return cls(
            target_tenth_c=settings.blast_chill_target_tenth_c,
            max_minutes=settings.blast_chill_max_minutes,
        )


def compute_verdict(end_temp_c: float, minutes: int, limits: ChillLimits) -> FoodTempStatus:
    """OK only if the food reached target temperature within the time limit.

    Temperatures are compared in tenths of a degree.  Negative elapsed
    time (END before START) fails.
    """
    temp_ok = _round_half_up(end_temp_c * 10) <= limits.target_tenth_c
    time_ok = 0 <= minutes <= limits.max_minutes
    return FoodTempStatus.OK if temp_ok and time_ok else FoodTempStatus.OUT_OF_RANGE


# ── Events & batches ─────────────────────────────────────────

@dataclass(frozen=True)
class ChillEvent:
    """One blast-chill row: the START or END side of a batch."""
    kind: BlastEvent
    record_id: str
    food_name: str
    logged_at: datetime
    temp_c: float | None = None
    batch_id: str | None = None
    status: str | None = None
    notes: str | None = None
    user_id: str | None = None

    @classmethod
    def from_log(cls, log) -> ChillEvent | None:
        """Build from a FoodTemperatureLog row; None for standard readings.

        Columns win; legacy rows fall back to their note tags.
        """
        kind = log.blast_event or parse_blast_event(log.notes)
        if kind is None:
            return None
        return cls(
            kind=BlastEvent(kind),
            record_id=log.id,
            food_name=log.food_name,
            logged_at=log.logged_at,
            temp_c=log.temp_c,
            batch_id=log.batch_id or parse_batch_id(log.notes),
            status=log.status,
            notes=clean_notes(log.notes),
            user_id=log.created_by_user_id,
        )

    @property
    def sort_key(self) -> tuple:
        return (self.logged_at, 0 if self.kind == BlastEvent.START else 1, self.record_id)


@dataclass
class ChillBatch:
    key: str
    food_name: str
    status: str
    batch_id: str | None = None
    start_id: str | None = None
    start_at: datetime | None = None
    start_temp_c: float | None = None
    start_by_user_id: str | None = None
    end_id: str | None = None
    end_at: datetime | None = None
    end_temp_c: float | None = None
    end_by_user_id: str | None = None
    minutes: int | None = None
    notes: str | None = None

    @property
    def legacy(self) -> bool:
        """Paired by food name only (no batch id on either side)."""
        return self.batch_id is None

    @property
    def has_start(self) -> bool:
        return self.start_at is not None

    @property
    def is_open(self) -> bool:
        return self.status == IN_PROGRESS

    @property
    def sort_at(self) -> datetime:
        return self.end_at or self.start_at

    @property
    def user_ids(self) -> set[str]:
        return {u for u in (self.start_by_user_id, self.end_by_user_id) if u}


def _start_fields(start: ChillEvent) -> dict:
    return {
        "start_id": start.record_id,
        "start_at": start.logged_at,
        "start_temp_c": start.temp_c,
        "start_by_user_id": start.user_id,
    }


def _pending_batch(start: ChillEvent, status: str, suffix: str) -> ChillBatch:
    key = ":".join(p for p in (start.food_name, start.batch_id, start.record_id, suffix) if p)
    return ChillBatch(
        key=key,
        food_name=start.food_name,
        status=status,
        batch_id=start.batch_id,
        notes=start.notes,
        **_start_fields(start),
    )


def _closed_batch(start: ChillEvent | None, end: ChillEvent) -> ChillBatch:
    batch_id = end.batch_id or (start.batch_id if start else None)
    minutes = None
    if start is not None:
        if end.logged_at >= start.logged_at:
            minutes = elapsed_minutes(start.logged_at, end.logged_at)
        else:
            logger.warning(
                f"Blast chill END {end.record_id} logged before its START {start.record_id}"
            )

    batch = ChillBatch(
        key=":".join(p for p in (end.food_name, batch_id, end.record_id) if p),
        food_name=end.food_name,
        status=end.status or FoodTempStatus.OK.value,
        batch_id=batch_id,
        end_id=end.record_id,
        end_at=end.logged_at,
        end_temp_c=end.temp_c,
        end_by_user_id=end.user_id,
        minutes=minutes,
        notes=end.notes,
    )
    if start is not None:
        for name, value in _start_fields(start).items():
            setattr(batch, name, value)
    return batch


def _take_newest_named(pending: dict[str, ChillEvent], food_name: str) -> ChillEvent | None:
    candidates = [s for s in pending.values() if s.food_name == food_name]
    if not candidates:
        return None
    newest = max(candidates, key=lambda s: s.sort_key)
    del pending[newest.batch_id]
    return newest


def reconcile(events) -> list[ChillBatch]:
    """Pair START/END events into batches, newest first.

    Total over well-formed input: every event ends up in exactly one
    returned batch.
    """
    by_batch: dict[str, ChillEvent] = {}
    by_food: dict[str, ChillEvent] = {}
    batches: list[ChillBatch] = []

    for event in sorted(events, key=lambda e: e.sort_key):
        if event.kind == BlastEvent.START:
            pending, key = (
                (by_batch, event.batch_id) if event.batch_id else (by_food, event.food_name)
            )
            replaced = pending.get(key)
            if replaced is not None:
                batches.append(_pending_batch(replaced, SUPERSEDED, "superseded"))
            pending[key] = event
            continue

        if event.batch_id:
            start = by_batch.pop(event.batch_id, None) or by_food.pop(event.food_name, None)
        else:
            start = by_food.pop(event.food_name, None) or _take_newest_named(
                by_batch, event.food_name
            )
        batches.append(_closed_batch(start, event))

    for start in list(by_batch.values()) + list(by_food.values()):
        batches.append(_pending_batch(start, IN_PROGRESS, "open"))

    batches.sort(key=lambda b: (b.sort_at, b.key), reverse=True)
    return batches
