from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
import logging
import re
from typing import Any, Iterable, Sequence

from app.services.schedule_records import ClassBlockRecord, OfficeBlockRecord, TermSnapshot
from app.services.time_intervals import TimeBlock, blocks_overlap, normalize_days

logger = logging.getLogger(__name__)

MISSING_ROOM_LABEL = "—"

_LABEL_SCHEDULE_PATTERN = re.compile(
    r"\((?P<days>[A-Za-z,]*) (?P<start>\d{2}:\d{2})-(?P<end>\d{2}:\d{2})(?:, Room: [^()]*)?\)$"
)


class ConflictKind(str, Enum):
    class_vs_class = "CLASS_VS_CLASS"
    office_vs_office = "OFFICE_VS_OFFICE"
    class_vs_office = "CLASS_VS_OFFICE"


class CandidateKind(str, Enum):
    class_block = "CLASS"
    office_block = "OFFICE"


class ConflictCategory(str, Enum):
    room = "room"
    instructor_classes = "instructor_classes"
    instructor_office_hours = "instructor_office_hours"


_CLASS_CANDIDATE_PREFIXES = {
    ConflictCategory.room: "Room conflict with: ",
    ConflictCategory.instructor_classes: "Instructor conflict with classes: ",
    ConflictCategory.instructor_office_hours: "Instructor conflict with office hours: ",
}

_OFFICE_CANDIDATE_PREFIXES = {
    ConflictCategory.instructor_office_hours: "Conflicts with existing office hours: ",
    ConflictCategory.instructor_classes: "Conflicts with class meeting blocks: ",
}


def format_class_label(block: ClassBlockRecord) -> str:
    course = block.course_code or "COURSE"
    section = block.section_code or "SEC"
    room = block.room_name or MISSING_ROOM_LABEL
    return f"{course} {section} ({block.time.days_label} {block.time.time_label}, Room: {room})"


def format_office_label(block: OfficeBlockRecord) -> str:
    return f"Office Hours ({block.time.days_label} {block.time.time_label})"


def format_block_label(block: ClassBlockRecord | OfficeBlockRecord) -> str:
    if isinstance(block, ClassBlockRecord):
        return format_class_label(block)
    return format_office_label(block)


def parse_label_schedule(label: str) -> tuple[tuple[str, ...], str, str]:
    """Recover (days, start, end) from a class or office-hours label."""
    match = _LABEL_SCHEDULE_PATTERN.search(label.strip())
    if match is None:
        raise ValueError(f"Not a schedule label: {label!r}")
    return normalize_days(match.group("days")), match.group("start"), match.group("end")


@dataclass(frozen=True)
class InstructorConflicts:
    class_blocks: list[ClassBlockRecord] = field(default_factory=list)
    office_blocks: list[OfficeBlockRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.class_blocks and not self.office_blocks


@dataclass(frozen=True)
class RoomConflictPair:
    room_id: str
    room_name: str | None
    a: ClassBlockRecord
    b: ClassBlockRecord


@dataclass(frozen=True)
class InstructorConflictPair:
    instructor_id: str
    kind: ConflictKind
    a: ClassBlockRecord | OfficeBlockRecord
    b: ClassBlockRecord | OfficeBlockRecord

    @property
    def a_label(self) -> str:
        return format_block_label(self.a)

    @property
    def b_label(self) -> str:
        return format_block_label(self.b)


@dataclass(frozen=True)
class CandidateCheck:
    kind: CandidateKind
    conflicts: dict[ConflictCategory, list[str]]

    @property
    def ok(self) -> bool:
        return not any(self.conflicts.values())

    @property
    def message(self) -> str:
        prefixes = _CLASS_CANDIDATE_PREFIXES if self.kind == CandidateKind.class_block else _OFFICE_CANDIDATE_PREFIXES
        parts = [
            prefixes[category] + "; ".join(labels)
            for category, labels in self.conflicts.items()
            if labels
        ]
        return " | ".join(parts)

    def as_dict(self) -> dict[str, list[str]]:
        return {category.value: list(labels) for category, labels in self.conflicts.items()}


class ScheduleConflictService:
    """Detects room and instructor collisions inside one term.

    The service only reads the blocks it is given; callers decide whether a
    non-empty result blocks a write or is merely reported.
    """

    def __init__(
        self,
        *,
        buffer_minutes: int,
        class_blocks: Iterable[ClassBlockRecord],
        office_blocks: Iterable[OfficeBlockRecord],
    ):
        self.buffer_minutes = max(0, int(buffer_minutes or 0))
        self.class_blocks: list[ClassBlockRecord] = list(class_blocks)
        self.office_blocks: list[OfficeBlockRecord] = list(office_blocks)

    @classmethod
    def for_snapshot(cls, snapshot: TermSnapshot, buffer_minutes: int | None = None) -> "ScheduleConflictService":
        buffer = snapshot.term.buffer_minutes if buffer_minutes is None else buffer_minutes
        return cls(
            buffer_minutes=buffer,
            class_blocks=snapshot.class_blocks,
            office_blocks=snapshot.office_blocks,
        )

    def _collides(self, candidate: TimeBlock, existing: TimeBlock) -> bool:
        return blocks_overlap(candidate, existing, self.buffer_minutes)

    def room_conflicts(
        self,
        room_id: str | None,
        days: Any,
        starts_at: str,
        ends_at: str,
        exclude_block_id: str | None = None,
    ) -> list[ClassBlockRecord]:
        if not room_id:
            return []
        candidate = TimeBlock.build(days, starts_at, ends_at)
        return [
            block
            for block in self.class_blocks
            if block.occupies_room
            and block.room_id == room_id
            and block.id != exclude_block_id
            and self._collides(candidate, block.time)
        ]

    def _instructor_class_conflicts(
        self, instructor_id: str, candidate: TimeBlock, exclude_block_id: str | None
    ) -> list[ClassBlockRecord]:
        return [
            block
            for block in self.class_blocks
            if block.instructor_id == instructor_id
            and block.id != exclude_block_id
            and self._collides(candidate, block.time)
        ]

    def _instructor_office_conflicts(
        self, instructor_id: str, candidate: TimeBlock, exclude_block_id: str | None
    ) -> list[OfficeBlockRecord]:
        return [
            block
            for block in self.office_blocks
            if block.instructor_id == instructor_id
            and block.id != exclude_block_id
            and self._collides(candidate, block.time)
        ]

    def instructor_conflicts_for_class(
        self,
        instructor_id: str | None,
        days: Any,
        starts_at: str,
        ends_at: str,
        exclude_block_id: str | None = None,
    ) -> InstructorConflicts:
        if not instructor_id:
            return InstructorConflicts()
        candidate = TimeBlock.build(days, starts_at, ends_at)
        return InstructorConflicts(
            class_blocks=self._instructor_class_conflicts(instructor_id, candidate, exclude_block_id),
            office_blocks=self._instructor_office_conflicts(instructor_id, candidate, None),
        )

    def instructor_conflicts_for_office(
        self,
        instructor_id: str | None,
        days: Any,
        starts_at: str,
        ends_at: str,
        exclude_block_id: str | None = None,
    ) -> InstructorConflicts:
        if not instructor_id:
            return InstructorConflicts()
        candidate = TimeBlock.build(days, starts_at, ends_at)
        return InstructorConflicts(
            office_blocks=self._instructor_office_conflicts(instructor_id, candidate, exclude_block_id),
            class_blocks=self._instructor_class_conflicts(instructor_id, candidate, None),
        )

    def check_candidate_block(
        self,
        kind: CandidateKind,
        days: Any,
        starts_at: str,
        ends_at: str,
        *,
        room_id: str | None = None,
        instructor_id: str | None = None,
        exclude_block_id: str | None = None,
    ) -> CandidateCheck:
        conflicts: dict[ConflictCategory, list[str]] = {}
        if kind == CandidateKind.class_block:
            rooms = self.room_conflicts(room_id, days, starts_at, ends_at, exclude_block_id)
            instructor = self.instructor_conflicts_for_class(instructor_id, days, starts_at, ends_at, exclude_block_id)
            conflicts[ConflictCategory.room] = [format_class_label(block) for block in rooms]
            conflicts[ConflictCategory.instructor_classes] = [format_class_label(block) for block in instructor.class_blocks]
            conflicts[ConflictCategory.instructor_office_hours] = [
                format_office_label(block) for block in instructor.office_blocks
            ]
        else:
            instructor = self.instructor_conflicts_for_office(instructor_id, days, starts_at, ends_at, exclude_block_id)
            conflicts[ConflictCategory.instructor_office_hours] = [
                format_office_label(block) for block in instructor.office_blocks
            ]
            conflicts[ConflictCategory.instructor_classes] = [format_class_label(block) for block in instructor.class_blocks]

        result = CandidateCheck(kind=kind, conflicts=conflicts)
        logger.debug(
            "Candidate %s block %s %s-%s checked with buffer %d: %s",
            kind.value,
            ",".join(normalize_days(days)),
            starts_at,
            ends_at,
            self.buffer_minutes,
            "ok" if result.ok else result.message,
        )
        return result

    def _colliding_pairs(self, blocks: Sequence[Any]) -> list[tuple[Any, Any]]:
        # O(n^2) per group is fine at term scale (hundreds of blocks).
        pairs = []
        n = len(blocks)
        for i in range(n):
            for j in range(i + 1, n):
                if self._collides(blocks[i].time, blocks[j].time):
                    pairs.append((blocks[i], blocks[j]))
        return pairs

    def all_room_conflict_pairs(self) -> list[RoomConflictPair]:
        by_room: dict[str, list[ClassBlockRecord]] = defaultdict(list)
        for block in self.class_blocks:
            if block.occupies_room:
                by_room[block.room_id].append(block)

        conflicts: list[RoomConflictPair] = []
        for room_id, blocks in by_room.items():
            for a, b in self._colliding_pairs(blocks):
                conflicts.append(RoomConflictPair(room_id=room_id, room_name=a.room_name, a=a, b=b))
        return conflicts

    def all_instructor_conflict_pairs(self) -> list[InstructorConflictPair]:
        classes_by_instructor: dict[str, list[ClassBlockRecord]] = defaultdict(list)
        offices_by_instructor: dict[str, list[OfficeBlockRecord]] = defaultdict(list)
        for block in self.class_blocks:
            if block.instructor_id:
                classes_by_instructor[block.instructor_id].append(block)
        for block in self.office_blocks:
            offices_by_instructor[block.instructor_id].append(block)

        instructor_ids = list(dict.fromkeys([*classes_by_instructor, *offices_by_instructor]))

        conflicts: list[InstructorConflictPair] = []
        for instructor_id in instructor_ids:
            class_list = classes_by_instructor.get(instructor_id, [])
            office_list = offices_by_instructor.get(instructor_id, [])

            for a, b in self._colliding_pairs(class_list):
                conflicts.append(InstructorConflictPair(instructor_id, ConflictKind.class_vs_class, a, b))
            for a, b in self._colliding_pairs(office_list):
                conflicts.append(InstructorConflictPair(instructor_id, ConflictKind.office_vs_office, a, b))
            for class_block in class_list:
                for office_block in office_list:
                    if self._collides(class_block.time, office_block.time):
                        conflicts.append(
                            InstructorConflictPair(instructor_id, ConflictKind.class_vs_office, class_block, office_block)
                        )
        return conflicts
