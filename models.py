"""
시간표 빌더 - 데이터 모델
"""
import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple, Union

from utils.errors import NetworkError


# ===== 참조 데이터 (백엔드 카탈로그) =====

@dataclass(frozen=True)
class Faculty:
    id: Any
    name: str

    @classmethod
    def from_dict(cls, d):
        return cls(id=d.get('id'), name=d.get('name') or '')

    def to_dict(self):
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Section:
    id: Any
    name: str

    @classmethod
    def from_dict(cls, d):
        return cls(id=d.get('id'), name=d.get('name') or '')

    def to_dict(self):
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Room:
    id: Any
    label: str                 # roomNumber 우선, 없으면 name
    room_type: str = ""
    capacity: Optional[int] = None

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=d.get('id'),
            label=d.get('roomNumber') or d.get('name') or '',
            room_type=d.get('roomType') or '',
            capacity=d.get('capacity'),
        )

    def to_dict(self):
        return {"id": self.id, "roomNumber": self.label, "roomType": self.room_type, "capacity": self.capacity}


@dataclass(frozen=True)
class TimeSlot:
    id: Any
    day: str
    start_time: str
    end_time: str
    period: str = ""

    @classmethod
    def from_dict(cls, d):
        return cls(
            id=d.get('id'),
            day=d.get('day') or '',
            start_time=d.get('start_time') or d.get('startTime') or '',
            end_time=d.get('end_time') or d.get('endTime') or '',
            period=d.get('period') or '',
        )

    def to_dict(self):
        return {
            "id": self.id,
            "day": self.day,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "period": self.period,
        }


@dataclass(frozen=True)
class ReferenceCatalog:
    """참조 데이터 스냅샷 (fetch 할 때마다 통째로 교체)"""
    faculty: Tuple[Faculty, ...] = ()
    sections: Tuple[Section, ...] = ()
    rooms: Tuple[Room, ...] = ()
    time_slots: Tuple[TimeSlot, ...] = ()

    @classmethod
    def from_dict(cls, d):
        if not isinstance(d, dict):
            raise NetworkError("Reference data response is not a JSON object.")
        try:
            return cls(
                faculty=tuple(Faculty.from_dict(f) for f in d.get('faculty') or []),
                sections=tuple(Section.from_dict(s) for s in d.get('sections') or []),
                rooms=tuple(Room.from_dict(r) for r in d.get('rooms') or []),
                time_slots=tuple(TimeSlot.from_dict(t) for t in d.get('timeSlots') or d.get('timeslots') or []),
            )
        except AttributeError as e:
            raise NetworkError(f"Malformed reference data: {e}") from e

    def to_dict(self):
        return {
            "faculty": [f.to_dict() for f in self.faculty],
            "sections": [s.to_dict() for s in self.sections],
            "rooms": [r.to_dict() for r in self.rooms],
            "timeSlots": [t.to_dict() for t in self.time_slots],
        }

    def section_ids(self):
        return [s.id for s in self.sections]

    def find_section_id(self, raw):
        """폼 값(문자열)과 일치하는 섹션 id, 없으면 None"""
        for s in self.sections:
            if str(s.id) == str(raw):
                return s.id
        return None

    def find_faculty_id(self, raw):
        for f in self.faculty:
            if str(f.id) == str(raw):
                return f.id
        return None

    def section_name(self, section_id):
        for s in self.sections:
            if str(s.id) == str(section_id):
                return s.name
        return None

    def faculty_name(self, faculty_id):
        for f in self.faculty:
            if str(f.id) == str(faculty_id):
                return f.name
        return None


# ===== 과목 큐 =====

class SectionScope(enum.Enum):
    ALL = 'ALL'
    SPECIFIC = 'SPECIFIC'
    EXCLUDE = 'EXCLUDE'

    @property
    def requires_selection(self):
        return self is not SectionScope.ALL


@dataclass(frozen=True)
class SubjectRequest:
    """큐 항목 (resolved_sections 는 범위가 이미 적용된 중복 없는 섹션 id)"""
    name: str
    faculty_ids: Tuple[Any, ...]
    slot_duration: int
    lectures_per_week: int
    section_scope: SectionScope
    resolved_sections: Tuple[Any, ...]
    id: str = ""

    @property
    def total_slots(self):
        return self.slot_duration * self.lectures_per_week

    def with_id(self, subject_id):
        return replace(self, id=subject_id)

    def to_dict(self, catalog=None):
        d = {
            "id": self.id,
            "name": self.name,
            "facultyIds": list(self.faculty_ids),
            "slotDuration": self.slot_duration,
            "lecturesPerWeek": self.lectures_per_week,
            "totalSlots": self.total_slots,
            "sectionScope": self.section_scope.value,
            "sections": list(self.resolved_sections),
        }
        if catalog is not None:
            d["facultyNames"] = [n for n in (catalog.faculty_name(f) for f in self.faculty_ids) if n]
            d["sectionNames"] = [n for n in (catalog.section_name(s) for s in self.resolved_sections) if n]
        return d


@dataclass(frozen=True)
class ExpandedRequest:
    """백엔드로 보내는 단일 수업 요청 (section_id None = 섹션 미해결)"""
    subject_name: str
    faculty_ids: Tuple[Any, ...]
    duration: int
    frequency: int
    section_id: Any = None

    def to_dict(self):
        return {
            "subjectName": self.subject_name,
            "facultyIds": list(self.faculty_ids),
            "duration": self.duration,
            "frequency": self.frequency,
            "sectionId": self.section_id,
        }


# ===== 생성된 시간표 =====

@dataclass(frozen=True)
class SingleSection:
    name: str

    @property
    def names(self):
        return (self.name,)


@dataclass(frozen=True)
class SectionGroup:
    """여러 섹션 합반 수업"""
    names: Tuple[str, ...]


Placement = Union[SingleSection, SectionGroup]


def _name_of(obj):
    return obj.get('name') if isinstance(obj, dict) else None


def _placement_from_dict(d):
    group = d.get('sections')
    if isinstance(group, list) and group:
        return SectionGroup(tuple(n for n in (_name_of(s) for s in group) if n))
    single = _name_of(d.get('section'))
    if single:
        return SingleSection(single)
    return SectionGroup(())


@dataclass(frozen=True)
class TimetableEntry:
    subject_name: str
    faculty_name: str
    placement: Placement
    room: str = ""
    day: str = ""
    start_time: str = ""
    end_time: str = ""

    @classmethod
    def from_dict(cls, d):
        """백엔드 응답 항목을 수신 즉시 정규화"""
        room = d.get('room') if isinstance(d.get('room'), dict) else {}
        slot = d.get('timeslot') if isinstance(d.get('timeslot'), dict) else {}
        return cls(
            subject_name=d.get('subjectName') or '',
            faculty_name=_name_of(d.get('faculty')) or '',
            placement=_placement_from_dict(d),
            room=room.get('roomNumber') or room.get('name') or '',
            day=slot.get('day') or '',
            start_time=slot.get('start_time') or slot.get('startTime') or '',
            end_time=slot.get('end_time') or slot.get('endTime') or '',
        )

    @property
    def section_names(self):
        return self.placement.names

    @property
    def is_group(self):
        return isinstance(self.placement, SectionGroup)

    def includes_section(self, name):
        return name in self.placement.names

    def to_dict(self):
        return {
            "subjectName": self.subject_name,
            "faculty": self.faculty_name,
            "sections": list(self.section_names),
            "group": self.is_group,
            "room": self.room,
            "day": self.day,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


# 건너뛴 슬롯에서 섹션/교수 정보가 들어오는 키
_SKIPPED_DETAIL_KEYS = ('section', 'sectionId', 'section1', 'section2', 'faculty', 'facultyId', 'facultyIds')


@dataclass(frozen=True)
class SkippedSlot:
    """백엔드가 배치하지 못한 수업"""
    subject: str
    reason: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d):
        if not isinstance(d, dict):
            return cls(subject='', reason=str(d))
        details = {k: v for k, v in d.items() if k not in ('subject', 'reason')}
        return cls(subject=d.get('subject') or '', reason=d.get('reason') or '', details=details)

    def describe(self):
        parts = [f"{k}: {self.details[k]}" for k in _SKIPPED_DETAIL_KEYS if self.details.get(k) is not None]
        where = f" ({', '.join(parts)})" if parts else ""
        reason = f" - {self.reason}" if self.reason else ""
        return f"{self.subject or 'Unknown subject'}{where}{reason}"

    def to_dict(self):
        return {"subject": self.subject, "reason": self.reason, **self.details}


@dataclass(frozen=True)
class GenerationResult:
    timetable: Tuple[TimetableEntry, ...] = ()
    skipped_slots: Tuple[SkippedSlot, ...] = ()

    @classmethod
    def from_response(cls, payload):
        if not isinstance(payload, dict) or not isinstance(payload.get('timetable'), list):
            raise NetworkError("Scheduler returned a malformed timetable response.")
        entries = payload['timetable']
        if not all(isinstance(e, dict) for e in entries):
            raise NetworkError("Scheduler returned a malformed timetable entry.")
        skipped = payload.get('skippedSlots') or []
        if not isinstance(skipped, list):
            skipped = [skipped]
        return cls(
            timetable=tuple(TimetableEntry.from_dict(e) for e in entries),
            skipped_slots=tuple(SkippedSlot.from_dict(s) for s in skipped),
        )

    def to_dict(self):
        return {
            "timetable": [e.to_dict() for e in self.timetable],
            "skippedSlots": [s.to_dict() for s in self.skipped_slots],
        }
