"""
과목 입력 폼 검증 → SubjectRequest 후보 생성
"""
from config import Config
from models import SectionScope, SubjectRequest
from services.section_scope import resolve_sections
from utils.errors import ValidationError

REQUIRED_FIELDS_MESSAGE = 'Please fill in all required fields and select at least one faculty.'
SECTION_REQUIRED_MESSAGE = 'Please select at least one section'
CATALOG_NOT_READY_MESSAGE = 'Reference data has not been loaded yet. Please refresh the page.'


def _sanitize_name(name, max_len=Config.MAX_SUBJECT_NAME_LENGTH):
    if name is None:
        return ''
    if not isinstance(name, str):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    return name.strip()[:max_len]


def _as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [v for v in value if v not in (None, '')]
    return [value] if value != '' else []


def _positive_int(value, field_name, upper):
    # JSON true/false 는 int 로 변환되지만 숫자 입력이 아님
    if isinstance(value, bool):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field_name} must be a whole number.")
    if number < 1 or number > upper:
        raise ValidationError(f"{field_name} must be between 1 and {upper}.")
    return number


def build_subject(data, catalog, catalog_ready=True):
    """폼/JSON 입력을 검증하고 범위를 적용한 SubjectRequest 반환 (id 미할당)

    data 키: name, faculty, duration, lecturesPerWeek, sectionScope, sections
    """
    if not catalog_ready:
        raise ValidationError(CATALOG_NOT_READY_MESSAGE)

    name = _sanitize_name(data.get('name'))
    faculty_raw = _as_list(data.get('faculty'))
    if not name or not faculty_raw:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    duration = _positive_int(data.get('duration'), 'Duration', Config.MAX_SLOT_DURATION)
    lectures = _positive_int(data.get('lecturesPerWeek'), 'Lectures per week', Config.MAX_LECTURES_PER_WEEK)

    faculty_ids = []
    for raw in faculty_raw:
        fid = catalog.find_faculty_id(raw)
        if fid is None:
            raise ValidationError(f"Unknown faculty: {raw}")
        if fid not in faculty_ids:
            faculty_ids.append(fid)

    try:
        scope = SectionScope(data.get('sectionScope') or SectionScope.ALL.value)
    except (ValueError, TypeError):
        raise ValidationError(f"Unknown section scope: {data.get('sectionScope')}")

    selected = []
    if scope.requires_selection:
        selected_raw = _as_list(data.get('sections'))
        if not selected_raw:
            raise ValidationError(SECTION_REQUIRED_MESSAGE)
        for raw in selected_raw:
            sid = catalog.find_section_id(raw)
            if sid is None:
                raise ValidationError(f"Unknown section: {raw}")
            selected.append(sid)

    return SubjectRequest(
        name=name,
        faculty_ids=tuple(faculty_ids),
        slot_duration=duration,
        lectures_per_week=lectures,
        section_scope=scope,
        resolved_sections=resolve_sections(scope, selected, catalog.sections),
    )
