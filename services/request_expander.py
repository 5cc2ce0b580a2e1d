"""
과목 큐 → 백엔드 요청 페이로드 변환
"""
import logging

from models import ExpandedRequest

logger = logging.getLogger(__name__)


def expand_requests(subjects):
    """과목 x 섹션 x 주간 횟수 만큼 요청 레코드 생성

    duration 은 강의 1회당 슬롯 수 (총합 아님). 섹션이 하나도 없는 과목은
    section_id=None 인 레코드 1개로 보내 백엔드가 skipped slot 으로 보고하게 한다.
    """
    expanded = []
    for subject in subjects:
        base = dict(
            subject_name=subject.name,
            faculty_ids=tuple(subject.faculty_ids),
            duration=subject.slot_duration,
            frequency=subject.lectures_per_week,
        )
        if not subject.resolved_sections:
            logger.warning(f"섹션이 없는 과목, 미해결 요청으로 전송: {subject.name}")
            expanded.append(ExpandedRequest(section_id=None, **base))
            continue

        for section_id in subject.resolved_sections:
            for _ in range(subject.lectures_per_week):
                expanded.append(ExpandedRequest(section_id=section_id, **base))

    return expanded
