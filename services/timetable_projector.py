"""
생성된 시간표 → 섹션별 요일/시간 순 보기
"""
from config import Config

DAY_INDEX = {day.lower(): i for i, day in enumerate(Config.DAY_ORDER)}
UNKNOWN_DAY_INDEX = len(Config.DAY_ORDER)


def day_index(day):
    """월~일 0~6, 알 수 없거나 없는 요일은 맨 뒤"""
    if not day:
        return UNKNOWN_DAY_INDEX
    return DAY_INDEX.get(day.strip().lower(), UNKNOWN_DAY_INDEX)


class TimetableProjector:
    """입력 항목을 변경하지 않는 읽기 전용 투영"""

    def __init__(self, entries):
        self._entries = tuple(entries)

    def sections_present(self):
        """단일/합반 배치에 등장하는 모든 섹션명 (정렬)"""
        names = set()
        for entry in self._entries:
            names.update(n for n in entry.section_names if n)
        return sorted(names)

    def for_section(self, name):
        """해당 섹션이 포함된 항목을 (요일, 시작시간) 순으로 (안정 정렬)"""
        matched = [e for e in self._entries if e.includes_section(name)]
        return sorted(matched, key=lambda e: (day_index(e.day), e.start_time))
