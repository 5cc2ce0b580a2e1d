"""
과목 큐 - 이름 + 정렬된 섹션 집합 기준 병합/추가
"""
import enum
import json
import uuid
import logging
import threading
from datetime import datetime

logger = logging.getLogger(__name__)


class UpsertOutcome(enum.Enum):
    INSERTED = 'inserted'
    UPDATED = 'updated'


def _generate_subject_id():
    """고유 과목 ID 생성"""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    unique_id = str(uuid.uuid4())[:8]
    return f"subject_{timestamp}_{unique_id}"


def _section_sort_key(section_id):
    # 정수 id 는 숫자 순, 그 외는 문자열 순
    if isinstance(section_id, int) and not isinstance(section_id, bool):
        return (0, section_id, '')
    return (1, 0, str(section_id))


def identity_key(name, resolved_sections):
    """같은 과목 판별 키 (섹션 입력 순서와 무관)"""
    ordered = sorted(set(resolved_sections), key=_section_sort_key)
    return json.dumps([name, [str(s) for s in ordered]], ensure_ascii=False)


class SubjectQueue:
    """세션별 과목 요청 큐

    같은 세션의 요청이 waitress 스레드에서 동시에 들어올 수 있으므로
    변경과 조회는 모두 큐 잠금 안에서 수행한다.
    """

    def __init__(self):
        self._subjects = []
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._subjects)

    def _find(self, key):
        for index, subject in enumerate(self._subjects):
            if identity_key(subject.name, subject.resolved_sections) == key:
                return index
        return -1

    def upsert(self, candidate):
        """같은 키가 있으면 id 와 위치를 유지한 채 교체, 없으면 새 id 로 추가"""
        key = identity_key(candidate.name, candidate.resolved_sections)
        with self._lock:
            index = self._find(key)
            if index != -1:
                original_id = self._subjects[index].id
                self._subjects[index] = candidate.with_id(original_id)
                logger.info(f"과목 갱신: {candidate.name} ({original_id})")
                return UpsertOutcome.UPDATED

            subject = candidate.with_id(_generate_subject_id())
            self._subjects.append(subject)
            logger.info(f"과목 추가: {subject.name} ({subject.id})")
            return UpsertOutcome.INSERTED

    def remove(self, position):
        """위치로 삭제 (범위 밖이면 무시)"""
        with self._lock:
            if 0 <= position < len(self._subjects):
                removed = self._subjects.pop(position)
                logger.info(f"과목 삭제: {removed.name} ({removed.id})")

    def list(self):
        with self._lock:
            return tuple(self._subjects)

    def clear(self):
        with self._lock:
            self._subjects = []
