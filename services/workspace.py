"""
브라우저 세션별 작업 공간 (과목 큐 + 마지막 생성 결과)
"""
import time
import uuid
import logging
import threading
from collections import OrderedDict

from config import Config
from services.subject_queue import SubjectQueue
from services.timetable_projector import TimetableProjector

logger = logging.getLogger(__name__)

_registry_instance = None


def get_workspace_registry():
    """레지스트리 싱글턴 인스턴스 반환"""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = WorkspaceRegistry(
            ttl_seconds=Config.WORKSPACE_TTL_SECONDS,
            max_workspaces=Config.MAX_WORKSPACES,
        )
    return _registry_instance


class Workspace:
    def __init__(self):
        self.queue = SubjectQueue()
        self.result = None

    def store_result(self, result):
        self.result = result

    def projector(self):
        return TimetableProjector(self.result.timetable if self.result else ())


class WorkspaceRegistry:
    """세션 키 → Workspace (프로세스 메모리, 재시작 시 사라짐)

    마지막 접근 순서로 보관하며, ttl_seconds 동안 접근이 없거나
    max_workspaces 를 넘으면 가장 오래된 것부터 제거한다.
    """

    def __init__(self, ttl_seconds=4 * 60 * 60, max_workspaces=1000, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_workspaces = max_workspaces
        self._clock = clock
        self._workspaces = OrderedDict()    # key -> (last_access, Workspace)
        self._lock = threading.Lock()

    @staticmethod
    def new_key():
        return uuid.uuid4().hex

    def _evict_expired(self, now):
        while self._workspaces:
            key, (last_access, _) = next(iter(self._workspaces.items()))
            if now - last_access < self.ttl_seconds:
                break
            self._workspaces.popitem(last=False)
            logger.info(f"유휴 작업 공간 제거: {key[:8]}")

    def _touch(self, key, workspace, now):
        self._workspaces[key] = (now, workspace)
        self._workspaces.move_to_end(key)

    def get(self, key):
        """작업 공간 조회, 없으면 생성"""
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            entry = self._workspaces.get(key)
            if entry is not None:
                workspace = entry[1]
            else:
                while len(self._workspaces) >= self.max_workspaces:
                    old_key, _ = self._workspaces.popitem(last=False)
                    logger.warning(f"작업 공간 수 초과, 가장 오래된 것 제거: {old_key[:8]}")
                workspace = Workspace()
                logger.info(f"작업 공간 생성: {key[:8]}")
            self._touch(key, workspace, now)
            return workspace

    def peek(self, key):
        """있는 작업 공간만 반환 (생성하지 않음)"""
        if not key:
            return None
        with self._lock:
            now = self._clock()
            self._evict_expired(now)
            entry = self._workspaces.get(key)
            if entry is None:
                return None
            self._touch(key, entry[1], now)
            return entry[1]

    def __len__(self):
        with self._lock:
            return len(self._workspaces)
