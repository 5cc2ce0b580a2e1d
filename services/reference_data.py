"""
참조 데이터 캐시 (교수 / 섹션 / 강의실 / 시간 슬롯)
"""
import logging
import threading

from models import ReferenceCatalog
from utils.errors import NetworkError

logger = logging.getLogger(__name__)

_cache_instance = None


def get_reference_cache():
    """캐시 싱글턴 인스턴스 반환"""
    global _cache_instance
    if _cache_instance is None:
        from services.scheduler_client import get_scheduler_client
        _cache_instance = ReferenceDataCache(get_scheduler_client())
    return _cache_instance


class ReferenceDataCache:
    """백엔드 카탈로그 스냅샷 보관

    fetch 실패 시 이전 스냅샷(처음에는 빈 카탈로그)을 그대로 유지한다.
    """

    def __init__(self, client):
        self.client = client
        self.catalog = ReferenceCatalog()
        self.ready = False
        self.last_error = None
        self._lock = threading.Lock()

    def refresh(self):
        """카탈로그 다시 받기 (실패 시 NetworkError)"""
        with self._lock:
            try:
                catalog = ReferenceCatalog.from_dict(self.client.fetch_reference_data())
            except NetworkError as e:
                self.last_error = str(e)
                logger.error(f"참조 데이터 로드 실패: {e}")
                raise
            self.catalog = catalog
            self.ready = True
            self.last_error = None
            logger.info(
                f"참조 데이터 로드: 교수 {len(catalog.faculty)}명, 섹션 {len(catalog.sections)}개, "
                f"강의실 {len(catalog.rooms)}개, 슬롯 {len(catalog.time_slots)}개"
            )
            return catalog

    def ensure_loaded(self):
        """아직 성공한 적이 없으면 로드 시도 (실패는 last_error 로만 남김)

        페이지를 새로 고칠 때마다 호출되므로 실패 후 새로 고침이 곧 재시도.
        """
        if self.ready:
            return self.catalog
        try:
            return self.refresh()
        except NetworkError:
            return self.catalog
