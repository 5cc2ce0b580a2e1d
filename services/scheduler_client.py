"""
스케줄러 백엔드 HTTP 클라이언트
"""
import logging
import requests

from config import Config
from models import GenerationResult
from utils.errors import NetworkError

logger = logging.getLogger(__name__)

_client_instance = None

HEADERS = {
    'accept': 'application/json',
    'content-type': 'application/json',
}


def get_scheduler_client():
    """클라이언트 싱글턴 인스턴스 반환"""
    global _client_instance
    if _client_instance is None:
        _client_instance = SchedulerClient(Config.SCHEDULER_API_BASE_URL, timeout=Config.SCHEDULER_TIMEOUT)
    return _client_instance


class SchedulerClient:
    """참조 데이터 조회 / 시간표 생성 요청"""

    def __init__(self, base_url, timeout=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"스케줄러 요청 실패: {method} {url} - {e}")
            raise NetworkError(f"Could not reach the scheduler service: {e}") from e

        if not response.ok:
            body = (response.text or response.reason or '').strip()
            logger.error(f"스케줄러 오류 응답: {method} {url} - {response.status_code} {body[:200]}")
            raise NetworkError(f"Scheduler service responded with {response.status_code}: {body[:200]}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"스케줄러 응답 JSON 파싱 실패: {method} {url}")
            raise NetworkError("Scheduler service returned invalid JSON.") from e

    def fetch_reference_data(self):
        """GET /api/reference-data → dict"""
        return self._request('GET', '/api/reference-data')

    def generate_timetable(self, expanded_requests):
        """POST /api/generate-timetable → GenerationResult"""
        payload = [r.to_dict() for r in expanded_requests]
        logger.info(f"시간표 생성 요청: {len(payload)}개 수업")
        data = self._request('POST', '/api/generate-timetable', json=payload)
        result = GenerationResult.from_response(data)
        logger.info(f"시간표 생성 완료: {len(result.timetable)}개 배치, {len(result.skipped_slots)}개 건너뜀")
        return result
