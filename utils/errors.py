"""
시간표 빌더 - 예외 분류
"""


class TimetableAppError(Exception):
    """애플리케이션 예외 기본 클래스"""
    status_code = 500


class ValidationError(TimetableAppError):
    """폼 입력 오류 (제출 차단, 큐 변경 없음)"""
    status_code = 400


class NetworkError(TimetableAppError):
    """스케줄러 백엔드 통신 실패, 비정상 응답, 잘못된 JSON"""
    status_code = 502
