import os


def _optional_float(value):
    """빈 값이면 None (타임아웃 미적용)"""
    if value in (None, ''):
        return None
    return float(value)


class Config:
    """애플리케이션 설정"""

    # 보안
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'timetable-builder-secret-key'

    # 스케줄러 백엔드
    SCHEDULER_API_BASE_URL = os.environ.get('SCHEDULER_API_BASE_URL') or 'http://localhost:8080'
    SCHEDULER_TIMEOUT = _optional_float(os.environ.get('SCHEDULER_TIMEOUT'))  # 초, None이면 무제한

    # 과목 입력 제한
    MAX_SUBJECT_NAME_LENGTH = 100
    MAX_SLOT_DURATION = 8
    MAX_LECTURES_PER_WEEK = 14

    # 세션 작업 공간 (메모리 보관, 유휴 시 제거)
    WORKSPACE_TTL_SECONDS = int(os.environ.get('WORKSPACE_TTL_SECONDS', 4 * 60 * 60))
    MAX_WORKSPACES = int(os.environ.get('MAX_WORKSPACES', 1000))

    # 시간표 요일 순서 (알 수 없는 요일은 마지막)
    DAY_ORDER = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

    # 로그
    LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logs')
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # 서버
    HOST = '0.0.0.0'
    PORT = int(os.environ.get('PORT', 5000))
    DEBUG = os.environ.get('FLASK_ENV') == 'development'
