import logging
from functools import wraps
from flask import jsonify

from utils.errors import ValidationError, NetworkError

logger = logging.getLogger(__name__)


def handle_errors(f):
    """API 엔드포인트 에러 핸들링 데코레이터"""
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"입력 검증 실패: {e}")
            return jsonify({"success": False, "error": str(e)}), ValidationError.status_code
        except NetworkError as e:
            logger.warning(f"스케줄러 통신 실패: {e}")
            return jsonify({"success": False, "error": str(e)}), NetworkError.status_code
        except ValueError as e:
            logger.warning(f"잘못된 값: {e}")
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception as e:
            logger.error(f"서버 오류: {e}", exc_info=True)
            return jsonify({"success": False, "error": "An internal server error occurred."}), 500
    return decorated
