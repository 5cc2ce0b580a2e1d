"""
Timetable Builder - 과목 큐 작성 및 스케줄러 결과 섹션별 조회
"""
import os
import logging
from dotenv import load_dotenv

load_dotenv()

from flask import Flask
from config import Config
from routes import main_bp, api_bp


def _configure_logging():
    """콘솔 + 파일 로그 설정"""
    os.makedirs(Config.LOG_DIR, exist_ok=True)
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(os.path.join(Config.LOG_DIR, 'app.log'), encoding='utf-8'),
        ],
    )


def create_app(test_config=None):
    """Flask 애플리케이션 팩토리"""
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    if not app.testing:
        _configure_logging()

    # Blueprint 등록
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)

    # 보안 헤더
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data:; "
            "connect-src 'self'"
        )
        return response

    return app


def main():
    """메인 실행 함수"""
    app = create_app()
    print("=" * 50)
    print("  Timetable Builder")
    print("=" * 50)
    print(f"  http://localhost:{Config.PORT}/")
    print(f"  스케줄러: {Config.SCHEDULER_API_BASE_URL}")
    print("=" * 50)

    if Config.DEBUG:
        app.run(debug=True, host=Config.HOST, port=Config.PORT)
    else:
        from waitress import serve
        print(f"Waitress 서버 시작 (포트: {Config.PORT})")
        serve(app, host=Config.HOST, port=Config.PORT)


if __name__ == '__main__':
    main()
