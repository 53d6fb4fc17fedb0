"""
렌터카 원장 Flask 웹 애플리케이션

차량 카탈로그, 고객 등록, 대여/반납을 관리하는 단일 프로세스 앱
"""

from flask import Flask, jsonify
from flask_socketio import SocketIO
import logging
import os
from pathlib import Path

DEFAULT_LOG_DIR = Path(__file__).parent.parent / 'logs'
LOG_FILE_NAME = 'rental_ledger.log'


def create_app(config_name='default'):
    """Flask 애플리케이션 팩토리"""

    app = Flask(__name__)

    # 기본 설정
    app.config.update(
        SECRET_KEY=os.environ.get('SECRET_KEY', 'dev-key-change-in-production'),
        DEBUG=os.environ.get('FLASK_DEBUG', 'False').lower() in ('1', 'true'),
        TESTING=False,
        LOG_DIR=os.environ.get('RENTAL_LOG_DIR', str(DEFAULT_LOG_DIR)),

        # 원장 설정
        SEED_DEFAULT_FLEET=os.environ.get('RENTAL_SEED_FLEET', 'True').lower() in ('1', 'true'),
        MAX_RENTAL_DAYS=int(os.environ.get('RENTAL_MAX_DAYS', 365)),
    )

    # 환경별 설정 로드
    if config_name == 'development':
        app.config.update(
            DEBUG=True,
        )
    elif config_name == 'production':
        app.config.update(
            DEBUG=False,
        )
    elif config_name == 'testing':
        app.config.update(
            TESTING=True,
        )

    # 로깅 설정
    setup_logging(app)

    # SocketIO 초기화 (앱마다 별도 인스턴스, 기본 threading 모드)
    setup_socketio(app)

    # 원장 생성 및 기본 차량 등록
    setup_ledger(app)

    # 블루프린트 등록
    register_blueprints(app)

    # 에러 핸들러 등록
    register_error_handlers(app)

    app.logger.info("🚀 렌터카 원장 웹 애플리케이션 초기화 완료")

    return app


def setup_socketio(app):
    """앱 전용 SocketIO 인스턴스 생성 및 이벤트 핸들러 등록

    app.extensions['socketio'] 로도 접근 가능하다.
    """
    from car_rental.events import register_socketio_handlers

    async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "threading")
    app.socketio = SocketIO(app, cors_allowed_origins="*", async_mode=async_mode)
    register_socketio_handlers(app.socketio)
    app.logger.info(f"🧵 SocketIO async_mode={async_mode}")


def setup_ledger(app):
    """RentalLedger 생성 후 앱에 연결"""
    from car_rental.services.rental_ledger import RentalLedger
    from car_rental.services.fleet import seed_default_fleet

    app.ledger = RentalLedger()

    if app.config.get('SEED_DEFAULT_FLEET', True):
        seed_default_fleet(app.ledger)


def setup_logging(app):
    """로깅 설정

    app.logger 는 패키지 로거(car_rental)와 같으므로 서비스 모듈 로그도 같은 파일에 기록된다.
    같은 파일 핸들러는 한 번만 붙인다.
    """
    if not app.debug and not app.testing:
        # 프로덕션 로깅
        log_dir = Path(app.config['LOG_DIR'])
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = os.path.abspath(log_dir / LOG_FILE_NAME)

        package_logger = logging.getLogger(__name__)
        already_attached = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == log_path
            for h in package_logger.handlers
        )
        if not already_attached:
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.INFO)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
            ))
            package_logger.addHandler(file_handler)

        package_logger.setLevel(logging.INFO)


def register_blueprints(app):
    """블루프린트 등록"""

    # API 라우트
    from car_rental.api import bp as api_bp
    app.register_blueprint(api_bp, url_prefix='/api')


def register_error_handlers(app):
    """에러 핸들러 등록"""

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({
            'success': False,
            'error': '요청한 경로를 찾을 수 없습니다.'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({
            'success': False,
            'error': '허용되지 않는 요청 방식입니다.'
        }), 405

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f'서버 오류: {error}')
        return jsonify({
            'success': False,
            'error': '서버 내부 오류가 발생했습니다.'
        }), 500
