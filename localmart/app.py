# localmart/app.py
import logging
import os

from flask import Flask, jsonify

from .config import config
from .extensions import db, migrate, swagger, jwt
from .api.auth import auth_bp
from .api.posts import posts_bp
from .api.responses import responses_bp
from .api.chat import bp as chat_bp
from . import models  # noqa: F401  註冊所有 model 以便 create_all / migrate 偵測


def _unauthorized(message):
    return jsonify({"error": {"code": "UNAUTHORIZED", "message": message}}), 401


def register_jwt_handlers():
    """Renders every token failure in the same error envelope as the API."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _unauthorized(reason)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _unauthorized(reason)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _unauthorized("Token has expired.")


def create_app(config_name=None):
    """
    應用程式工廠函數。
    """
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app = Flask(__name__)

    # 1. 載入設定
    app.config.from_object(config[config_name])

    if not app.testing:
        logging.basicConfig(level=logging.INFO)

    # 2. 初始化擴充套件
    db.init_app(app)
    migrate.init_app(app, db)
    swagger.init_app(app)
    jwt.init_app(app)
    register_jwt_handlers()

    # 3. 註冊 Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(responses_bp)
    app.register_blueprint(chat_bp)

    # 4. 註冊全域錯誤處理器
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": {"code": "NOT_FOUND", "message": "您請求的資源不存在。"}}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": {"code": "METHOD_NOT_ALLOWED", "message": "此資源不支援該 HTTP 方法。"}}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logging.error(f"Unhandled server error: {error}", exc_info=True)
        return (
            jsonify(
                {
                    "error": {
                        "code": "INTERNAL_SERVER_ERROR",
                        "message": "伺服器發生未預期的錯誤。",
                    }
                }
            ),
            500,
        )

    # 根路由，用於健康檢查
    @app.route("/")
    def index():
        return "LocalMart chat is running!"

    return app
