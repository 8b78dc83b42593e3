# localmart/config.py
import os


class Config:
    """基礎設定"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', SECRET_KEY)
    JWT_ACCESS_TOKEN_HOURS = int(os.getenv('JWT_ACCESS_TOKEN_HOURS', '24'))

    # Chat
    CHAT_MAX_MESSAGE_LENGTH = int(os.getenv('CHAT_MAX_MESSAGE_LENGTH', '2000'))

    # Flasgger (Swagger) 設定
    SWAGGER = {
        'title': 'LocalMart Chat API',
        'uiversion': 3,
        'version': '1.0.0',
        'description': 'Customer requests, shopkeeper conversations and polling chat.',
        'termsOfService': '',
        'contact': {
            'name': 'API Support',
            'email': 'support@example.com',
        },
        'license': {
            'name': 'MIT',
        },
        'securityDefinitions': {
            'bearerAuth': {
                'type': 'apiKey',
                'name': 'Authorization',
                'in': 'header',
            }
        },
        "specs_route": "/apidocs/"
    }


class DevelopmentConfig(Config):
    """開發環境設定"""
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///localmart.db')
    SQLALCHEMY_ECHO = True  # 印出 SQL 語句，方便除錯


class ProductionConfig(Config):
    """生產環境設定"""
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')


class TestingConfig(Config):
    """測試環境設定"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'  # 使用記憶體資料庫進行測試
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
