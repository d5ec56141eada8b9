import os


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-prod')
    
    # Database
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///tournament_hub.db')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Redis (event fan-out)
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379')
    USE_REDIS = os.getenv('USE_REDIS', 'false').lower() == 'true'
    
    # Hub
    HUB_OWNER = os.getenv('HUB_OWNER', '')
    POST_COOLDOWN_SECONDS = int(os.getenv('POST_COOLDOWN_SECONDS', '2'))
    EVENT_HISTORY_SIZE = int(os.getenv('EVENT_HISTORY_SIZE', '1000'))
    
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    DEBUG = False
    USE_REDIS = os.getenv('USE_REDIS', 'true').lower() == 'true'


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    USE_REDIS = False
    HUB_OWNER = '0x00000000000000000000000000000000000000a0'
    POST_COOLDOWN_SECONDS = 2
    EVENT_HISTORY_SIZE = 50


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
