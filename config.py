import os
import warnings

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


class Config:
    # Data documents - read from DATA_DIR unless DATA_BASE_URL is set
    DATA_DIR = os.environ.get("DATA_DIR") or os.path.join(basedir, "data")
    DATA_BASE_URL = os.environ.get("DATA_BASE_URL") or None
    DATA_REQUEST_TIMEOUT = float(os.environ.get("DATA_REQUEST_TIMEOUT") or 10)

    # Pool lifecycle
    CLOSING_POLICY = os.environ.get("CLOSING_POLICY", "deadline")
    PREVIEW_MODE = os.environ.get("PREVIEW_MODE", "False").lower() in ["true", "on", "1"]

    # Application settings
    TIMEZONE = os.environ.get("TIMEZONE", "UTC")  # Default to UTC if not specified

    # Caching configuration
    CACHE_TYPE = os.environ.get("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(
        os.environ.get("CACHE_DEFAULT_TIMEOUT", 60)
    )  # 1 minute, results change on game days
    CACHE_REDIS_URL = os.environ.get("CACHE_REDIS_URL")
    CACHE_KEY_PREFIX = "pickem:"

    # Rate limiting
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "1000 per hour")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Logging configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = os.environ.get("LOG_TO_CONSOLE", "True").lower() == "true"
    LOG_TO_FILE = os.environ.get("LOG_TO_FILE", "True").lower() == "true"
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    # Environment detection
    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration with helpful defaults"""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""

    DEBUG = False

    def __init__(self):
        super().__init__()

        if self.PREVIEW_MODE:
            warnings.warn(
                "🚨 PRODUCTION WARNING: PREVIEW_MODE is enabled! "
                "Every pool without final scores will accept picks.",
                UserWarning,
            )
        if self.CACHE_TYPE == "SimpleCache":
            warnings.warn(
                "🔶 Using SimpleCache in production; each worker keeps its own copy "
                "of the data documents. Set CACHE_TYPE=RedisCache to share it.",
                UserWarning,
            )


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    DEBUG = False
    CACHE_TYPE = "NullCache"
    LOG_TO_FILE = False
    LOG_TO_CONSOLE = False
    PREVIEW_MODE = False
    CLOSING_POLICY = "deadline"
    RATELIMIT_ENABLED = False


# Configuration mapping
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
