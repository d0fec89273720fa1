import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./app.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_EXPIRE_MINUTES = data.get("ACCESS_TOKEN_EXPIRE_MINUTES", 15)
    SESSION_EXPIRE_DAYS = data.get("SESSION_EXPIRE_DAYS", 30)
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Password reset
    RESET_TOKEN_EXPIRY_HOURS = data.get("RESET_TOKEN_EXPIRY_HOURS", 1)
    RESET_URL = data.get("RESET_URL", "http://localhost:3000/auth/reset-password")
    RESET_MAX_ATTEMPTS_PER_DAY = data.get("RESET_MAX_ATTEMPTS_PER_DAY", 3)
    RESET_COOLDOWN_MINUTES = data.get("RESET_COOLDOWN_MINUTES", 5)
    PASSWORD_CHANGE_MAX_ATTEMPTS = data.get("PASSWORD_CHANGE_MAX_ATTEMPTS", 5)
    PASSWORD_CHANGE_WINDOW_MINUTES = data.get("PASSWORD_CHANGE_WINDOW_MINUTES", 15)
    PASSWORD_HISTORY_LIMIT = data.get("PASSWORD_HISTORY_LIMIT", 5)
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 12)
    TOKEN_CLEANUP_ENABLED = bool(data.get("TOKEN_CLEANUP_ENABLED", True))
    TOKEN_CLEANUP_INTERVAL_MINUTES = data.get("TOKEN_CLEANUP_INTERVAL_MINUTES", 60)

    # Rate-limit attempt storage: "memory" (single instance) or "redis"
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")

    # Mail: "console" logs rendered mails, "smtp" delivers them
    MAIL_BACKEND = data.get("MAIL_BACKEND", "console")
    MAIL_SERVER = data.get("MAIL_SERVER", "localhost")
    MAIL_PORT = data.get("MAIL_PORT", 587)
    MAIL_USERNAME = data.get("MAIL_USERNAME", "")
    MAIL_PASSWORD = data.get("MAIL_PASSWORD", "")
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@hotel.example.com")
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "Hotel Management")
    MAIL_STARTTLS = bool(data.get("MAIL_STARTTLS", True))
    MAIL_SSL_TLS = bool(data.get("MAIL_SSL_TLS", False))
    MAIL_TIMEOUT = data.get("MAIL_TIMEOUT", 10)
