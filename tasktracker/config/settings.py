# tasktracker/config/settings.py
# Runtime configuration read from the environment

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Settings:
    """Application settings loaded from environment variables / .env"""

    # Database
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///./tasktracker.db')

    # JWT
    SECRET_KEY = os.getenv('SECRET_KEY', 'change-me-in-production')
    ALGORITHM = os.getenv('ALGORITHM', 'HS256')
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 24))

    # Registration
    ALLOW_ADMIN_SIGNUP = _env_bool('ALLOW_ADMIN_SIGNUP', 'false')
    MIN_PASSWORD_LENGTH = 6

    # HTTP
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 8000))
    RELOAD = _env_bool('RELOAD', 'true')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

    # Default admin created by seed_all.py
    ADMIN = {
        'name': os.getenv('ADMIN_NAME', 'System Administrator'),
        'email': os.getenv('ADMIN_EMAIL', 'admin@example.com'),
        'password': os.getenv('ADMIN_PASSWORD', 'admin123'),
        'department': os.getenv('ADMIN_DEPARTMENT', 'Human Resources'),
    }

    DEFAULT_DEPARTMENTS = [
        'Software Development',
        'Digital Marketing',
        'Business Development',
        'Financial Operations',
        'Human Resources',
    ]

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Split CORS_ORIGINS into a list, dropping blanks"""
        return [origin.strip() for origin in cls.CORS_ORIGINS.split(',') if origin.strip()]

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE_URL.lower().startswith('sqlite')


settings = Settings
