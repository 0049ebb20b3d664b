import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production")
IS_DEBUG = APP_ENV == "development"

# "db": SQLAlchemy 저장소, "memory": 프로세스 로컬 저장소
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "db").strip().lower()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./filmorate.db")

LOG_DIR = os.getenv("LOG_DIR", "logs")

POPULAR_FILMS_DEFAULT_COUNT = int(os.getenv("POPULAR_FILMS_DEFAULT_COUNT", "10"))

if STORAGE_BACKEND not in ("db", "memory"):
    raise ValueError(f"STORAGE_BACKEND must be 'db' or 'memory', got '{STORAGE_BACKEND}'")
