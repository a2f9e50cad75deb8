from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str

    # JWT settings
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # bcrypt work factor (log2 of the number of rounds)
    BCRYPT_ROUNDS: int = 12

    # Storage settings
    STORAGE_BACKEND: str = "local"  # local | s3 (future)
    STORAGE_BASE_PATH: str = "var/blobs"
    MAX_UPLOAD_SIZE_MB: int = 100
    STORAGE_TIMEOUT_SECONDS: float = 30.0

    # Quota is displayed to the user, never enforced
    DEFAULT_STORAGE_LIMIT_BYTES: int = 5 * 1024 * 1024 * 1024
    RECENT_UPLOAD_DAYS: int = 7

    # "env_file": read variables from .env as well as the environment
    # "extra": "ignore": unknown variables in .env are skipped silently
    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
