from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Shop Admin API"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    DATABASE_URL: str = "sqlite+pysqlite:///./shopadmin.db"
    FRONTEND_URL: str = "http://localhost:3000"
    METRICS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"

    SUPERADMIN_NAME: str = "Super Admin"
    SUPERADMIN_EMAIL: str = "superadmin@example.com"
    SUPERADMIN_PASSWORD: str = "change-me-123"

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Access policy knobs
    MANAGER_DEFAULT_PERMISSIONS: str = "products,categories,orders"
    ROLE_CHANGE_POLICY: str = "ignore"
    CATEGORY_DELETE_POLICY: str = "block"

    IMAGE_MAX_BYTES: int = 5 * 1024 * 1024
    IMAGE_MAX_DIMENSION: int = 1200
    IMAGE_BATCH_MAX_FILES: int = 10
    IMAGE_UPLOAD_CONCURRENCY: int = 4

    STORAGE_ACCESS_KEY: str = ""
    STORAGE_SECRET_KEY: str = ""
    STORAGE_BUCKET: str = ""
    STORAGE_REGION: str = ""
    STORAGE_ENDPOINT: str = ""
    STORAGE_PUBLIC_BASE_URL: str = ""
    STORAGE_KEY_PREFIX: str = "shopadmin"
    STORAGE_CONNECT_TIMEOUT_SECONDS: float = 5.0
    STORAGE_READ_TIMEOUT_SECONDS: float = 15.0
    STORAGE_MAX_ATTEMPTS: int = 3

    @property
    def manager_default_permissions(self) -> frozenset[str]:
        return frozenset(item.strip() for item in self.MANAGER_DEFAULT_PERMISSIONS.split(",") if item.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
