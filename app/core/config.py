from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
import json

class Settings(BaseSettings):
    # Application Settings
    app_name: str = Field(default="University ID Card System", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    ENVIRONMENT: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=True, alias="DEBUG")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=True, alias="RELOAD")

    # Database Configuration
    DB_HOST: str = Field(default="localhost", alias="DB_HOST")
    DB_PORT: int = Field(default=5432, alias="DB_PORT")
    DB_NAME: str = Field(default="idcards", alias="DB_NAME")
    DB_USER: str = Field(default="idcards", alias="DB_USER")
    DB_PASSWORD: str = Field(default="idcards", alias="DB_PASSWORD")
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # JWT Authentication
    JWT_SECRET: str = Field(default="your-super-secret-jwt-key-change-this-in-production", alias="JWT_SECRET")
    JWT_ALGORITHM: str = Field(default="HS256", alias="JWT_ALGORITHM")
    JWT_EXPIRATION_HOURS: int = Field(default=12, alias="JWT_EXPIRATION_HOURS")

    # Password Hashing
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS")

    # Default operator created by init_db when the users table is empty
    default_admin_username: str = Field(default="admin", alias="DEFAULT_ADMIN_USERNAME")
    default_admin_email: str = Field(default="admin@example.com", alias="DEFAULT_ADMIN_EMAIL")
    default_admin_password: str = Field(default="admin123", alias="DEFAULT_ADMIN_PASSWORD")

    # AWS S3 Configuration (person photos)
    aws_access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field(default="eu-central-1", alias="AWS_REGION")
    aws_s3_bucket_name: str = Field(default="university-id-photos", alias="AWS_S3_BUCKET_NAME")
    photo_url_expiry_seconds: int = Field(default=604800, alias="PHOTO_URL_EXPIRY_SECONDS")  # 7 days
    max_photo_size: int = Field(default=5242880, alias="MAX_PHOTO_SIZE")  # 5MB

    # CORS Configuration
    API_CORS_ORIGINS: Optional[str] = Field(default=None, alias="API_CORS_ORIGINS")
    cors_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5000", "http://127.0.0.1:5000", "http://localhost:3000"])

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", alias="LOG_FORMAT")

    # ID Generation
    id_sequence_max_retries: int = Field(default=3, alias="ID_SEQUENCE_MAX_RETRIES")

    # Pagination
    default_page_size: int = Field(default=500, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=5000, alias="MAX_PAGE_SIZE")

    # Development Settings
    seed_database: bool = Field(default=True, alias="SEED_DATABASE")

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Handle wildcard for all origins
            if v.strip() == "*":
                return ["*"]
            try:
                return json.loads(v)
            except ValueError:
                return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    @property
    def DATABASE_URL(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def database_echo(self) -> bool:
        return self.debug and self.is_development and self.LOG_LEVEL == "DEBUG"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

# Global settings instance
settings = Settings()
