"""Configuration settings using Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = Field(default="TaskFlow", description="Application display name")
    app_host: str = Field(default="0.0.0.0", description="FastAPI host")
    app_port: int = Field(default=8000, description="FastAPI port")
    debug: bool = Field(default=False, description="Enable debug mode")
    environment: str = Field(default="development", description="Deployment environment name")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path = Field(default=Path("logs"), description="Directory for log files")

    # Persistence Configuration
    persistence_backend: str = Field(default="memory", description="Record backend: 'memory' or 'json'")
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON record files")
    simulated_latency_ms: int = Field(default=0, ge=0, description="Delay added to in-memory persistence calls")
    seed_demo_tasks: bool = Field(default=True, description="Seed the task collection with demo tasks")

    class Config:
        """Pydantic configuration."""
        env_prefix = "TASKFLOW_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
