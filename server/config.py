import os
from pydantic_settings import BaseSettings

from nsolver import GroupingMode

GROUPING_MODES = [m.value for m in GroupingMode]


class Settings(BaseSettings):
    # Server configuration
    host: str = os.getenv("HOST", "localhost")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "true").lower() == "true"
    environment: str = os.getenv("ENVIRONMENT", "development")

    # Solver configuration
    default_target: float = float(os.getenv("DEFAULT_TARGET", "24"))
    default_mode: str = os.getenv("DEFAULT_MODE", "clamped")
    max_input_length: int = int(os.getenv("MAX_INPUT_LENGTH", "4"))  # Longer inputs print enormous result sets
    max_workers: int = int(os.getenv("MAX_WORKERS", "1"))
    max_solutions: int = int(os.getenv("MAX_SOLUTIONS", "0"))  # 0 means unlimited
    include_traces: bool = os.getenv("INCLUDE_TRACES", "true").lower() == "true"

    # Logging settings
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def solution_cap(self):
        return self.max_solutions or None

    def validate_settings(self) -> None:
        """Validate configuration settings."""
        if self.default_mode not in GROUPING_MODES:
            raise ValueError(f"default_mode must be one of {GROUPING_MODES}")

        if self.max_input_length < 1:
            raise ValueError("max_input_length must be >= 1")

        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        if self.max_solutions < 0:
            raise ValueError("max_solutions must be >= 0")


# Global settings instance
settings = Settings()

# Validate settings on import
settings.validate_settings()
