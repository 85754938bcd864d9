"""
Configuration management using Pydantic Settings with safe access wrapper
"""
from pydantic_settings import BaseSettings
from typing import Optional, Any


class Settings(BaseSettings):
    # Application settings
    app_name: str = "code-context"
    version: str = "1.0.0"
    environment: str = "production"

    # Parsing settings
    max_input_length: int = 0  # 0 disables the limit
    rules_file: Optional[str] = None

    # Logging settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False
    log_file_max_bytes: int = 10485760
    log_file_backup_count: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"   # allow unknown env vars without error

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.validate_settings()

    def validate_settings(self):
        """Validate critical settings on startup"""
        errors = []

        if self.environment not in ["development", "testing", "production"]:
            errors.append(f"Invalid environment: {self.environment}")

        if self.log_level.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            errors.append(f"Invalid log level: {self.log_level}")

        if self.max_input_length < 0:
            errors.append("max_input_length must be zero or positive")

        if self.log_file_backup_count < 0:
            errors.append("log_file_backup_count must be zero or positive")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")


class SafeSettings:
    """Safe wrapper for settings with fallback defaults"""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._defaults = {
            "app_name": "code-context",
            "environment": "production",
            "max_input_length": 0,
            "rules_file": None,
            "log_level": "INFO",
            "log_dir": "logs",
            "log_to_file": False,
            "log_file_max_bytes": 10485760,
            "log_file_backup_count": 10,
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Safely get setting value with fallback"""
        value = getattr(self._settings, key, None)
        if value is None:
            value = self._defaults.get(key, default)
        return value

    def __getattr__(self, key: str) -> Any:
        """Proxy attribute access with safety"""
        return self.get(key)

    @property
    def raw(self) -> Settings:
        """Get raw settings object"""
        return self._settings

# Initialize settings with safety wrapper
_raw_settings = Settings()
settings = SafeSettings(_raw_settings)
