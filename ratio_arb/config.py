"""
Configuration management for the ratio trade arbitrage engine.
Uses Pydantic for validation and type safety.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RatioConfig(BaseSettings):
    """Ratio trade scanning parameters."""
    
    # Minimum best-quote return for a pairing to be reported as an opportunity
    min_profit: float = Field(0.005, alias="MIN_PROFIT")
    # Cycles smaller than this nominal are not worth reporting
    min_tradable_size: int = Field(1, alias="MIN_TRADABLE_SIZE")
    opportunity_cooldown_seconds: int = Field(10, alias="OPPORTUNITY_COOLDOWN_SECONDS")
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)
    
    @field_validator("min_profit")
    @classmethod
    def validate_percentage(cls, v: float) -> float:
        if not -1.0 <= v <= 1.0:
            raise ValueError("Percentage must be between -1.0 and 1.0")
        return v
    
    @field_validator("min_tradable_size", "opportunity_cooldown_seconds")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Value must not be negative")
        return v


class MonitoringConfig(BaseSettings):
    """Monitoring configuration."""
    
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class DevelopmentConfig(BaseSettings):
    """Development and testing configuration."""
    
    debug_mode: bool = Field(False, alias="DEBUG_MODE")
    
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class AppConfig:
    """Master configuration class that aggregates all config sections."""
    
    def __init__(self):
        self.ratio = RatioConfig()
        self.monitoring = MonitoringConfig()
        self.development = DevelopmentConfig()
    
    @property
    def is_debug(self) -> bool:
        return self.development.debug_mode


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def reload_config() -> AppConfig:
    """Force reload configuration from environment."""
    global _config
    _config = AppConfig()
    return _config
