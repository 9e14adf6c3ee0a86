from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import-not-found]


class Settings(BaseSettings):
    app_env: str = "local"
    app_name: str = "weatherbot"
    log_level: str = "INFO"

    cors_origins: list[str] | str = "*"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str] | str:
        if isinstance(v, str):
            if v == "*":
                return "*"
            if "," in v:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
            return [v.strip()] if v.strip() else "*"
        if isinstance(v, list):
            return v
        return "*"

    # OpenWeather upstream
    weather_api_key: str | None = None
    weather_api_base_url: str = "https://api.openweathermap.org/data/2.5"
    weather_units: str = "imperial"
    weather_timeout_sec: float = 5.0

    # Weather cache
    weather_cache_backend: Literal["memory", "redis"] = "memory"
    weather_cache_ttl_seconds: int = 60 * 60  # 1 hour
    weather_cache_max_entries: int = 10
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "weather"

    # LLM generation
    llm_provider: Literal["gemini", "ollama", "none"] = "gemini"
    llm_availability_ttl_seconds: int = 5 * 60
    llm_timeout_sec: float = 30.0
    llm_health_timeout_sec: float = 3.0
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024

    gemini_model: str = "models/gemini-2.5-flash-lite"
    gemini_api_key: str | None = None

    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "mistral:latest"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
