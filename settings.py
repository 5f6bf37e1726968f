from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    jpeg_quality: int = 80
    webp_quality: int = 80
    avif_quality: int = 60
    avif_speed: int = 5  # 1 (slow, best) .. 10 (fast, worst)
    preserve_aspect: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="IMGV_",
        env_file_encoding="utf-8",
    )

    @field_validator("jpeg_quality", "webp_quality", "avif_quality")
    @classmethod
    def quality_must_be_percentage(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError("quality must be between 0 and 100")
        return v

    @field_validator("avif_speed")
    @classmethod
    def speed_must_be_in_range(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError("avif_speed must be between 1 and 10")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level
