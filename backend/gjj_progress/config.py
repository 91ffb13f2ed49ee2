import os
from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .curriculum import Curriculum, load_curriculum
from .models import AppSettings, PointThresholds
from .normalization import check_thresholds


class Settings(BaseSettings):
    level1_threshold: float = Field(0.5, alias="GJJ_LEVEL1_THRESHOLD")
    level2_threshold: float = Field(2.5, alias="GJJ_LEVEL2_THRESHOLD")
    level3_threshold: float = Field(7.0, alias="GJJ_LEVEL3_THRESHOLD")
    level4_threshold: float = Field(12.5, alias="GJJ_LEVEL4_THRESHOLD")
    level1_name: str = Field("Découverte", alias="GJJ_LEVEL1_NAME")
    level2_name: str = Field("Consolidation", alias="GJJ_LEVEL2_NAME")
    level3_name: str = Field("Réflexe", alias="GJJ_LEVEL3_NAME")
    level4_name: str = Field("Maîtrise", alias="GJJ_LEVEL4_NAME")
    curriculum_path: Optional[str] = Field(None, alias="GJJ_CURRICULUM_PATH")
    log_level: str = Field("INFO", alias="GJJ_LOG_LEVEL")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True

    def thresholds(self) -> PointThresholds:
        return PointThresholds(
            level1=self.level1_threshold,
            level2=self.level2_threshold,
            level3=self.level3_threshold,
            level4=self.level4_threshold,
        )

    def app_settings(self) -> AppSettings:
        return AppSettings(
            level1_name=self.level1_name,
            level2_name=self.level2_name,
            level3_name=self.level3_name,
            level4_name=self.level4_name,
            thresholds=self.thresholds(),
        )

    def curriculum(self) -> Optional[Curriculum]:
        if not self.curriculum_path:
            return None
        return load_curriculum(self.curriculum_path)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid tracker configuration: {exc}") from exc
    check_thresholds(settings.thresholds())
    return settings
