"""Configuration settings for the Vendor Evaluation Matrix."""

from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    db_path: Path = data_dir / "evaluations.db"

    # Award settings
    minimum_qualifying_score: float = 85.0  # percent, inclusive

    # Sibling weight sums further than this from 1.0 are reported
    weight_sum_tolerance: float = 0.001

    # Performance summary
    strength_threshold: float = 0.8  # normalized score at or above
    weakness_threshold: float = 0.4  # normalized score at or below (and > 0)
    summary_limit: int = 3

    # Recommendations
    alternative_vendor_score: float = 70.0  # suggest alternatives below this total
    critical_requirement_score: float = 60.0  # high priority average below this

    # Database URL
    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

# Ensure data directory exists
settings.data_dir.mkdir(parents=True, exist_ok=True)
