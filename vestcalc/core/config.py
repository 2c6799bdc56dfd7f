import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _load_dotenv() -> None:
    dotenv_path = PROJECT_ROOT / ".env"
    if not dotenv_path.exists():
        return

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'").strip('"')
        os.environ.setdefault(key, value)


class Settings(BaseModel):
    app_name: str = Field(default="CapVest")
    debug: bool = Field(default=False)
    cors_origins: str = Field(default="*")
    max_report_rows: int = Field(default=5000, gt=0)

    @property
    def cors_origin_list(self) -> list[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_dotenv()
        return cls(
            app_name=os.getenv("APP_NAME", "CapVest"),
            debug=os.getenv("DEBUG", "false").lower() in {"1", "true", "yes", "on"},
            cors_origins=os.getenv("CORS_ORIGINS", "*"),
            max_report_rows=int(os.getenv("MAX_REPORT_ROWS", "5000")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
