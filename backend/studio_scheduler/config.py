from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "StudioScheduler"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    # Fallbacks applied when an estimate's service-event leaves them blank.
    default_start_time: str = "09:00"
    default_end_time: str = "17:00"
    default_location: str = "To be determined"

    studio_name: str = "StudioSync Team"
    # argon2 hash of the admin key; reverts are refused while this is empty.
    admin_key_hash: str = ""
    reminder_lead_days: int = 1

    @property
    def db_path(self) -> Path:
        return self.data_dir / "studio.sqlite"

    model_config = {"env_prefix": "STUDIO_"}


settings = Settings()
