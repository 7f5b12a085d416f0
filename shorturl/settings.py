from dataclasses import dataclass
from decouple import config


@dataclass(frozen=True)
class Settings:
    host: str = config("HOST", cast = str, default = "0.0.0.0")
    port: int = config("PORT", cast = int, default = 8080)
    log_level: str = config("LOG_LEVEL", cast = str, default = "INFO")


settings = Settings()
