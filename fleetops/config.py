"""
Configuration de l'application / Application configuration.
Utilise pydantic-settings pour charger depuis .env ou variables d'environnement.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "FleetOps Reporting"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True

    # Database - SQLite par défaut pour le développement
    # Database - SQLite by default for development
    DATABASE_URL: str = "sqlite+aiosqlite:///./fleetops.db"

    # CORS - origines autorisées / allowed origins
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Rate Limiting
    RATE_LIMIT_EXPORT: str = "10/minute"
    RATE_LIMIT_DEFAULT: str = "60/minute"

    # Rapports / Reports
    REPORT_TOP_DRIVERS: int = 5
    REPORT_BOTTOM_DRIVERS: int = 3
    REPORT_TOP_VEHICLES: int = 5
    REPORT_BOTTOM_VEHICLES: int = 3
    REPORT_TOP_DESTINATIONS: int = 10
    CURRENCY_LABEL: str = "FCFA"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
