"""Application configuration"""

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    database_url: str = "sqlite:///./issueflow.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # GitHub
    gh_token: str | None = None
    # Comma-separated list of "owner/repo" entries to sync.
    #
    # Example: "octo-org/checkout-api,octo-org/storefront"
    gh_repos: str | None = None
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: float = 30.0

    # Comma-separated list of selectable contexts (services) for the start form.
    services: str | None = None

    # Sync
    # Periodic sync of all configured repositories; 0 disables the background job.
    sync_interval_minutes: int = 0

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @staticmethod
    def _split_csv(value: str | None) -> List[str]:
        if not value:
            return []
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def repository_list(self) -> List[str]:
        """Configured repositories, in configuration order."""
        return self._split_csv(self.gh_repos)

    @property
    def service_options(self) -> List[str]:
        """Contexts offered by the start form ("default" when none are configured)."""
        return self._split_csv(self.services) or ["default"]


settings = Settings()
