"""
Centralized configuration using Pydantic Settings.

All environment variables are loaded and validated here.
"""

import json

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gmail OAuth (JSON string with client_id / client_secret)
    gmail_oauth_credentials: str = ""
    gmail_personal_refresh_token: str = ""
    gmail_professional_refresh_token: str = ""
    gmail_token_uri: str = "https://oauth2.googleapis.com/token"
    gmail_api_url: str = "https://gmail.googleapis.com/gmail/v1"

    # Owner mailboxes (messages from these are replies, never enquiries)
    personal_address: str = ""
    professional_address: str = ""
    # Own domain, exempt from the generic info@ sender rule
    own_domain: str = ""

    # Gmail web UI account index used to build deep links
    personal_web_index: int = 0
    professional_web_index: int = 4

    # Enquiry pipeline limits
    enquiry_max_results: int = 30
    enquiry_batch_size: int = 10
    enquiry_output_limit: int = 20
    enquiry_snippet_length: int = 200

    # Remote key/value store (REST)
    kv_rest_api_url: str = ""
    kv_rest_api_token: str = ""
    kv_namespace: str = "rcc"

    # Banking / brokerage
    starling_access_token: str = ""
    starling_api_url: str = "https://api.starlingbank.com/api/v2"
    trading212_api_key: str = ""
    trading212_api_url: str = "https://live.trading212.com/api/v0"

    # Stock quotes
    quote_api_url: str = "https://query1.finance.yahoo.com/v8/finance/chart"
    default_stock_symbols: list[str] = ["QDEL"]

    # Google Calendar (full JSON string of service account key)
    google_service_account_key: str = ""
    calendar_ids: dict[str, str] = {}

    # Weather
    openweather_api_key: str = ""
    weather_lat: float = 50.9097
    weather_lon: float = -1.4044

    # Times shown on the dashboard
    display_timezone: str = "Europe/London"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True  # False for colored dev output

    @property
    def kv_configured(self) -> bool:
        """Check if the remote key/value store is configured."""
        return bool(self.kv_rest_api_url and self.kv_rest_api_token)

    @property
    def owner_addresses(self) -> list[str]:
        """Owner mailbox addresses, lower-cased, empty entries dropped."""
        return [
            address.strip().lower()
            for address in (self.personal_address, self.professional_address)
            if address and address.strip()
        ]

    @property
    def gmail_client_credentials(self) -> dict[str, str] | None:
        """Parse the Gmail OAuth client credentials.

        Accepts either the flat ``{"client_id", "client_secret"}`` form or the
        file downloaded from the Google console, where the same keys are
        nested under ``installed`` or ``web``.
        """
        if not self.gmail_oauth_credentials:
            return None
        try:
            data = json.loads(self.gmail_oauth_credentials)
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict):
            return None
        for wrapper in ("installed", "web"):
            if isinstance(data.get(wrapper), dict):
                data = data[wrapper]
                break
        if not data.get("client_id") or not data.get("client_secret"):
            return None
        return {"client_id": data["client_id"], "client_secret": data["client_secret"]}


# Global settings instance
settings = Settings()
