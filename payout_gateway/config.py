"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # payOS
    payos_api_url: str = "https://api-merchant.payos.vn"
    payos_client_id: str = ""
    payos_api_key: str = ""
    payos_checksum_key: str = ""

    # Bank directories
    bank_listing_url: str = "https://api.vietqr.io/v2/banks"
    bankcodes_fallback_path: str = "data/bankcodes.json"
    bank_directory_ttl_seconds: float = 300.0
    bank_listing_ttl_seconds: float = 6 * 60 * 60

    # Misc upstreams
    public_ip_url: str = "https://api.ipify.org?format=json"

    # Service
    service_name: str = "payout-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0
    payout_timeout_seconds: float = 15.0

    def missing_credentials(self) -> List[str]:
        """Names of payOS credential variables that are not set"""
        required = {
            "PAYOS_CLIENT_ID": self.payos_client_id,
            "PAYOS_API_KEY": self.payos_api_key,
            "PAYOS_CHECKSUM_KEY": self.payos_checksum_key,
        }
        return [name for name, value in required.items() if not value]


settings = Settings()
