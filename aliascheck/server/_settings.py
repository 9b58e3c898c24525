'''
Service settings, loaded from environment variables (or a `.env` file).
'''
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from aliascheck.dns import ResolverConfig
from aliascheck.verify import VerificationPolicy


class ServiceSettings(BaseSettings):
    """Settings of the aliascheck HTTP service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    # Basic-Auth credentials required by every lookup route
    auth_user: str = "user"
    auth_password: str = "changeme"

    # DNS
    resolv_conf: str = "/etc/resolv.conf"
    walk_from: Literal["root-servers", "system"] = "root-servers"
    dns_timeout: float = 5.0

    # Verification policy
    enable_chain_detection: bool = False
    alias_overrides_secondary: bool = True
    no_match_status: Literal["no_match", "error"] = "no_match"

    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(
            filename=self.resolv_conf,
            walk_from=self.walk_from,
            timeout=self.dns_timeout,
        )

    def verification_policy(self) -> VerificationPolicy:
        return VerificationPolicy(
            enable_chain_detection=self.enable_chain_detection,
            alias_overrides_secondary=self.alias_overrides_secondary,
            no_match_status=self.no_match_status,
        )
