"""Service configuration loaded from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from sponsorgate.blockchain.client import DEFAULT_GAS_BUDGET, FULLNODE_URLS, get_fullnode_url
from sponsorgate.errors import ConfigurationError
from sponsorgate.services.detection import DETECTORS
from sponsorgate.sponsor.client import ENOKI_API_BASE_URL

REQUIRED_VARIABLES = (
    "ENOKI_API_KEY",
    "PACKAGE_ID",
    "REGISTRY_ID",
    "INDEXER_CAP_ID",
    "ADMIN_SECRET_KEY",
)


@dataclass(frozen=True)
class Settings:
    """
    Everything the service needs to start.

    Read once at startup; a missing or invalid value raises
    ConfigurationError and the server does not begin serving.
    """

    enoki_api_key: str
    package_id: str
    registry_id: str
    indexer_cap_id: str
    admin_secret_key: str
    network: str = "testnet"
    enoki_base_url: str = ENOKI_API_BASE_URL
    rpc_url: Optional[str] = None
    registry_module: str = "dapp_registry"
    detection_strategy: str = "substring"
    http_timeout: float = 30.0
    gas_budget: int = DEFAULT_GAS_BUDGET
    port: int = 3001

    @property
    def sui_rpc_url(self) -> str:
        return self.rpc_url or get_fullnode_url(self.network)

    def __repr__(self) -> str:
        return (
            f"Settings(network={self.network!r}, rpc_url={self.sui_rpc_url!r}, "
            f"package_id={self.package_id!r}, registry_id={self.registry_id!r})"
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ after
                loading ``env_file`` or ``./.env`` if present)
            env_file: Optional dotenv file

        Raises:
            ConfigurationError: If a required variable is missing or a
                value is invalid
        """
        if environ is None:
            load_dotenv(env_file or Path.cwd() / ".env")
            environ = os.environ

        missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        network = environ.get("SUI_NETWORK", "testnet")
        if network not in FULLNODE_URLS:
            raise ConfigurationError(
                f"SUI_NETWORK must be one of {', '.join(FULLNODE_URLS)}, got {network!r}"
            )

        detection = environ.get("INTERACTION_DETECTION", "substring")
        if detection not in DETECTORS:
            raise ConfigurationError(
                f"INTERACTION_DETECTION must be one of {', '.join(DETECTORS)}, got {detection!r}"
            )

        try:
            http_timeout = float(environ.get("HTTP_TIMEOUT", "30"))
            gas_budget = int(environ.get("GAS_BUDGET", str(DEFAULT_GAS_BUDGET)))
            port = int(environ.get("PORT", "3001"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        return cls(
            enoki_api_key=environ["ENOKI_API_KEY"],
            package_id=environ["PACKAGE_ID"],
            registry_id=environ["REGISTRY_ID"],
            indexer_cap_id=environ["INDEXER_CAP_ID"],
            admin_secret_key=environ["ADMIN_SECRET_KEY"],
            network=network,
            enoki_base_url=environ.get("ENOKI_API_BASE_URL", ENOKI_API_BASE_URL),
            rpc_url=environ.get("SUI_RPC_URL") or None,
            registry_module=environ.get("REGISTRY_MODULE", "dapp_registry"),
            detection_strategy=detection,
            http_timeout=http_timeout,
            gas_budget=gas_budget,
            port=port,
        )
