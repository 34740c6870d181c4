"""
Configuration management with environment + .env.local fallback.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
import logging

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """
    Application settings loaded from environment variables.

    Priority: Environment Variable (incl. .env.local) > Default
    """
    # Ocilion service
    ocilion_url: str = ""
    ocilion_username: str = ""
    ocilion_password: str = ""
    ocilion_login_path: str = "login"
    ocilion_cookie_name: str = ""  # Empty = first cookie returned by login

    # Odoo REST gateway
    odoo_rest_url: str = ""
    odoo_rest_api_key: str = ""
    odoo_rest_db: str = ""

    # HTTP
    request_timeout: float = 30.0

    # Runtime
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            ocilion_url=os.getenv("OCILION_URL", ""),
            ocilion_username=os.getenv("OCILION_USERNAME", ""),
            ocilion_password=os.getenv("OCILION_PASSWORD", ""),
            ocilion_login_path=os.getenv("OCILION_LOGIN_PATH", "login"),
            ocilion_cookie_name=os.getenv("OCILION_COOKIE_NAME", ""),
            odoo_rest_url=os.getenv("ODOO_REST_URL", ""),
            odoo_rest_api_key=os.getenv("ODOO_REST_API_KEY", ""),
            odoo_rest_db=os.getenv("ODOO_REST_DB", ""),
            request_timeout=_parse_timeout(os.getenv("REQUEST_TIMEOUT", "")),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_ocilion_credentials(self) -> dict:
        """Ocilion credentials as passed to the client."""
        return {
            "url": self.ocilion_url,
            "username": self.ocilion_username,
            "password": self.ocilion_password,
            "login_path": self.ocilion_login_path,
            "cookie_name": self.ocilion_cookie_name,
        }

    def get_odoo_rest_credentials(self) -> dict:
        """Odoo REST credentials as passed to the client."""
        return {
            "url": self.odoo_rest_url,
            "api_key": self.odoo_rest_api_key,
            "db": self.odoo_rest_db,
        }

    # Placeholder values that indicate unconfigured settings
    PLACEHOLDER_VALUES = {
        "https://your-ocilion-instance.com",
        "https://your-odoo-instance.com",
        "your_api_username",
        "your_api_password",
        "your-api-key",
    }

    def _is_placeholder(self, value: str) -> bool:
        """Check if a value is a placeholder."""
        return value in self.PLACEHOLDER_VALUES

    def validate(self, node_name: str) -> list[str]:
        """
        Validate settings required by a node.

        Args:
            node_name: Registered node name ("ocilion" or "odoo_rest")

        Returns:
            List of validation error messages (empty if valid)
        """
        required: dict[str, str] = {}
        if node_name == "ocilion":
            required = {
                "OCILION_URL": self.ocilion_url,
                "OCILION_USERNAME": self.ocilion_username,
                "OCILION_PASSWORD": self.ocilion_password,
            }
        elif node_name == "odoo_rest":
            required = {
                "ODOO_REST_URL": self.odoo_rest_url,
                "ODOO_REST_API_KEY": self.odoo_rest_api_key,
            }

        errors = []
        for env_name, value in required.items():
            if not value or self._is_placeholder(value):
                errors.append(f"{env_name} not configured")
        return errors

    def validate_for_node(self, node_name: str) -> None:
        """
        Validate settings required for node execution.

        Raises:
            ValueError: With clear message if configuration is invalid
        """
        errors = self.validate(node_name)
        if errors:
            error_msg = "\n".join([f"  - {e}" for e in errors])
            raise ValueError(
                f"\nConfiguration Error ({node_name}):\n{error_msg}\n\n"
                f"Please configure your .env.local file:\n"
                f"  cp .env.local.template .env.local\n"
                f"  # Then edit .env.local with your credentials\n"
            )


def _parse_timeout(raw: str) -> float:
    """Parse REQUEST_TIMEOUT, falling back to 30 seconds."""
    if not raw:
        return 30.0
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid REQUEST_TIMEOUT {raw!r}, using 30s")
        return 30.0


def _load_dotenv():
    """Load .env.local file if it exists."""
    from dotenv import load_dotenv

    # Try .env.local first, then .env
    root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    env_local = os.path.join(root, ".env.local")
    env_file = os.path.join(root, ".env")

    if os.path.exists(env_local):
        load_dotenv(env_local)
        logger.debug(f"Loaded settings from {env_local}")
    elif os.path.exists(env_file):
        load_dotenv(env_file)
        logger.debug(f"Loaded settings from {env_file}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Loads from environment/.env.local.
    """
    _load_dotenv()
    logger.info("Loading settings from environment")
    return Settings.from_environment()
