"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv

from btog.helpers.constants import DEFAULT_BASE_URL


# Load environment variables from .env file
load_dotenv()


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set

    Example:
        ```python
        from btog.helpers.config import get_required_env

        api_key = get_required_env("GRAFANA_API_KEY")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_bosun_url(base_url: str | None = None) -> str:
    """Get the Bosun root URL from parameter, environment or default.

    Args:
        base_url: Optional URL to use directly

    Returns:
        Bosun root URL without a trailing slash
    """
    url = base_url or get_optional_env("BOSUN_URL") or DEFAULT_BASE_URL
    return url.rstrip("/")


def get_grafana_url() -> str:
    """Get the Grafana URL used for publishing.

    Raises:
        ValueError: If GRAFANA_URL is not set
    """
    return get_required_env("GRAFANA_URL").rstrip("/")


def get_grafana_api_key() -> str:
    """Get the Grafana API key used for publishing.

    Raises:
        ValueError: If GRAFANA_API_KEY is not set
    """
    return get_required_env("GRAFANA_API_KEY")


def get_grafana_folder_id(folder_id: int | None = None) -> int:
    """Get the target Grafana folder ID (0 is the General folder).

    Raises:
        ValueError: If GRAFANA_FOLDER_ID is set but is not an integer
    """
    if folder_id is not None:
        return folder_id

    folder_id_str = get_optional_env("GRAFANA_FOLDER_ID", "0")
    try:
        return int(folder_id_str) if folder_id_str else 0
    except ValueError:
        msg = f"GRAFANA_FOLDER_ID must be an integer, got {folder_id_str!r}"
        raise ValueError(msg) from None


__all__ = [
    "get_bosun_url",
    "get_grafana_api_key",
    "get_grafana_folder_id",
    "get_grafana_url",
    "get_optional_env",
    "get_required_env",
]
