"""Configuration loading for a site.

The configuration file is optional. Anything wrong with it is reported as a
warning and the built-in defaults apply, so maintenance runs never stop on a
bad config.
"""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from sitekeeper.consts import CONFIG_FILENAME, SITE_URL_ENV_VAR
from sitekeeper.models.model_config import SiteConfig

logger = logging.getLogger(__name__)


def load_site_config(site_root: Path | str, env: dict[str, str] | None = None) -> SiteConfig:
    """Load sitemap-config.json from the site root.

    Args:
        site_root: Site root directory.
        env: Environment mapping for the base URL override (defaults to os.environ).

    Returns:
        SiteConfig with the environment override applied.
    """
    env = os.environ if env is None else env
    config_path = Path(site_root) / CONFIG_FILENAME
    config = SiteConfig()

    if not config_path.exists():
        logger.warning(f"No {CONFIG_FILENAME} in {site_root}, using defaults")
    else:
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("top-level value must be an object")
            config = SiteConfig.model_validate(raw)
            logger.debug(f"Loaded configuration from {config_path}")
        except (OSError, UnicodeDecodeError, ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Ignoring unusable {config_path}: {e}. Using defaults")
            config = SiteConfig()

    override = env.get(SITE_URL_ENV_VAR, "").strip()
    if override:
        logger.info(f"Base URL overridden by {SITE_URL_ENV_VAR}: {override}")
        config = config.model_copy(update={"site_url": override})

    return config
