import logging
import os
from pathlib import Path

from dentaldesk.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup configuration is unusable."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises:
        ConfigurationError: listing every problem found.
    """
    ops = rules.ops
    problems: list[str] = []

    # 1. Data dir must exist (or be creatable) and be writable
    if ops.data_dir_required:
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            problems.append(f"Data directory {data_dir} cannot be created: {e}")
        else:
            if not os.access(data_dir, os.W_OK):
                problems.append(f"Data directory {data_dir} is not writable")

    # 2. Required env
    missing = [name for name in ops.required_env if name not in os.environ]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if problems:
        raise ConfigurationError("; ".join(problems))

    # 3. Console stays locked without a password; warn but do not refuse to start
    if not (
        os.environ.get("DENTAL_SUPER_ADMIN_PASSWORD")
        or os.environ.get("DENTAL_SUPER_ADMIN_PASSWORD_HASH")
    ):
        logger.warning("Super admin password not configured; the console will refuse logins")

    if os.environ.get("DENTAL_SECRET_KEY") is None:
        logger.warning("DENTAL_SECRET_KEY not set; using the development signing key")

    logger.info("Configuration validated")
