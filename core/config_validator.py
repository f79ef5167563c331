# core/config_validator.py

from typing import List
from core.config import settings
from core.logging_config import logger


def validate_required_config() -> List[str]:
    """
    Validate that all required environment variables are set.
    Returns list of missing required variables.
    """
    missing = []

    if not settings.SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not settings.SUPABASE_ANON_KEY and not settings.SUPABASE_SERVICE_ROLE_KEY:
        missing.append("SUPABASE_ANON_KEY or SUPABASE_SERVICE_ROLE_KEY")

    return missing


def validate_optional_config() -> List[str]:
    """
    Optional but recommended configuration (warnings only).
    """
    warnings = []

    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        warnings.append("SUPABASE_SERVICE_ROLE_KEY (needed by the rent reminder job)")
    if not settings.SUPABASE_ANON_KEY:
        warnings.append("SUPABASE_ANON_KEY (row-level policies bypassed without it)")

    return warnings


def validate_config_on_startup(strict: bool = False):
    """
    Validate configuration on application startup.
    Logs missing settings; raises RuntimeError only when strict
    (production) and critical config is missing.
    """
    missing_required = validate_required_config()

    if missing_required:
        error_msg = f"Missing required environment variables: {', '.join(missing_required)}"
        logger.error(error_msg)
        if strict:
            raise RuntimeError(error_msg)

    for warning in validate_optional_config():
        logger.warning(f"Optional configuration missing: {warning}")

    if not missing_required:
        logger.info("Configuration validation passed")
