"""
Authenticated OpenAI API client construction.
"""

import logging

from openai import OpenAI

from config import FineTuneConfig

logger = logging.getLogger(__name__)


def create_client(config: FineTuneConfig) -> OpenAI:
    """
    Build an API client that sends `Authorization: Bearer <token>` on every request.

    SDK-level retries are turned off: every call is issued exactly once and
    failures surface to the calling step.

    Args:
        config: Run configuration holding the token and base URL

    Returns:
        Configured OpenAI client
    """
    logger.debug("Creating API client for %s", config.base_url)
    return OpenAI(api_key=config.token, base_url=config.base_url, max_retries=0)
