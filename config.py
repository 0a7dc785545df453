"""
Configuration for the OpenAI Fine-Tuning Pipeline Runner

Adjust these parameters before running the pipeline to control polling and training behavior.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# ============================================================================
# OpenAI API
# ============================================================================
# Base URL every request is issued against
API_BASE_URL = "https://api.openai.com/v1"

# Environment variable consulted when -token is not given (also read from .env)
API_KEY_ENV_VAR = "OPENAI_API_KEY"

# ============================================================================
# OpenAI Model Configuration
# ============================================================================
# Base model to fine-tune from
FINE_TUNE_BASE_MODEL = "gpt-3.5-turbo-0613"

# Cost per million tokens for training (USD) - used for cost estimation
TRAINING_COST_PER_MILLION_TOKENS = 8.00

# Token counting model (should match fine-tune base model for accuracy)
TOKEN_MODEL = "gpt-3.5-turbo"

# ============================================================================
# Fine-Tuning Hyperparameters
# ============================================================================
# Set to None to use OpenAI's auto-selected defaults
N_EPOCHS = None
BATCH_SIZE = None
LEARNING_RATE_MULTIPLIER = None

# ============================================================================
# Polling
# ============================================================================
# Seconds to wait between two status checks
POLL_INTERVAL_SECONDS = 1.0

# Maximum number of status checks before giving up (None = poll forever)
# File processing usually finishes within a few minutes
MAX_FILE_POLLS = 600
# Jobs can sit in the queue for hours
MAX_JOB_POLLS = 6 * 60 * 60

# Remote statuses that end a polling loop
FILE_SUCCESS_STATUS = "processed"
FILE_FAILURE_STATUSES = frozenset({"error"})
JOB_SUCCESS_STATUS = "succeeded"
JOB_FAILURE_STATUSES = frozenset({"failed", "cancelled"})

# ============================================================================
# Training File Checks
# ============================================================================
VALID_ROLES = ("system", "user", "assistant")


# ============================================================================
# Run Configuration
# ============================================================================
@dataclass
class FineTuneConfig:
    """Settings for a single pipeline run, passed explicitly into every step."""
    file_path: Path
    token: str
    base_url: str = API_BASE_URL
    model: str = FINE_TUNE_BASE_MODEL
    poll_interval: float = POLL_INTERVAL_SECONDS
    max_file_polls: int | None = MAX_FILE_POLLS
    max_job_polls: int | None = MAX_JOB_POLLS
    hyperparameters: dict = field(default_factory=lambda: get_hyperparameters())

    def __post_init__(self):
        self.file_path = Path(self.file_path)


# ============================================================================
# Helper Functions
# ============================================================================
def get_hyperparameters() -> dict:
    """
    Build the hyperparameters dict from the configured values.

    Returns:
        Dictionary with only the hyperparameters that are set (empty means OpenAI defaults)
    """
    hyperparameters = {}
    if N_EPOCHS is not None:
        hyperparameters["n_epochs"] = N_EPOCHS
    if BATCH_SIZE is not None:
        hyperparameters["batch_size"] = BATCH_SIZE
    if LEARNING_RATE_MULTIPLIER is not None:
        hyperparameters["learning_rate_multiplier"] = LEARNING_RATE_MULTIPLIER
    return hyperparameters


def get_api_key() -> str:
    """
    Read the API key from the environment, loading a .env file first if present.

    Returns:
        The API key, or an empty string if it is not set
    """
    load_dotenv()
    return os.getenv(API_KEY_ENV_VAR, "")
