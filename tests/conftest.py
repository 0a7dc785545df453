from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from config import FineTuneConfig


def response(**fields):
    """Stand-in for an SDK response object carrying only the given fields."""
    return SimpleNamespace(**fields)


@pytest.fixture
def training_file(tmp_path):
    path = tmp_path / "train.jsonl"
    path.write_text(
        '{"messages": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]}\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def config(training_file):
    return FineTuneConfig(
        file_path=training_file,
        token="sk-test",
        poll_interval=0,
        max_file_polls=None,
        max_job_polls=None,
        hyperparameters={},
    )


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def no_sleep():
    return MagicMock()
