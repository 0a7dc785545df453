import pytest

import run
from training import fine_tune


@pytest.fixture
def captured_runs(monkeypatch):
    runs = []
    monkeypatch.setattr(fine_tune, "run_pipeline", lambda config: runs.append(config))
    return runs


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.setattr(fine_tune, "get_api_key", lambda: "")


def test_missing_file_flag_prints_usage_and_exits(capsys, captured_runs):
    with pytest.raises(SystemExit) as exc:
        fine_tune.main(["-token", "sk-test"])

    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "Failed to start." in captured.out
    assert "usage:" in captured.err
    assert captured_runs == []


def test_missing_token_prints_usage_and_exits(training_file, capsys, captured_runs):
    with pytest.raises(SystemExit) as exc:
        fine_tune.main(["-file", str(training_file)])

    assert exc.value.code == 1
    assert "usage:" in capsys.readouterr().err
    assert captured_runs == []


def test_flags_become_run_config(training_file, captured_runs):
    fine_tune.main([
        "-file", str(training_file),
        "-token", "sk-test",
        "-interval", "2.5",
        "-max-job-polls", "0",
    ])

    [config] = captured_runs
    assert config.file_path == training_file
    assert config.token == "sk-test"
    assert config.model == "gpt-3.5-turbo-0613"
    assert config.poll_interval == 2.5
    assert config.max_file_polls == 600
    assert config.max_job_polls is None


def test_token_falls_back_to_environment(training_file, captured_runs, monkeypatch):
    monkeypatch.setattr(fine_tune, "get_api_key", lambda: "sk-from-env")

    fine_tune.main(["-file", str(training_file)])

    assert captured_runs[0].token == "sk-from-env"


def test_invalid_training_file_is_not_uploaded(tmp_path, capsys, captured_runs):
    bad = tmp_path / "bad.jsonl"
    bad.write_text("not json\n", encoding="utf-8")

    fine_tune.main(["-file", str(bad), "-token", "sk-test"])

    assert captured_runs == []
    assert "Training file validation failed." in capsys.readouterr().out


def test_skip_validation_uploads_anyway(tmp_path, captured_runs):
    bad = tmp_path / "bad.jsonl"
    bad.write_text("not json\n", encoding="utf-8")

    fine_tune.main(["-file", str(bad), "-token", "sk-test", "--skip-validation"])

    assert len(captured_runs) == 1


def test_dry_run_needs_no_token(training_file, capsys, captured_runs, monkeypatch):
    monkeypatch.setattr("training.estimate_cost.count_tokens", lambda text, model: 500_000)

    fine_tune.main(["-file", str(training_file), "--dry-run"])

    out = capsys.readouterr().out
    assert "DRY RUN" in out
    assert "Tokens (per epoch): 500,000" in out
    assert captured_runs == []


def test_keyboard_interrupt_exits_with_error(training_file, monkeypatch, capsys):
    def interrupted(config):
        raise KeyboardInterrupt

    monkeypatch.setattr(fine_tune, "run_pipeline", interrupted)

    with pytest.raises(SystemExit) as exc:
        fine_tune.main(["-file", str(training_file), "-token", "sk-test"])

    assert exc.value.code == 1
    assert "Interrupted." in capsys.readouterr().out


# ============================================================================
# run.py
# ============================================================================

def test_runner_dispatches_to_module(monkeypatch):
    calls = []
    monkeypatch.setattr(run, "run_module", lambda module, args: calls.append((module, args)))

    run.main(["train", "-file", "data.jsonl", "--dry-run"])

    assert calls == [("training.fine_tune", ["-file", "data.jsonl", "--dry-run"])]


def test_runner_rejects_unknown_command(capsys):
    with pytest.raises(SystemExit) as exc:
        run.main(["chat"])

    assert exc.value.code == 1
    assert "Unknown command: chat" in capsys.readouterr().out


def test_runner_help_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as exc:
        run.main(["help"])

    assert exc.value.code == 0
    assert "Commands:" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-max-file-polls", "-max-job-polls"])
def test_negative_poll_limit_is_rejected(training_file, capsys, captured_runs, flag):
    with pytest.raises(SystemExit) as exc:
        fine_tune.main(["-file", str(training_file), "-token", "sk-test", flag, "-1"])

    assert exc.value.code == 2
    assert "must be 0 or greater" in capsys.readouterr().err
    assert captured_runs == []


def test_poll_limit_accepts_zero_and_positive():
    assert fine_tune.poll_limit("0") == 0
    assert fine_tune.poll_limit("25") == 25
