"""
Fine-tune an OpenAI model from a local training file.

This script:
1. Uploads the JSONL training file to OpenAI
2. Waits until the file is processed
3. Creates a fine-tuning job referencing the file
4. Monitors job progress until completion
5. Prints the resulting fine-tuned model ID

Usage:
    python -m training.fine_tune -file data.jsonl -token sk-...
    python -m training.fine_tune -file data.jsonl               # Token read from OPENAI_API_KEY / .env
    python -m training.fine_tune -file data.jsonl --dry-run     # Validate and estimate cost, no API calls
"""

import sys
import time
import logging
import argparse
from enum import Enum
from contextlib import nullcontext
from pathlib import Path

from openai import OpenAI, OpenAIError
from rich.markup import escape

from config import (
    FineTuneConfig,
    API_BASE_URL,
    FINE_TUNE_BASE_MODEL,
    POLL_INTERVAL_SECONDS,
    MAX_FILE_POLLS,
    MAX_JOB_POLLS,
    FILE_SUCCESS_STATUS,
    FILE_FAILURE_STATUSES,
    JOB_SUCCESS_STATUS,
    JOB_FAILURE_STATUSES,
    get_api_key,
)
from processing.validate import validate_training_file, print_validation_result
from training.client import create_client
from training.console import console, success, warning, error, plain, elapsed_since
from training.estimate_cost import count_file_tokens, print_cost_table
from training.fields import get_field

logger = logging.getLogger(__name__)


class PollResult(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


# ============================================================================
# Remote Calls
# ============================================================================

def upload_file(client: OpenAI, config: FineTuneConfig) -> str:
    """
    Upload the training file as multipart form data and return its file ID.

    Returns:
        The remote file ID, or "" if the upload failed
    """
    logger.debug("Uploading %s", config.file_path)
    try:
        with open(config.file_path, 'rb') as f:
            response = client.files.create(file=f, purpose="fine-tune")
    except OSError as e:
        error(f"Failed to open file: {e}")
        return ""
    except OpenAIError as e:
        error(f"Failed to upload file: {e}")
        return ""

    file_id = get_field(response, "id")
    if not file_id:
        error("Upload response did not contain a file ID")
    return file_id


def get_file_status(client: OpenAI, file_id: str) -> str:
    """Fetch the processing status of an uploaded file ("" if the request failed)."""
    try:
        response = client.files.retrieve(file_id)
    except OpenAIError as e:
        error(f"Failed to fetch file status: {e}")
        return ""
    return get_field(response, "status")


def create_fine_tuning_job(client: OpenAI, file_id: str, config: FineTuneConfig) -> str:
    """
    Create a fine-tuning job for an uploaded file.

    Args:
        client: API client
        file_id: ID returned by upload_file, passed through unmodified
        config: Run configuration (base model and hyperparameters)

    Returns:
        The job ID, or "" if the job could not be created
    """
    request = {"training_file": file_id, "model": config.model}
    # Only include hyperparameters if any are set (otherwise OpenAI auto-selects)
    if config.hyperparameters:
        request["hyperparameters"] = config.hyperparameters
    logger.debug("Creating fine-tuning job: %s", request)

    try:
        response = client.fine_tuning.jobs.create(**request)
    except OpenAIError as e:
        error(f"Failed to create fine-tuning job: {e}")
        return ""

    job_id = get_field(response, "id")
    if not job_id:
        error("Job creation response did not contain a job ID")
    return job_id


def get_job_status(client: OpenAI, job_id: str) -> str:
    """Fetch the status of a fine-tuning job ("" if the request failed)."""
    try:
        response = client.fine_tuning.jobs.retrieve(job_id)
    except OpenAIError as e:
        error(f"Failed to fetch job status: {e}")
        return ""
    return get_field(response, "status")


def get_fine_tuned_model(client: OpenAI, job_id: str) -> str:
    """Fetch the finished job once more and return its fine-tuned model name ("" if none)."""
    try:
        response = client.fine_tuning.jobs.retrieve(job_id)
    except OpenAIError as e:
        error(f"Failed to fetch fine-tuning job: {e}")
        return ""
    return get_field(response, "fine_tuned_model")


# ============================================================================
# Polling
# ============================================================================

def poll_until(
    check_status,
    success_status: str,
    failure_statuses: frozenset,
    max_polls: int | None,
    interval: float,
    description: str,
    sleep=time.sleep
) -> PollResult:
    """
    Call check_status once per interval until it reports a terminal status.

    Any status other than success_status or one of failure_statuses (including
    "" from a failed request) triggers another cycle.

    Args:
        check_status: Zero-argument callable returning the current remote status
        success_status: Status that ends polling successfully
        failure_statuses: Statuses that end polling as a failure
        max_polls: Maximum number of status checks, or None to poll forever
        interval: Seconds to sleep between checks
        description: Progress text shown while waiting
        sleep: Sleep function (injectable for tests)

    Returns:
        PollResult describing how polling ended
    """
    start_time = time.monotonic()
    polls = 0
    last_status = None

    # Spinner on a terminal; one plain line per status change otherwise (logs, CI)
    if console.is_terminal:
        display = console.status(f"{description}... Elapsed Time: 0.00 seconds")
    else:
        display = nullcontext()

    with display as status_display:
        while True:
            status = check_status()
            polls += 1
            logger.debug("Poll %d: status=%r", polls, status)

            if status == success_status:
                return PollResult.SUCCEEDED
            if status in failure_statuses:
                error(f"Remote status: {status}")
                return PollResult.FAILED
            if max_polls is not None and polls >= max_polls:
                error(f"Gave up after {polls} status checks")
                return PollResult.TIMED_OUT

            progress = f"{description}... Status: {status or 'unknown'} | {elapsed_since(start_time)}"
            if status_display is not None:
                status_display.update(escape(progress))
            elif status != last_status:
                warning(progress)
            last_status = status
            sleep(interval)


def wait_for_file(client: OpenAI, file_id: str, config: FineTuneConfig, sleep=time.sleep) -> PollResult:
    """Wait until the uploaded file is processed."""
    return poll_until(
        lambda: get_file_status(client, file_id),
        FILE_SUCCESS_STATUS,
        FILE_FAILURE_STATUSES,
        config.max_file_polls,
        config.poll_interval,
        "Waiting for file processing",
        sleep=sleep,
    )


def wait_for_job(client: OpenAI, job_id: str, config: FineTuneConfig, sleep=time.sleep) -> PollResult:
    """Wait until the fine-tuning job succeeds."""
    return poll_until(
        lambda: get_job_status(client, job_id),
        JOB_SUCCESS_STATUS,
        JOB_FAILURE_STATUSES,
        config.max_job_polls,
        config.poll_interval,
        "Waiting for fine-tuning job to complete",
        sleep=sleep,
    )


# ============================================================================
# Pipeline
# ============================================================================

def run_pipeline(config: FineTuneConfig, client: OpenAI | None = None, sleep=time.sleep) -> str:
    """
    Run upload -> file processing -> job creation -> job completion -> model retrieval.

    Stops at the first failing step after reporting it.

    Returns:
        The fine-tuned model name, or "" if the run failed or produced no model
    """
    if client is None:
        client = create_client(config)

    start_time = time.monotonic()
    warning(f"Starting... {elapsed_since(start_time)}")

    # Upload the training data file
    file_id = upload_file(client, config)
    if not file_id:
        error("File upload failed.")
        return ""
    success(f"File uploaded successfully. File ID: {file_id} {elapsed_since(start_time)}")

    # Wait for the uploaded file to be processed
    start_time = time.monotonic()
    if wait_for_file(client, file_id, config, sleep=sleep) is not PollResult.SUCCEEDED:
        error("File processing failed.")
        return ""
    success("File processing completed.")
    warning(f"Starting Fine-tuning Job... {elapsed_since(start_time)}")

    # Create the fine-tuning job
    job_id = create_fine_tuning_job(client, file_id, config)
    if not job_id:
        error("Fine-tuning job creation failed.")
        return ""
    success(f"Fine-tuning job created successfully. Job ID: {job_id}")

    # Wait for the fine-tuning job to complete
    start_time = time.monotonic()
    if wait_for_job(client, job_id, config, sleep=sleep) is not PollResult.SUCCEEDED:
        error("Fine-tuning job did not succeed.")
        return ""
    success("Fine-tuning job completed.")
    warning(elapsed_since(start_time))

    # Get the fine-tuned model from the completed job
    fine_tuned_model = get_fine_tuned_model(client, job_id)
    if fine_tuned_model:
        plain()
        plain(f"Fine-tuned model ready to use: {fine_tuned_model}")
    else:
        plain("No fine-tuned model available.")
    return fine_tuned_model


def dry_run_summary(file_path: Path):
    """Validate the training file and show the estimated cost without making API calls."""
    print("=" * 60)
    print("DRY RUN - No API calls will be made")
    print("=" * 60)
    print()

    result = validate_training_file(file_path)
    print_validation_result(result)
    if not result["valid"]:
        return

    tokens, examples, min_tok, max_tok = count_file_tokens(file_path)
    print(f"Examples: {examples:,}")
    print(f"Tokens (per epoch): {tokens:,} (min {min_tok:,}, max {max_tok:,} per example)")
    print()
    print_cost_table(tokens)
    print()
    print("To proceed with fine-tuning, run without --dry-run flag.")


# ============================================================================
# CLI
# ============================================================================

def poll_limit(value: str) -> int:
    """argparse type for the poll caps: a whole number, 0 meaning no limit."""
    try:
        limit = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if limit < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {limit}")
    return limit


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Upload a training file and fine-tune an OpenAI model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m training.fine_tune -file data.jsonl -token sk-...
  python -m training.fine_tune -file data.jsonl --dry-run
  python -m training.fine_tune -file data.jsonl -max-job-polls 0   # Poll the job forever
        """
    )
    parser.add_argument("-file", help="Path to the training file (JSONL)")
    parser.add_argument("-token", help="OpenAI API token (defaults to OPENAI_API_KEY)")
    parser.add_argument("-model", default=FINE_TUNE_BASE_MODEL, help=f"Base model (default: {FINE_TUNE_BASE_MODEL})")
    parser.add_argument("-base-url", default=API_BASE_URL, help=f"API base URL (default: {API_BASE_URL})")
    parser.add_argument(
        "-interval",
        type=float,
        default=POLL_INTERVAL_SECONDS,
        help=f"Seconds between status checks (default: {POLL_INTERVAL_SECONDS})"
    )
    parser.add_argument(
        "-max-file-polls",
        type=poll_limit,
        default=MAX_FILE_POLLS,
        help=f"Maximum file status checks, 0 for no limit (default: {MAX_FILE_POLLS})"
    )
    parser.add_argument(
        "-max-job-polls",
        type=poll_limit,
        default=MAX_JOB_POLLS,
        help=f"Maximum job status checks, 0 for no limit (default: {MAX_JOB_POLLS})"
    )
    parser.add_argument("--dry-run", action="store_true", help="Validate and estimate cost without making API calls")
    parser.add_argument("--skip-validation", action="store_true", help="Upload without checking the file locally")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None):
    """Fine-tune a model from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    token = args.token or get_api_key()
    if not args.file or (not token and not args.dry_run):
        error("Failed to start.")
        parser.print_help(sys.stderr)
        sys.exit(1)

    file_path = Path(args.file)

    if args.dry_run:
        dry_run_summary(file_path)
        return

    if not args.skip_validation:
        result = validate_training_file(file_path)
        if not result["valid"]:
            print_validation_result(result)
            error("Training file validation failed.")
            return

    config = FineTuneConfig(
        file_path=file_path,
        token=token,
        base_url=args.base_url,
        model=args.model,
        poll_interval=args.interval,
        max_file_polls=args.max_file_polls or None,
        max_job_polls=args.max_job_polls or None,
    )

    try:
        run_pipeline(config)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
