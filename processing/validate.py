"""
Validate JSONL training files before uploading them for fine-tuning.

This script checks chat-format training files for:
- Parseable JSON on every line
- A non-empty "messages" list per example
- Known roles and string content
- At least one assistant message per example

Run this before training.fine_tune to catch format problems early
(the fine-tuning CLI also runs these checks unless --skip-validation is given).

Usage:
    python -m processing.validate data.jsonl                # Validate one file
    python -m processing.validate file1.jsonl file2.jsonl   # Validate multiple files
"""

import sys
import json
import argparse
from pathlib import Path
from collections import Counter

from config import VALID_ROLES

# Stop listing individual problems after this many (the file is invalid either way)
MAX_REPORTED_ISSUES = 20


def check_example(example) -> list[str]:
    """
    Check a single decoded training example.

    Args:
        example: Decoded JSON value from one line of the file

    Returns:
        List of problems found (empty if the example is valid)
    """
    if not isinstance(example, dict):
        return ["example is not a JSON object"]

    messages = example.get("messages")
    if not isinstance(messages, list) or not messages:
        return ["missing or empty 'messages' list"]

    problems = []
    has_assistant = False
    for i, message in enumerate(messages):
        if not isinstance(message, dict):
            problems.append(f"message {i} is not a JSON object")
            continue
        role = message.get("role")
        if role not in VALID_ROLES:
            problems.append(f"message {i} has unknown role: {role!r}")
        if not isinstance(message.get("content"), str):
            problems.append(f"message {i} has no string content")
        if role == "assistant":
            has_assistant = True

    if not has_assistant:
        problems.append("no assistant message")
    return problems


def validate_training_file(filepath: Path) -> dict:
    """
    Validate a single JSONL training file.

    Args:
        filepath: Path to the .jsonl file

    Returns:
        Dictionary with validation results
    """
    filepath = Path(filepath)
    results = {
        "filename": filepath.name,
        "valid": True,
        "example_count": 0,
        "role_counts": Counter(),
        "issues": []
    }

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                results["example_count"] += 1

                try:
                    example = json.loads(line)
                except json.JSONDecodeError as e:
                    problems = [f"invalid JSON ({e.msg})"]
                else:
                    problems = check_example(example)
                    if not problems:
                        for message in example["messages"]:
                            results["role_counts"][message["role"]] += 1

                if problems:
                    results["valid"] = False
                    if len(results["issues"]) < MAX_REPORTED_ISSUES:
                        results["issues"].append(f"Line {line_number}: {'; '.join(problems)}")
    except (OSError, UnicodeDecodeError) as e:
        results["valid"] = False
        results["issues"].append(f"Error reading file: {e}")
        return results

    if results["example_count"] == 0:
        results["valid"] = False
        results["issues"].append("No training examples found - file is empty")

    return results


def print_validation_result(results: dict):
    """Print the outcome of validate_training_file."""
    status = "✓" if results["valid"] else "✗"
    print(f"{status} {results['filename']}")
    print(f"    Examples: {results['example_count']:,}")
    for role in VALID_ROLES:
        count = results["role_counts"].get(role, 0)
        if count:
            print(f"    {role} messages: {count:,}")
    for issue in results["issues"]:
        print(f"    ⚠ {issue}")
    print()


def main():
    """Validate the given training files."""
    parser = argparse.ArgumentParser(
        description="Validate JSONL training files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m processing.validate data.jsonl                # Validate one file
  python -m processing.validate file1.jsonl file2.jsonl   # Validate multiple files
        """
    )
    parser.add_argument("files", nargs="+", help="Training files to validate")

    args = parser.parse_args()

    print("=" * 70)
    print("Training File Validation")
    print("=" * 70)
    print()

    valid_count = 0
    total_examples = 0

    for file_arg in args.files:
        results = validate_training_file(Path(file_arg))
        print_validation_result(results)
        total_examples += results["example_count"]
        if results["valid"]:
            valid_count += 1

    # Summary
    print("=" * 70)
    print("Summary")
    print("=" * 70)
    print()
    print(f"Files checked: {len(args.files)}")
    print(f"Valid files: {valid_count}")
    print(f"Total examples: {total_examples:,}")
    print()

    if valid_count < len(args.files):
        print("⚠ Fix the issues above before fine-tuning.")
        sys.exit(1)
    print("✓ All files are ready for fine-tuning.")


if __name__ == "__main__":
    main()
