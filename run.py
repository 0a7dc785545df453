#!/usr/bin/env python3
"""
Convenience runner for the OpenAI fine-tuning pipeline.

This script provides a simple interface to run all the main commands
without needing to remember the full module paths.

Usage:
    python run.py <command> [options]

Commands:
    validate    - Validate JSONL training files
    cost        - Estimate fine-tuning costs
    train       - Upload a file and fine-tune a model (use --dry-run for preview)
    help        - Show this help message

Examples:
    python run.py validate data.jsonl
    python run.py validate file1.jsonl file2.jsonl
    python run.py cost data.jsonl
    python run.py train -file data.jsonl --dry-run
    python run.py train -file data.jsonl -token sk-...
"""

import sys
import subprocess

COMMANDS = {
    "validate": "processing.validate",
    "cost": "training.estimate_cost",
    "train": "training.fine_tune",
}


def show_help():
    """Display help message."""
    print(__doc__)


def run_module(module_path: str, extra_args: list = None):
    """Run a Python module with optional extra arguments."""
    cmd = [sys.executable, "-m", module_path]
    if extra_args:
        cmd.extend(extra_args)
    
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        sys.exit(e.returncode)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


def main(argv: list = None):
    """Main entry point."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        sys.exit(0)
    
    command = argv[0].lower()
    extra_args = argv[1:]
    
    if command in ["help", "-h", "--help"]:
        show_help()
        sys.exit(0)
    
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print("\nAvailable commands: validate, cost, train, help")
        print("\nRun 'python run.py help' for more information.")
        sys.exit(1)
    
    run_module(COMMANDS[command], extra_args)


if __name__ == "__main__":
    main()
