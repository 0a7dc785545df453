"""
Estimate training costs before fine-tuning.

This script reads the training files and calculates the estimated cost
based on token counts and the configured cost per million tokens.

Usage:
    python -m training.estimate_cost data.jsonl
    python -m training.estimate_cost file1.jsonl file2.jsonl
"""

import json
import argparse
from pathlib import Path

from config import TRAINING_COST_PER_MILLION_TOKENS, TOKEN_MODEL
from processing.tokenizer import count_tokens


def count_file_tokens(filepath: Path) -> tuple:
    """
    Count tokens and examples in a training file.

    Args:
        filepath: Path to the JSONL training file

    Returns:
        Tuple of (total_tokens, num_examples, min_tokens, max_tokens)
    """
    total_tokens = 0
    num_examples = 0
    min_tokens = float('inf')
    max_tokens = 0

    with open(filepath, 'r', encoding='utf-8') as f:
        for line in f:
            if not line.strip():
                continue
            example = json.loads(line)
            # Count tokens the same way as OpenAI does (entire JSON string)
            example_json = json.dumps(example, ensure_ascii=False)
            tokens = count_tokens(example_json, TOKEN_MODEL)

            total_tokens += tokens
            num_examples += 1
            min_tokens = min(min_tokens, tokens)
            max_tokens = max(max_tokens, tokens)

    if num_examples == 0:
        min_tokens = 0

    return total_tokens, num_examples, min_tokens, max_tokens


def estimate_cost(tokens: int, epochs: int) -> float:
    """Estimated training cost in USD for the given tokens per epoch."""
    return (tokens * epochs / 1_000_000) * TRAINING_COST_PER_MILLION_TOKENS


def print_cost_table(tokens: int):
    """Print estimated costs for 1-3 epochs."""
    print("Estimated Training Costs:")
    print("-" * 40)
    for epochs in [1, 2, 3]:
        print(f"  {epochs} epoch{'s' if epochs > 1 else ' '}: ${estimate_cost(tokens, epochs):.2f}")
    print()
    print(f"Cost per million tokens: ${TRAINING_COST_PER_MILLION_TOKENS:.2f}")


def main():
    """Estimate training costs for the given files."""
    parser = argparse.ArgumentParser(description="Estimate fine-tuning cost for training files")
    parser.add_argument("files", nargs="+", help="JSONL training files")
    args = parser.parse_args()

    print("=" * 70)
    print("Training Cost Estimation")
    print("=" * 70)
    print()

    total_tokens_all = 0
    total_examples_all = 0

    print(f"{'File':<30} {'Examples':>10} {'Tokens':>12} {'Avg Tok':>10} {'Est. Cost':>12}")
    print("-" * 78)

    for file_arg in args.files:
        filepath = Path(file_arg)

        if not filepath.exists():
            print(f"{filepath.name:<30} {'(file not found)':<45}")
            continue

        tokens, examples, min_tok, max_tok = count_file_tokens(filepath)
        avg_tokens = tokens / examples if examples > 0 else 0

        # Estimate cost (assumes ~2 epochs on average)
        estimated_cost = estimate_cost(tokens, 2)

        print(f"{filepath.name:<30} {examples:>10,} {tokens:>12,} {avg_tokens:>10.1f} ${estimated_cost:>11.2f}")

        total_tokens_all += tokens
        total_examples_all += examples

    print("-" * 78)

    avg_tokens_all = total_tokens_all / total_examples_all if total_examples_all > 0 else 0
    total_estimated_cost = estimate_cost(total_tokens_all, 2)

    print(f"{'TOTAL':<30} {total_examples_all:>10,} {total_tokens_all:>12,} {avg_tokens_all:>10.1f} ${total_estimated_cost:>11.2f}")
    print()
    print_cost_table(total_tokens_all)
    print()
    print("Note: OpenAI auto-selects epochs based on dataset size (typically 1-3).")
    print("Actual costs may vary. Check OpenAI's pricing page for current rates.")
    print()


if __name__ == "__main__":
    main()
