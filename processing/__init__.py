"""
Training data checks for the fine-tuning pipeline.

This module handles:
- JSONL training file validation
- Token counting
"""
