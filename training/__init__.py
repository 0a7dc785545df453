"""
Fine-tuning workflow module for the OpenAI API.

This module handles:
- Training file upload and processing checks
- Fine-tuning job creation and monitoring
- Cost estimation
"""
