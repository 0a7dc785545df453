"""
Token counting for training examples using tiktoken.
"""

from functools import lru_cache

import tiktoken

from config import TOKEN_MODEL


@lru_cache(maxsize=None)
def get_encoding(model: str) -> tiktoken.Encoding:
    """Encoding for a model, falling back to cl100k_base for models tiktoken doesn't know."""
    try:
        return tiktoken.encoding_for_model(model)
    except KeyError:
        return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str, model: str = TOKEN_MODEL) -> int:
    """
    Count tokens in a text string.

    Args:
        text: Text to count tokens for (a serialized training example)
        model: OpenAI model name whose encoding to use

    Returns:
        Number of tokens in the text
    """
    return len(get_encoding(model).encode(text))
