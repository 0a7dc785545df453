"""
Field extraction from API responses.

Responses may arrive as SDK objects or as decoded JSON mappings. Missing and
null fields both come back as an empty string, so callers only need to check
for emptiness.
"""


def get_field(response, name: str) -> str:
    """
    Pull a named field out of a response as a string.

    Args:
        response: SDK response object, dict, or None
        name: Field name (e.g. "id", "status", "fine_tuned_model")

    Returns:
        The field value as a string, or "" if absent or null
    """
    if response is None:
        return ""
    if isinstance(response, dict):
        value = response.get(name)
    else:
        value = getattr(response, name, None)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
