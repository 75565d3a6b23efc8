"""
Cache Proxy - Key Mapper

Converts hierarchical resource paths into flat store keys.
"""

SEPARATOR = "/"
DELIMITER = "."


def to_store_key(resource_path: str | None) -> str | None:
    """
    Map a resource path to a flat cache key.

    Every "/" becomes "." so that "foo/bar" is stored under "foo.bar".
    An empty or missing path yields None, which the operation engine reads
    as batch mode.

    Args:
        resource_path: Hierarchical resource locator (may be empty)

    Returns:
        Flat cache key, or None when the path addresses no single key
    """
    if not resource_path:
        return None
    return resource_path.replace(SEPARATOR, DELIMITER)
