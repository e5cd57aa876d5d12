"""Name normalization between the local tree and the bucket.

Local paths and remote keys are both reduced to relative names so they
can be compared directly:

    local:  <root>/photos/a.jpg      -> photos/a.jpg
    remote: <prefix>photos/a.jpg     -> photos/a.jpg
"""

from __future__ import annotations

# Remote paths that mean "the bucket root"
_SAME_LOCATION = ("", ".", "./", "/")


def relative_name(root: str, path: str) -> str:
    """Strip the root prefix and any leading separator from a path.

    Args:
        root: The local root directory as given by the user.
        path: A path known to live under root.

    Returns:
        The relative name, with no leading separator.

    Raises:
        ValueError: If path is not under root. This is a contract
            violation by the caller.
    """
    if not path.startswith(root):
        raise ValueError(f"Contract violation: {path!r} is not under {root!r}")
    name = path[len(root):]
    return name.lstrip("/")


def key_prefix(remote_path: str) -> str:
    """Derive the key prefix for a destination path.

    Returns '' for the bucket root, otherwise the path with exactly one
    trailing '/'. Leading separators are dropped since S3 keys never
    start with one.
    """
    if remote_path in _SAME_LOCATION:
        return ""
    prefix = remote_path.lstrip("/")
    while prefix.startswith("./"):
        prefix = prefix[2:]
    if not prefix:
        return ""
    if not prefix.endswith("/"):
        prefix = f"{prefix}/"
    return prefix


def remote_key(prefix: str, name: str) -> str:
    """Build the full object key for a relative name."""
    return prefix + name


def strip_prefix(prefix: str, key: str) -> str:
    """Reduce a listed key to its relative name.

    Raises:
        ValueError: If key does not start with prefix.
    """
    if not key.startswith(prefix):
        raise ValueError(f"Contract violation: {key!r} is not under prefix {prefix!r}")
    return key[len(prefix):]
