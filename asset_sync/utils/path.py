"""
Utilities for turning asset names into download URLs.
"""

# Applied in order; the server stores every archive under a flattened name.
_NAME_REPLACEMENTS = (
    (".ab", ""),
    (".mp4", ""),
    ("/", "_"),
    ("#", "__"),
)


def sanitize_asset_name(name: str) -> str:
    """
    Converts a raw asset or pack name into the flat file stem used on the server.

    Example: 'bgm/theme.mp4' -> 'bgm_theme'
    """
    for old, new in _NAME_REPLACEMENTS:
        name = name.replace(old, new)
    return name


def build_asset_url(base_url: str, resource_version: str, name: str) -> str:
    """Builds '<base>/assets/<version>/<sanitized>.dat' for an asset or pack."""
    return (
        f"{base_url.rstrip('/')}/assets/{resource_version}/"
        f"{sanitize_asset_name(name)}.dat"
    )
