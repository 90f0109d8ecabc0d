"""
Substring allowlist restricting which asset names take part in a sync.
"""

from collections.abc import Iterable


class Whitelist:
    """
    A name passes when no whitelist is configured, or when at least one of the
    configured patterns occurs somewhere in the name.
    """

    def __init__(self, patterns: Iterable[str] | None = None):
        self.patterns: tuple[str, ...] | None = (
            None if patterns is None else tuple(patterns)
        )

    @property
    def is_configured(self) -> bool:
        """True when a whitelist is present, even an empty one."""
        return self.patterns is not None

    def passes(self, name: str) -> bool:
        if self.patterns is None:
            return True
        return any(pattern in name for pattern in self.patterns)

    def __repr__(self) -> str:
        return f"Whitelist({self.patterns!r})"
