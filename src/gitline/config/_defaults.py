"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is a plain dict so it can be passed straight to
deep_merge, which copies rather than mutates its inputs.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "warning",
        "format": "json",
        "file": "",
        "enabled": True,
    },
    "display": {
        "color": "always",
        "sparse": False,
        "show_stash": False,
        "hash_length": 7,
    },
    "status": {
        "backend": "porcelain",
        "git": "git",
        "timeout_ms": 5000,
    },
}
