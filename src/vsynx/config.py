"""Session settings for the orchestration layer.

Timing constants (debounce, reset delay) and limits (query floor,
suggestion cap) live here so controllers and tests share one source.
Settings may be loaded from a YAML file whose keys match the field
names; unknown keys are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BACKEND_URL: str = "http://127.0.0.1:34115"

# Seconds of quiet input before an autocomplete request is issued.
DEFAULT_DEBOUNCE_DELAY: float = 0.3

# Trimmed queries shorter than this never reach the backend.
DEFAULT_MIN_QUERY_LENGTH: int = 2

DEFAULT_SUGGESTION_LIMIT: int = 8

# Seconds a finished sync report stays visible before the orchestrator resets.
DEFAULT_SYNC_RESET_DELAY: float = 0.1

# Transport timeout for the HTTP backend (seconds).
DEFAULT_HTTP_TIMEOUT: float = 30.0

DEFAULT_SOURCE_EDITOR: str = "vscode"


@dataclass(frozen=True)
class Settings:
    """Tunable parameters for one session.

    Attributes:
        backend_url: Base URL of the extension-management backend.
        debounce_delay: Autocomplete debounce interval in seconds.
        min_query_length: Minimum trimmed query length for suggestions.
        suggestion_limit: Maximum number of suggestions shown.
        sync_reset_delay: Delay before a finished sync resets its state.
        http_timeout: Transport timeout for backend requests.
        source_editor: Editor id used as sync source and audit context.
    """

    backend_url: str = DEFAULT_BACKEND_URL
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT
    sync_reset_delay: float = DEFAULT_SYNC_RESET_DELAY
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    source_editor: str = DEFAULT_SOURCE_EDITOR

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        for name in ("debounce_delay", "sync_reset_delay", "http_timeout"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"Setting '{name}' must be non-negative, got {value}")
        if self.min_query_length < 1:
            raise ValueError(
                f"Setting 'min_query_length' must be >= 1, got {self.min_query_length}"
            )
        if self.suggestion_limit < 1:
            raise ValueError(
                f"Setting 'suggestion_limit' must be >= 1, got {self.suggestion_limit}"
            )

    def override(self, **changes: Any) -> Settings:
        """Return a copy with non-None values from ``changes`` applied."""
        applied = {k: v for k, v in changes.items() if v is not None}
        updated = replace(self, **applied)
        updated.validate()
        return updated

    @classmethod
    def from_file(cls, path: Path) -> Settings:
        """Load settings from a YAML mapping.

        Args:
            path: Path to a YAML file.

        Returns:
            Validated settings with defaults for missing keys.

        Raises:
            ValueError: If the file is not a mapping or has unknown keys.
        """
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown settings in {path}: {', '.join(unknown)}")
        settings = cls(**data)
        settings.validate()
        return settings
