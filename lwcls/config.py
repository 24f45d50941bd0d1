"""
Completion settings.

Settings arrive from the client as ``initializationOptions`` or through
``workspace/didChangeConfiguration``, either flat or nested under
``lwc.completion``:

    {"lwc": {"completion": {"html5": false, "hideAutoCompleteProposals": true}}}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CompletionConfiguration:
    """Per-provider enable flags and auto-close switches."""

    providers: dict[str, bool] = field(default_factory=dict)
    hide_auto_complete_proposals: bool = False
    auto_closing_tags: bool = True
    log_level: str | None = None

    def is_provider_enabled(self, provider_id: str) -> bool:
        return self.providers.get(provider_id, True) is not False

    @classmethod
    def from_settings(cls, settings: Any) -> CompletionConfiguration:
        """Build a configuration from a client settings payload."""
        if not isinstance(settings, dict):
            return cls()

        log_level = settings.get("logLevel")

        section = settings
        if isinstance(section.get("lwc"), dict):
            section = section["lwc"]
            log_level = section.get("logLevel", log_level)
        if isinstance(section.get("completion"), dict):
            section = section["completion"]

        config = cls(log_level=log_level if isinstance(log_level, str) else None)
        for key, value in section.items():
            if key == "hideAutoCompleteProposals":
                config.hide_auto_complete_proposals = bool(value)
            elif key == "autoClosingTags":
                config.auto_closing_tags = bool(value)
            elif isinstance(value, bool):
                config.providers[key] = value

        return config
