"""Progressive web app support."""

from .install_prompt import InstallPromptStore

__all__ = ["InstallPromptStore"]
