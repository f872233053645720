"""
API key handling for the Gemini image provider.

The gate asks a host-provided key selector whether a key is selected and can
ask it to prompt the user. Without a selector it is permissive: every check
passes and prompting does nothing, which keeps scripts and tests usable.
"""

import logging
import os
import sys
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from config import API_KEY_ENV_VARS

logger = logging.getLogger(__name__)


def get_api_key() -> Optional[str]:
    """Return the currently selected API key from the environment, if any."""
    for name in API_KEY_ENV_VARS:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


class EnvKeySelector:
    """Key selector backed by process environment variables."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def has_selected_api_key(self) -> bool:
        return get_api_key() is not None

    def open_select_key(self) -> None:
        """Ask for an API key on the terminal and store it for this process."""
        if not sys.stdin.isatty():
            logger.warning("No API key set and stdin is not interactive; "
                           f"set one of {', '.join(API_KEY_ENV_VARS)}")
            return

        try:
            key = Prompt.ask("Gemini API key", password=True, console=self.console)
        except EOFError:
            logger.warning("No API key entered")
            return
        if key.strip():
            os.environ[API_KEY_ENV_VARS[0]] = key.strip()
            logger.info("API key selected for this session")


class CredentialGate:
    """Reports whether a usable credential is selected and can prompt for one."""

    def __init__(self, selector=None):
        self.selector = selector

    def has_usable_credential(self) -> bool:
        check = getattr(self.selector, "has_selected_api_key", None)
        if check is None:
            return True
        return bool(check())

    def prompt_for_credential(self) -> None:
        select = getattr(self.selector, "open_select_key", None)
        if select is not None:
            select()
