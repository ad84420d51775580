import logging
import subprocess
from typing import Optional

from config_paths import detect_clipboard_commands

logger = logging.getLogger(__name__)


class Clipboard:
    """Thin wrapper over external clipboard tools (wl-copy, xclip, pbcopy)."""

    def __init__(self, config=None):
        config = config or {}
        self.copy_command = config.get("CLIPBOARD_COPY_COMMAND")
        self.paste_command = config.get("CLIPBOARD_PASTE_COMMAND")
        if not self.copy_command or not self.paste_command:
            copy_cmd, paste_cmd = detect_clipboard_commands()
            self.copy_command = self.copy_command or copy_cmd
            self.paste_command = self.paste_command or paste_cmd

    def copy(self, text: str) -> bool:
        if not self.copy_command:
            logger.debug("No clipboard copy command available")
            return False
        try:
            subprocess.run(self.copy_command, input=text, text=True, check=True, timeout=2)
            return True
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Clipboard copy failed: %s", e)
            return False

    def paste(self) -> Optional[str]:
        if not self.paste_command:
            logger.debug("No clipboard paste command available")
            return None
        try:
            result = subprocess.run(
                self.paste_command,
                capture_output=True,
                text=True,
                check=True,
                timeout=2,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Clipboard paste failed: %s", e)
            return None
        out = result.stdout
        return out if isinstance(out, str) else None
