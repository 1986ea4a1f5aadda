"""
Platform capability probing.

Capabilities are probed once at startup and injected into the submission
workflow instead of being checked ad hoc at each call site.
"""

import os
import sys
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from resume_tailor.contexts.output.logger import _log_debug


class Capability(Enum):
    UNSUPPORTED = "unsupported"
    SUPPORTED_UNTESTED = "supported-untested"
    SUPPORTED = "supported"

    @property
    def available(self) -> bool:
        """Whether a strategy depending on this capability should be attempted."""
        return self is not Capability.UNSUPPORTED


@dataclass(frozen=True)
class ClientCapabilities:
    """
    Attributes:
        directory_access: Remembered folders can be written to directly
        save_dialog: An interactive "save as" prompt can be shown
    """

    directory_access: Capability = Capability.SUPPORTED_UNTESTED
    save_dialog: Capability = Capability.UNSUPPORTED


def _probe_directory_access(probe_dir: Path) -> Capability:
    """Create and remove a scratch file to confirm local directory writes work."""
    try:
        probe_dir.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=".probe-", dir=probe_dir)
        os.close(fd)
        os.unlink(path)
    except OSError as e:
        _log_debug(f"Directory access probe failed in {probe_dir}: {e}")
        return Capability.UNSUPPORTED
    return Capability.SUPPORTED


def probe_capabilities(
    probe_dir: Optional[Path] = None,
    interactive: Optional[bool] = None,
) -> ClientCapabilities:
    """
    Probe what the current environment can do.

    Args:
        probe_dir: Directory used to test file writes. None skips the test and
                   reports directory access as supported-untested.
        interactive: Whether prompts can be shown. None means "stdin is a TTY".

    Returns:
        ClientCapabilities
    """
    if probe_dir is None:
        directory_access = Capability.SUPPORTED_UNTESTED
    else:
        directory_access = _probe_directory_access(probe_dir)

    if interactive is None:
        interactive = sys.stdin is not None and sys.stdin.isatty()
    save_dialog = Capability.SUPPORTED if interactive else Capability.UNSUPPORTED

    capabilities = ClientCapabilities(directory_access=directory_access, save_dialog=save_dialog)
    _log_debug(
        f"Capabilities: directory_access={directory_access.value}, save_dialog={save_dialog.value}"
    )
    return capabilities
