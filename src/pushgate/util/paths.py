# src/pushgate/util/paths.py: XDG-compliant path resolution.
# This module resolves where the policy file lives by default. It respects the
# user's XDG environment variables on Linux and the platform conventions
# elsewhere, and lets the server administrator override the location through
# PUSHGATE_CONFIG.

import os
from pathlib import Path
import platformdirs

CONFIG_ENV_VAR = "PUSHGATE_CONFIG"

def get_xdg_config_home() -> Path:
    """Get the XDG_CONFIG_HOME path for the application."""
    return Path(platformdirs.user_config_dir("pushgate"))

def get_config_override() -> Path | None:
    """Get the policy file named by PUSHGATE_CONFIG, if set."""
    value = os.environ.get(CONFIG_ENV_VAR)
    if not value:
        return None
    return Path(os.path.expandvars(os.path.expanduser(value)))
