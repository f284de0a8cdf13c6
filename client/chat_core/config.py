"""
Paths, logging setup, config load/save, safe_print.
"""

import os
import json
import sys
import logging
from pathlib import Path


# ─── Paths ───────────────────────────────────────────────────────
# One config + log per user. Override with CHAT_CLIENT_HOME.
_HOME_ENV = "CHAT_CLIENT_HOME"

if os.environ.get(_HOME_ENV):
    BASE_DIR = Path(os.environ[_HOME_ENV])
else:
    BASE_DIR = Path(__file__).parent.parent

BASE_DIR.mkdir(parents=True, exist_ok=True)

CONFIG_FILE = BASE_DIR / "config.json"
LOG_FILE = BASE_DIR / "chat.log"


# ─── Safe print (no crash on a closed/broken stdout) ─────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except (OSError, ValueError):
        pass


# ─── Logging ─────────────────────────────────────────────────────

try:
    if LOG_FILE.exists() and LOG_FILE.stat().st_size > 1_000_000:
        LOG_FILE.write_text("")
except OSError:
    pass

logging.basicConfig(
    filename=str(LOG_FILE),
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    encoding="utf-8",
)
log = logging.getLogger("chat")

# Console only gets warnings; chat lines own stdout.
console_handler = logging.StreamHandler(sys.stderr)
console_handler.setLevel(logging.WARNING)
console_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
log.addHandler(console_handler)


# ─── Config Management ──────────────────────────────────────────

def load_config():
    """Load config from disk, applying env overrides. Returns dict or None."""
    config = None
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, "r") as f:
                config = json.load(f)
        except (json.JSONDecodeError, IOError):
            return None
        if not isinstance(config, dict):
            return None

    overrides = {
        "serverUrl": os.environ.get("CHAT_SERVER_URL"),
        "displayName": os.environ.get("CHAT_DISPLAY_NAME"),
    }
    overrides = {k: v for k, v in overrides.items() if v}
    if overrides:
        config = {**(config or {}), **overrides}
    return config


def save_config(config):
    """Save config dict to disk."""
    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)
    log.info("Config saved to %s", CONFIG_FILE)
