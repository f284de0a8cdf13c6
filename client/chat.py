"""
Polling Chat Client — console front end
=======================================
Registers a display name with the chat server, prints inbound messages
as they arrive and sends every line you type.

  Hi all                 → broadcast to everyone
  /private <id> hello    → private message to client <id>
  /users                 → list connected users
  /quit                  → leave

Usage:
    python chat.py
"""

import sys

from chat_core.runner import run_with_auto_restart


if __name__ == "__main__":
    sys.exit(run_with_auto_restart())
