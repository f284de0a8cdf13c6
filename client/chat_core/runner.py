"""
Entry point and auto-restart wrapper.
"""

import threading
import time

import requests

from .constants import (
    CLIENT_VERSION, DRAIN_INTERVAL_SEC, QUIT_PLUGIN, RESUME_DELAY_SEC, SEND_WAIT_SEC,
)
from .config import log, safe_print, load_config, save_config
from .exceptions import ChatError
from .wire import Message
from .app import ChatClient
from .poller import StopReason
from . import http_client


def _ask(prompt):
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def console_setup(config):
    """Fill in serverUrl/displayName from the console. Returns config or None."""
    config = dict(config or {})
    if not config.get("serverUrl"):
        config["serverUrl"] = _ask("Server URL: ")
    if not config.get("displayName"):
        config["displayName"] = _ask("Display name: ")
    if not config["serverUrl"] or not config["displayName"]:
        return None
    save_config(config)
    return config


def start_printer(client, stop_event):
    """Drain the client's output queue onto stdout every DRAIN_INTERVAL_SEC."""

    def printer():
        while not stop_event.wait(DRAIN_INTERVAL_SEC):
            for rsp in client.poll_messages():
                safe_print(f"{rsp.name}: {rsp.content}")
        for rsp in client.poll_messages():
            safe_print(f"{rsp.name}: {rsp.content}")

    t = threading.Thread(target=printer, name="chat-printer", daemon=True)
    t.start()
    return t


def watch_polling(client, resume_delay=RESUME_DELAY_SEC):
    """
    on_stop callback for the console: report why polling stopped and,
    after end of stream, resume polling once *resume_delay* has passed.
    """

    def resume():
        if client.restart_polling():
            log.info("Polling resumed after end of stream")

    def on_stop(reason, error):
        if error is not None:
            safe_print(f"[polling stopped: {reason.value}] {error}")
        elif reason is not StopReason.END_OF_STREAM:
            safe_print(f"[polling stopped: {reason.value}]")

        if reason is StopReason.END_OF_STREAM:
            timer = threading.Timer(resume_delay, resume)
            timer.daemon = True
            timer.start()

    return on_stop


def ensure_registered(client, display_name):
    """Re-register after a kick or a poll failure. Returns False if that fails."""
    if client.registered:
        return True
    safe_print("[reconnecting...]")
    try:
        client.register(display_name)
    except ChatError as e:
        log.warning("Re-registration failed: %s", e)
        safe_print(f"Reconnect failed: {e}")
        return False
    client.restart_polling()
    return True


def send_line(client, line, send_wait=SEND_WAIT_SEC):
    """Send one line, giving up if registration is lost for *send_wait* seconds."""
    cancel = threading.Event()
    timer = threading.Timer(send_wait, cancel.set)
    timer.daemon = True
    timer.start()
    try:
        return client.send_message(cancel, text=line)
    finally:
        timer.cancel()


def chat_loop(client, display_name, send_wait=SEND_WAIT_SEC):
    """Read and send lines until /quit, end of input or a failed reconnect."""
    cancel = threading.Event()
    while True:
        try:
            line = client.read_line(cancel)
        except KeyboardInterrupt:
            break
        if not line or line.strip() == QUIT_PLUGIN:
            break
        if not line.strip():
            continue
        if not ensure_registered(client, display_name):
            break
        try:
            if send_line(client, line, send_wait) is None:
                safe_print("[not sent] not registered")
        except ChatError as e:
            log.warning("Send failed: %s", e)
            safe_print(f"[not sent] {e}")


def main():
    """Primary client entry point."""
    safe_print("Chat Client v" + CLIENT_VERSION)
    safe_print()

    config = load_config()
    if not config or not config.get("serverUrl") or not config.get("displayName"):
        config = console_setup(config)
        if not config:
            safe_print("Server URL and display name are required.")
            return 1

    client = ChatClient(config["serverUrl"])
    client.set_on_stop(watch_polling(client))
    try:
        client.register(config["displayName"])
    except ChatError as e:
        log.error("Registration failed: %s", e)
        safe_print(f"Registration failed: {e}")
        client.stop()
        return 1

    safe_print(f"Connected as {config['displayName']}. Type {QUIT_PLUGIN} to leave.\n")
    printer_stop = threading.Event()
    printer = start_printer(client, printer_stop)

    try:
        chat_loop(client, config["displayName"])
    finally:
        try:
            client.delete(Message(plugin=QUIT_PLUGIN, content="", client_id=client.client_id))
        except ChatError as e:
            log.warning("Leaving the server failed: %s", e)
        client.stop()
        printer_stop.set()
        printer.join(DRAIN_INTERVAL_SEC * 5)
    return 0


def run_with_auto_restart():
    """
    Wrapper that restarts main() after a crash.
    Crash counter resets if the client ran for 2+ minutes (not a boot-loop).
    """
    crash_count = 0
    crash_window = 120
    max_rapid_crashes = 10

    while True:
        start_time = time.time()
        try:
            return main()
        except KeyboardInterrupt:
            safe_print("\nClient stopped by user.")
            return 0
        except (ChatError, requests.RequestException, OSError) as e:
            elapsed = time.time() - start_time
            log.error("Client crashed after %.0fs: %s", elapsed, e, exc_info=True)

            if elapsed > crash_window:
                crash_count = 0
            crash_count += 1

            if crash_count >= max_rapid_crashes:
                log.error("Too many rapid crashes (%d). Giving up.", crash_count)
                return 1
            wait = min(5 * crash_count, 60)

            log.info("Restarting in %ds (crash %d)...", wait, crash_count)
            time.sleep(wait)

            http_client.http = http_client.reset_session(http_client.http)
