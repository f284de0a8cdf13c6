"""
Constants, sentinel names, capacities and timeouts.
"""

CLIENT_VERSION = "1.0.0"

# ─── Protocol ────────────────────────────────────────────────────
INACTIVE_FLAG = "inactive"         # Response.name the server uses to kick idle clients
COMMAND_PREFIX = "/"
DEFAULT_PLUGIN = "/broadcast"
REGISTER_PLUGIN = "/register"
QUIT_PLUGIN = "/quit"
CLIENT_ID_BYTES = 32               # secrets.token_urlsafe(32)

# ─── Queues & threads ────────────────────────────────────────────
OUTPUT_QUEUE_SIZE = 10_000         # Backpressure onto the poll loop when full
AWAIT_SLICE_SEC = 0.5              # Condition wait slice (lets stop() through)
CANCEL_CHECK_SEC = 0.05            # How often a pending read checks for cancel
DRAIN_INTERVAL_SEC = 0.2           # Console printer drains every 200ms
RESUME_DELAY_SEC = 1.0             # Console resumes polling this long after end of stream
SEND_WAIT_SEC = 5.0                # Console gives up on a send still waiting for registration

# ─── Network ─────────────────────────────────────────────────────
API_TIMEOUT = 15                   # Seconds for register/send/delete
POLL_TIMEOUT = None                # Long-poll: no timeout, a hung call blocks the loop
