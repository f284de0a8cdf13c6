"""
chat_core — Polling Chat Client v1.0
====================================
Architecture: one background poll thread per client, input on the caller's thread.

  constants.py    → Version, sentinel names, capacities, timeouts
  config.py       → Paths, logging, config load/save, safe_print
  exceptions.py   → ChatError hierarchy
  http_client.py  → HTTP session with retry/pooling
  wire.py         → Message / Response wire structures + JSON codec
  api.py          → Server API calls (probe, register, poll, send, delete)
  state.py        → Identity (lock + condition, single source of truth)
  registration.py → RegistrationManager (register / unregister transitions)
  output.py       → OutputQueue (bounded FIFO, non-blocking drain)
  poller.py       → PollLoop (background fetch, filter, stop reasons)
  commands.py     → Input tokenizer → tagged Command
  sender.py       → Sender (cancellable input read + submit)
  app.py          → ChatClient facade
  runner.py       → main() + auto-restart wrapper
"""
