"""
Structured JSON event log for selection runs.

One JSON record per line, each with a timestamp and an event name:
    {"ts": 1640995200.0, "event": "select_done", "n_selected": 12, "stop_reason": "budget"}

Used by the command line so batch drivers can parse run outcomes.
"""

import json, sys, time

def log(event: str, stream=None, **fields):
    """
    Write a JSON event record.

    Args:
        event: Event name (e.g. "select_start", "select_done")
        stream: Text stream to write to (default: sys.stdout)
        **fields: JSON-serializable key-value pairs added to the record
    """
    rec = {"ts": time.time(), "event": event}
    rec.update(fields)
    out = stream if stream is not None else sys.stdout
    out.write(json.dumps(rec) + "\n")
    out.flush()
