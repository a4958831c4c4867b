"""Console transport for development/debugging."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass

from .base import Transport


@dataclass
class ConsoleTransport(Transport):
    """
    Transport that writes batches to the console instead of the network.

    Every send succeeds. Useful for local development when no collector
    is running.
    """
    # Output destination
    stream: str = "stdout"  # stdout | stderr

    # Output format
    format: str = "json"  # json | pretty

    # Prefix for each line
    prefix: str = "[EVENTS] "

    async def send(self, payload: str) -> bool:
        out = sys.stdout if self.stream == "stdout" else sys.stderr

        if self.format == "pretty":
            payload = json.dumps(json.loads(payload), indent=2, ensure_ascii=False)

        print(f"{self.prefix}{payload}", file=out)
        return True
