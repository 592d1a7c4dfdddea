"""Test support: a sample cache value and a helper to simulate another writer."""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Self


@dataclass
class Accounts:
    balances: dict[str, int] = field(default_factory=dict)

    def insert(self, name: str, balance: int) -> int | None:
        """Set a balance, returning the previous one."""
        previous = self.balances.get(name)
        self.balances[name] = balance
        return previous

    def encode(self) -> bytes:
        return "".join(f"{name}:{balance}\n" for name, balance in self.balances.items()).encode()

    @classmethod
    def decode(cls, data: bytes) -> Self:
        balances = {}
        for line in data.decode("utf-8").splitlines():
            name, sep, balance = line.strip().rpartition(":")
            if not sep:
                raise ValueError(f"Invalid account line: {line!r}")
            balances[name] = int(balance)
        return cls(balances)


@dataclass
class Settings:
    """JSON-backed value whose decode() fails with TypeError on a wrong shape."""

    items: dict[str, int] = field(default_factory=dict)

    def encode(self) -> bytes:
        return json.dumps(asdict(self)).encode()

    @classmethod
    def decode(cls, data: bytes) -> Self:
        return cls(**json.loads(data))


def write_external(path: Path, content: str, after_ns: int) -> None:
    """Write content as another process would, with an mtime past after_ns.

    The mtime is pushed a full second past both after_ns and the current
    mtime so coarse filesystem timestamps can't hide the change.
    """
    path.write_text(content)
    mtime = max(after_ns, path.stat().st_mtime_ns) + 1_000_000_000
    os.utime(path, ns=(mtime, mtime))
