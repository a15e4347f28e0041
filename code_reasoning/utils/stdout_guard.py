"""Protocol-safe wrapper around the process stdout.

The stdio transport shares one stream between JSON-RPC frames and anything a
dependency might print. A single stray line corrupts the connection, so while
the guard is installed only writes that look like a JSON object or array
reach the real stream; everything else is dropped.
"""
import sys
import threading
from typing import Any, Callable, Iterable, Optional, TextIO

FRAME_PREFIXES = ("{", "[")


class StdoutGuardError(RuntimeError):
    """Raised when the guard is installed twice or removed out of order."""


def is_protocol_frame(data: str) -> bool:
    """Return True if ``data`` starts with ``{`` or ``[`` after leading whitespace."""
    return data.lstrip().startswith(FRAME_PREFIXES)


class ProtocolSafeStdout:
    """Filtering stand-in for ``sys.stdout``.

    Only one guard may own ``sys.stdout`` at a time. Use as a context manager
    so the original stream is restored on exit:

        with ProtocolSafeStdout() as out:
            out.write(json.dumps(frame) + "\\n")
    """

    _active: Optional["ProtocolSafeStdout"] = None
    _swap_lock = threading.Lock()

    def __init__(self):
        self._stream: Optional[TextIO] = None
        self._write: Optional[Callable[[str], int]] = None
        self._write_lock = threading.Lock()
        self.dropped = 0

    @classmethod
    def active(cls) -> Optional["ProtocolSafeStdout"]:
        """Return the installed guard, if any."""
        return cls._active

    def install(self) -> "ProtocolSafeStdout":
        """Swap this guard in for ``sys.stdout``."""
        with ProtocolSafeStdout._swap_lock:
            if ProtocolSafeStdout._active is not None:
                raise StdoutGuardError("stdout is already guarded")
            self._stream = sys.stdout
            # Bound to the real stream so filtering never re-enters the guard.
            self._write = self._stream.write
            self.dropped = 0
            sys.stdout = self
            ProtocolSafeStdout._active = self
        return self

    def uninstall(self) -> None:
        """Restore the original ``sys.stdout``."""
        with ProtocolSafeStdout._swap_lock:
            if ProtocolSafeStdout._active is not self:
                raise StdoutGuardError("this guard does not own stdout")
            self._stream.flush()
            sys.stdout = self._stream
            self._write = None
            ProtocolSafeStdout._active = None

    def __enter__(self) -> "ProtocolSafeStdout":
        return self.install()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.uninstall()

    def write(self, data: str) -> int:
        """Forward ``data`` unchanged if it is a frame, otherwise discard it."""
        if self._write is None:
            raise StdoutGuardError("guard is not installed")
        if not is_protocol_frame(data):
            self.dropped += 1
            return len(data)
        with self._write_lock:
            return self._write(data)

    def writelines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        if self._stream is not None:
            self._stream.flush()

    def __getattr__(self, name: str) -> Any:
        # encoding, isatty, fileno and friends come from the real stream
        stream = self.__dict__.get("_stream")
        if stream is None:
            raise AttributeError(name)
        return getattr(stream, name)
