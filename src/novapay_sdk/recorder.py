"""
Request/response recorders

A recorder observes the traffic of the signed transport. Every event of one
HTTP attempt shares the attempt's request id. Recorders never influence the
outcome of a call: the transport logs and swallows anything they raise.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class Recorder(Protocol):
    """Protocol for transport observers"""

    def record_request(self, request_id: str, body: bytes) -> None:
        ...

    def record_response(self, request_id: str, body: bytes) -> None:
        ...

    def record_error(self, request_id: str, error: BaseException) -> None:
        ...


@dataclass
class RecordedEvent:
    """Single observed transport event"""
    kind: str  # 'request', 'response', 'error'
    request_id: str
    body: Optional[bytes] = None
    error: Optional[BaseException] = None
    recorded_at: float = field(default_factory=time.time)


class NopRecorder:
    """Recorder that ignores everything"""

    def record_request(self, request_id: str, body: bytes) -> None:
        pass

    def record_response(self, request_id: str, body: bytes) -> None:
        pass

    def record_error(self, request_id: str, error: BaseException) -> None:
        pass


class LoggingRecorder:
    """Recorder that writes one log line per event (sizes only, never bodies)"""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.log = log or logger
        self.level = level

    def record_request(self, request_id: str, body: bytes) -> None:
        self.log.log(self.level, f"record request: request_id={request_id} size={len(body or b'')} bytes")

    def record_response(self, request_id: str, body: bytes) -> None:
        self.log.log(self.level, f"record response: request_id={request_id} size={len(body or b'')} bytes")

    def record_error(self, request_id: str, error: BaseException) -> None:
        self.log.log(self.level, f"record error: request_id={request_id} err={error}")


class MemoryRecorder:
    """Thread-safe in-memory recorder, mostly useful in tests"""

    def __init__(self):
        self._events: List[RecordedEvent] = []
        self._lock = threading.Lock()

    def _append(self, event: RecordedEvent) -> None:
        with self._lock:
            self._events.append(event)

    def record_request(self, request_id: str, body: bytes) -> None:
        self._append(RecordedEvent('request', request_id, body=bytes(body or b"")))

    def record_response(self, request_id: str, body: bytes) -> None:
        self._append(RecordedEvent('response', request_id, body=bytes(body or b"")))

    def record_error(self, request_id: str, error: BaseException) -> None:
        self._append(RecordedEvent('error', request_id, error=error))

    @property
    def events(self) -> List[RecordedEvent]:
        with self._lock:
            return list(self._events)

    def for_request(self, request_id: str) -> List[RecordedEvent]:
        return [e for e in self.events if e.request_id == request_id]

    def of_kind(self, kind: str) -> List[RecordedEvent]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
