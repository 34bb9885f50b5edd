"""Background monitors that periodically print server statistics."""

import sys
import threading


class Monitor:
    """Runs ``process_monitoring`` on a background thread between begin and end."""

    def __init__(self, interval=1.0):
        self.interval = interval
        self._stop = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and not self._stop.is_set()

    def begin(self):
        self._stop.clear()
        self._thread = threading.Thread(target=self.process_monitoring, daemon=True)
        self._thread.start()

    def end(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def process_monitoring(self):
        """Work done on the monitor thread; the base monitor does nothing."""


class NetMonitor(Monitor):
    """Reports session count and send/receive completions per interval."""

    def __init__(self, session_manager, interval=1.0, output=None):
        super().__init__(interval)
        self._session_manager = session_manager
        self._output = output
        self._lock = threading.Lock()
        self._send_count = 0
        self._recv_count = 0

    def inc_send_count(self):
        with self._lock:
            self._send_count += 1
            return self._send_count

    def inc_recv_count(self):
        with self._lock:
            self._recv_count += 1
            return self._recv_count

    def report(self):
        """The statistics text; the completion counters restart from zero."""
        with self._lock:
            sends, self._send_count = self._send_count, 0
            recvs, self._recv_count = self._recv_count, 0
        return (
            f"[ Current Connect Session Count : {self._session_manager.current_count()} ]\n"
            f"[ Send Completion Count : {sends} ]\n"
            f"[ Recv Completion Count : {recvs} ]\n"
            "\n"
        )

    def process_monitoring(self):
        while not self._stop.is_set():
            output = self._output if self._output is not None else sys.stdout
            output.write(self.report())
            output.flush()
            self._stop.wait(self.interval)