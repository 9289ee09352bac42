from __future__ import annotations
import csv, os
from typing import Any, Callable, Dict, Protocol, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .sma import MovAvg


class Logger(Protocol):
    def log(self, step: int, scalars: Dict[str, Any]) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class CSVLogger:
    """Append-only CSV logger with header auto-discovery or predefined schema."""
    def __init__(self, path: str, fieldnames: list[str] | None = None):
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.path = path
        self._fieldnames = fieldnames
        self._file = open(path, "a", newline="")
        self._writer = None

    def log(self, step: int, scalars: Dict[str, Any]) -> None:
        scalars = {"step": step, **scalars}
        if self._writer is None:
            if self._fieldnames is None:
                self._fieldnames = list(scalars.keys())
            self._writer = csv.DictWriter(
                self._file,
                fieldnames=self._fieldnames,
                extrasaction="ignore",   # unseen keys are dropped
            )
            if self._file.tell() == 0:
                self._writer.writeheader()
        self._writer.writerow(scalars)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class MultiLogger:
    """Fans every call out to several loggers."""
    def __init__(self, loggers: Sequence[Logger]):
        self.loggers = list(loggers)

    def log(self, step: int, scalars: Dict[str, Any]) -> None:
        for lg in self.loggers:
            lg.log(step, scalars)

    def flush(self) -> None:
        for lg in self.loggers:
            lg.flush()

    def close(self) -> None:
        for lg in self.loggers:
            lg.close()


def make_feed_logger(
    logger: Logger,
    avg: "MovAvg",
    *,
    prefix: str = "movavg",
    log_every: int = 1,
) -> Callable[[Any], Any]:
    """
    Returns a function(sample) -> average that feeds `avg` and logs
    sample/average/fill scalars every `log_every` feeds. The step column is
    the number of successful feeds so far. Failed feeds raise and are not
    logged.
    """
    if log_every < 1:
        raise ValueError(f"log_every must be >= 1, got {log_every}")
    step = 0

    def _feed(sample: Any) -> Any:
        nonlocal step
        result = avg.feed(sample)
        step += 1
        if step % log_every == 0:
            logger.log(step, {
                f"{prefix}/sample": sample,
                f"{prefix}/average": result,
                f"{prefix}/fill": len(avg),
            })
        return result

    return _feed
