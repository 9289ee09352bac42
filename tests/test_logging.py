# tests/test_logging.py
import csv

import numpy as np
import pytest

from movavg import AccumulatorOverflowError, MovAvg
from movavg.logging import CSVLogger, MultiLogger, make_feed_logger


class ListLogger:
    def __init__(self):
        self.rows = []
        self.flushed = 0
        self.closed = False

    def log(self, step, scalars):
        self.rows.append((step, dict(scalars)))

    def flush(self):
        self.flushed += 1

    def close(self):
        self.closed = True


def test_feed_logger_logs_every_feed():
    lg = ListLogger()
    avg = MovAvg(3, np.int32)
    feed = make_feed_logger(lg, avg)
    assert feed(10) == 10
    assert feed(20) == 15
    assert lg.rows == [
        (1, {"movavg/sample": 10, "movavg/average": 10, "movavg/fill": 1}),
        (2, {"movavg/sample": 20, "movavg/average": 15, "movavg/fill": 2}),
    ]


def test_feed_logger_cadence_and_prefix():
    lg = ListLogger()
    feed = make_feed_logger(lg, MovAvg(2, np.float64), prefix="temp", log_every=2)
    for x in (1.0, 2.0, 3.0, 4.0, 5.0):
        feed(x)
    assert [step for step, _ in lg.rows] == [2, 4]
    assert lg.rows[-1][1]["temp/average"] == 3.5


def test_feed_logger_skips_failed_feeds():
    lg = ListLogger()
    feed = make_feed_logger(lg, MovAvg(3, np.uint8))
    feed(200)
    with pytest.raises(AccumulatorOverflowError):
        feed(200)
    feed(10)
    assert [step for step, _ in lg.rows] == [1, 2]


def test_feed_logger_rejects_bad_cadence():
    with pytest.raises(ValueError):
        make_feed_logger(ListLogger(), MovAvg(2, np.int32), log_every=0)


def test_csv_logger_writes_header_once(tmp_path):
    path = tmp_path / "runs" / "avg.csv"
    lg = CSVLogger(str(path))
    feed = make_feed_logger(lg, MovAvg(3, np.int32))
    for x in (10, 20, 30, 40):
        feed(x)
    lg.close()
    lg.close()

    lg = CSVLogger(str(path), fieldnames=["step", "movavg/sample", "movavg/average", "movavg/fill"])
    lg.log(5, {"movavg/sample": 1, "movavg/average": 2, "movavg/fill": 3, "extra": 9})
    lg.close()

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == ["step", "movavg/sample", "movavg/average", "movavg/fill"]
    assert [r["movavg/average"] for r in rows] == ["10", "15", "20", "30", "2"]
    assert rows[-1]["step"] == "5"


def test_multi_logger_fans_out():
    a, b = ListLogger(), ListLogger()
    multi = MultiLogger([a, b])
    multi.log(1, {"x": 1})
    multi.flush()
    multi.close()
    assert a.rows == b.rows == [(1, {"x": 1})]
    assert a.flushed == b.flushed == 1
    assert a.closed and b.closed
