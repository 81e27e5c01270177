"""Conversions for the timestamps that `stat` returns and `utime` accepts.

Timestamps returned by the operating system are expressed as nanoseconds
since 1970-01-01 00:00:00 UTC (the ``st_*time_ns`` fields); callers may
pass numbers of seconds or `datetime` objects."""

from datetime import datetime
from numbers import Real
from time import localtime as _localtime, strftime as _strftime


def format_time(t):
    """Format a timestamp (expressed as nanoseconds since 1970-01-01 00:00:00
    UTC) into human-readable syntax with seconds granularity.

    :param int t: the timestamp

    :return: A human-readable string.
    :rtype: str"""

    return _strftime('%Y-%m-%d %H:%M:%S', _localtime(t // 1000000000))


def timestamp_ns(value):
    """Convert a timestamp to integer nanoseconds since the epoch, suitable
    for the `ns` argument of `os.utime`.

    :param value: seconds since the epoch, or a `datetime` (naive datetimes
        are taken to be local time)
    :type value: int or float or datetime
    :return: nanoseconds since the epoch
    :rtype: int"""

    if isinstance(value, datetime):
        value = value.timestamp()
    elif not isinstance(value, Real) or isinstance(value, bool):
        raise TypeError("cannot use '%s' object as a timestamp" % type(value).__name__)
    return int(round(value * 1000000000))
