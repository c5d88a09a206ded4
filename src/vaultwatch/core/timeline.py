"""Marching-bucket histories of a metric at several granularities.

A BucketSet holds the history of a value in buckets of fixed duration. It
starts with a single bucket; new buckets are added as time progresses until
the maximum number of buckets is reached, after which the oldest bucket is
dropped whenever a new one is added. The window therefore always covers
``bucket_duration * max_buckets``.

A TimelineSet records one metric in several BucketSets at once, e.g. 60 one
minute buckets covering an hour next to 60 one hour buckets covering
two and a half days.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from datetime import datetime, timedelta

from vaultwatch.models.enums import Granularity

logger = logging.getLogger("vaultwatch.timeline")


class BucketSet:
    """A sliding window of counts in buckets of one fixed duration."""

    def __init__(self, bucket_duration: timedelta, max_buckets: int) -> None:
        if bucket_duration <= timedelta(0):
            raise ValueError("bucket_duration must be positive")
        if max_buckets < 1:
            raise ValueError("max_buckets must be at least 1")

        self.bucket_duration = bucket_duration
        self.max_buckets = max_buckets
        self.bucket_time: datetime | None = None  # start of the current bucket
        self._buckets: deque[int] = deque([0], maxlen=max_buckets)

    @property
    def total_duration(self) -> timedelta:
        return self.bucket_duration * self.max_buckets

    @property
    def buckets(self) -> list[int]:
        """Bucket values, oldest first; the last one is the current bucket."""
        return list(self._buckets)

    @property
    def current(self) -> int:
        return self._buckets[-1]

    def advance_to(self, new_time: datetime) -> None:
        """Move the current bucket forward so that it contains new_time.

        Every bucket boundary crossed adds an empty bucket, so gaps in the
        log show up as runs of zeros.
        """
        if self.bucket_time is None:
            self.bucket_time = new_time
            return

        if new_time < self.bucket_time:
            logger.debug(
                "Ignoring time %s before current bucket start %s",
                new_time.isoformat(), self.bucket_time.isoformat(),
            )
            return

        steps = (new_time - self.bucket_time) // self.bucket_duration
        if steps <= 0:
            return

        # Buckets beyond max_buckets would be evicted straight away
        self._buckets.extend([0] * min(steps, self.max_buckets))
        self.bucket_time += self.bucket_duration * steps

    def increment(self) -> None:
        self._buckets[-1] += 1

    def set_value(self, value: int) -> None:
        """Overwrite the current bucket, for gauges rather than counters."""
        if value < 0:
            raise ValueError(f"bucket values cannot be negative: {value}")
        self._buckets[-1] = value


class TimelineSet:
    """A named metric recorded in one BucketSet per granularity."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._bucket_sets: dict[Granularity, BucketSet] = {}

    @classmethod
    def standard(cls, name: str, steps: int) -> TimelineSet:
        """Timeline with every Granularity, each keeping ``steps`` buckets."""
        timeline = cls(name)
        for granularity in Granularity:
            timeline.add_bucket_set(granularity, steps)
        return timeline

    def __iter__(self) -> Iterator[tuple[Granularity, BucketSet]]:
        return iter(self._bucket_sets.items())

    def add_bucket_set(self, granularity: Granularity, max_buckets: int) -> None:
        self._bucket_sets[granularity] = BucketSet(granularity.duration, max_buckets)

    def get_bucket_set(self, granularity: Granularity) -> BucketSet | None:
        return self._bucket_sets.get(granularity)

    def buckets(self, granularity: Granularity) -> list[int]:
        """Bucket values for one granularity (empty if it is not recorded)."""
        bucket_set = self._bucket_sets.get(granularity)
        return bucket_set.buckets if bucket_set else []

    def advance_all(self, new_time: datetime) -> None:
        for bucket_set in self._bucket_sets.values():
            bucket_set.advance_to(new_time)

    def increment_all(self) -> None:
        for bucket_set in self._bucket_sets.values():
            bucket_set.increment()
