# Copyright 2010-2025 Google LLC
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Sorted lists of disjoint integer intervals.

A Domain is the set of values an integer variable can take, or the set of
values a linear expression is allowed to take in a constraint. It is stored in
canonical form: intervals are sorted, disjoint, and two consecutive intervals
are never adjacent. This makes equality, hashing and the wire representation
independent of the order used by the caller.

    d = Domain.from_intervals([(5, 9), (0, 2), (3, 3)])
    d.intervals()  # [(0, 3), (5, 9)]
    d.contains(4)  # False
"""

import bisect
from typing import Iterable, List, Sequence, Tuple

from satbuilder import errors
from satbuilder import model_numbers as mn


def _checked_bound(value) -> int:
    """Returns value as an int, raises InvalidDomainError if not an int64."""
    if not mn.is_integral(value):
        raise errors.InvalidDomainError(
            f"domain bounds must be integers, got {value!r} of type {type(value)}"
        )
    value = int(value)
    if value < mn.INT_MIN or value > mn.INT_MAX:
        raise errors.InvalidDomainError(
            f"domain bound {value} is outside the int64 range"
        )
    return value


class Domain:
    """An immutable union of closed integer intervals, in canonical form."""

    __slots__ = ("_starts", "_ends")

    def __init__(self, lb: int, ub: int) -> None:
        """Creates the domain [lb, ub]. Raises InvalidDomainError if lb > ub."""
        lb = _checked_bound(lb)
        ub = _checked_bound(ub)
        if lb > ub:
            raise errors.InvalidDomainError(f"invalid interval [{lb}, {ub}]")
        self._starts: Tuple[int, ...] = (lb,)
        self._ends: Tuple[int, ...] = (ub,)

    @classmethod
    def _from_canonical(cls, starts: List[int], ends: List[int]) -> "Domain":
        domain = cls.__new__(cls)
        domain._starts = tuple(starts)
        domain._ends = tuple(ends)
        return domain

    @classmethod
    def single_interval(cls, lb: int, ub: int) -> "Domain":
        """Returns the domain [lb, ub]."""
        return cls(lb, ub)

    @classmethod
    def from_intervals(cls, intervals: Iterable[Sequence[int]]) -> "Domain":
        """Creates a canonical domain from a non-empty list of [lo, hi] pairs.

        The pairs can be given in any order, and may overlap or touch.

        Args:
          intervals: an iterable of (lo, hi) pairs.

        Returns:
          The union of the intervals.

        Raises:
          InvalidDomainError: if the list is empty, if a pair is not of length 2,
            if lo > hi for some pair, or if a bound is outside the int64 range.
        """
        pairs = []
        for interval in intervals:
            try:
                lo, hi = interval
            except (TypeError, ValueError) as e:
                raise errors.InvalidDomainError(
                    f"an interval must be a [lo, hi] pair, got {interval!r}"
                ) from e
            lo = _checked_bound(lo)
            hi = _checked_bound(hi)
            if lo > hi:
                raise errors.InvalidDomainError(f"invalid interval [{lo}, {hi}]")
            pairs.append((lo, hi))
        if not pairs:
            raise errors.InvalidDomainError("a domain needs at least one interval")

        pairs.sort()
        starts = [pairs[0][0]]
        ends = [pairs[0][1]]
        for lo, hi in pairs[1:]:
            # hi + 1 cannot overflow the merge test: Python ints are unbounded.
            if lo <= ends[-1] + 1:
                ends[-1] = max(ends[-1], hi)
            else:
                starts.append(lo)
                ends.append(hi)
        return cls._from_canonical(starts, ends)

    @classmethod
    def from_flat_intervals(cls, flat_intervals: Sequence[int]) -> "Domain":
        """Creates a domain from [lo0, hi0, lo1, hi1, ...]."""
        if len(flat_intervals) % 2 != 0:
            raise errors.InvalidDomainError(
                "flattened intervals must have an even length"
            )
        return cls.from_intervals(
            [
                (flat_intervals[i], flat_intervals[i + 1])
                for i in range(0, len(flat_intervals), 2)
            ]
        )

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "Domain":
        """Creates the domain containing exactly the given values."""
        return cls.from_intervals([(v, v) for v in values])

    @classmethod
    def all_values(cls) -> "Domain":
        """Returns the domain [INT_MIN, INT_MAX]."""
        return cls(mn.INT_MIN, mn.INT_MAX)

    def contains(self, value: int) -> bool:
        """Returns true if value belongs to the domain."""
        pos = bisect.bisect_right(self._starts, value) - 1
        return pos >= 0 and value <= self._ends[pos]

    def __contains__(self, value: int) -> bool:
        return self.contains(value)

    def min(self) -> int:
        return self._starts[0]

    def max(self) -> int:
        return self._ends[-1]

    def size(self) -> int:
        """Returns the number of values in the domain."""
        return sum(e - s + 1 for s, e in zip(self._starts, self._ends))

    def is_fixed(self) -> bool:
        """Returns true if the domain contains a single value."""
        return self._starts[0] == self._ends[-1]

    def intervals(self) -> List[Tuple[int, int]]:
        """Returns the canonical list of (lo, hi) intervals."""
        return list(zip(self._starts, self._ends))

    def flattened_intervals(self) -> List[int]:
        """Returns [lo0, hi0, lo1, hi1, ...], the wire representation."""
        flat = []
        for s, e in zip(self._starts, self._ends):
            flat.append(s)
            flat.append(e)
        return flat

    def complement(self) -> "Domain":
        """Returns [INT_MIN, INT_MAX] minus this domain.

        Raises:
          InvalidDomainError: if the domain covers the whole int64 range.
        """
        starts = []
        ends = []
        next_start = mn.INT_MIN
        for s, e in zip(self._starts, self._ends):
            if s > next_start:
                starts.append(next_start)
                ends.append(s - 1)
            next_start = e + 1
        if next_start <= mn.INT_MAX:
            starts.append(next_start)
            ends.append(mn.INT_MAX)
        if not starts:
            raise errors.InvalidDomainError(
                "the complement of the full int64 range is empty"
            )
        return Domain._from_canonical(starts, ends)

    def shifted(self, delta: int) -> "Domain":
        """Returns {v + delta | v in domain}, capped to the int64 range.

        INT_MIN and INT_MAX are treated as infinities and are left untouched.
        """
        if delta == 0:
            return self

        def shift(bound: int) -> int:
            if bound == mn.INT_MIN or bound == mn.INT_MAX:
                return bound
            return mn.to_capped_int64(bound + delta)

        return Domain.from_intervals(
            [(shift(s), shift(e)) for s, e in zip(self._starts, self._ends)]
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Domain):
            return NotImplemented
        return self._starts == other._starts and self._ends == other._ends

    def __hash__(self) -> int:
        return hash((self._starts, self._ends))

    def __str__(self) -> str:
        out = ""
        for s, e in zip(self._starts, self._ends):
            if s == e:
                out += f"[{s}]"
            else:
                out += f"[{s},{e}]"
        return out

    def __repr__(self) -> str:
        return f"Domain({self})"
