#!/usr/bin/env python3
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

"""Tests for satbuilder.domain."""

from absl.testing import absltest
from absl.testing import parameterized

from satbuilder import domain
from satbuilder import errors
from satbuilder import model_numbers as mn


class DomainTest(parameterized.TestCase):

    def test_ctor(self):
        d = domain.Domain(0, 5)
        self.assertEqual([0, 5], d.flattened_intervals())
        self.assertEqual("[0,5]", str(d))

    def test_single_value(self):
        d = domain.Domain.single_interval(5, 5)
        self.assertTrue(d.is_fixed())
        self.assertEqual("[5]", str(d))

    def test_from_intervals_is_canonical(self):
        d = domain.Domain.from_intervals([(5, 9), (0, 2), (3, 3)])
        self.assertEqual([(0, 3), (5, 9)], d.intervals())
        self.assertEqual([0, 3, 5, 9], d.flattened_intervals())
        self.assertEqual("[0,3][5,9]", str(d))

    def test_from_intervals_merges_overlaps(self):
        d = domain.Domain.from_intervals([[0, 4], [2, 6], [10, 12], [11, 11]])
        self.assertEqual([(0, 6), (10, 12)], d.intervals())

    def test_from_flat_intervals(self):
        d = domain.Domain.from_flat_intervals([2, 4, -3, 0])
        self.assertEqual([-3, 0, 2, 4], d.flattened_intervals())
        with self.assertRaises(errors.InvalidDomainError):
            domain.Domain.from_flat_intervals([1, 2, 3])

    def test_from_values(self):
        d = domain.Domain.from_values([1, 3, -4, 2, 7])
        self.assertEqual([-4, -4, 1, 3, 7, 7], d.flattened_intervals())
        self.assertEqual(5, d.size())

    @parameterized.named_parameters(
        ("empty", []),
        ("reversed", [(3, 1)]),
        ("triple", [(1, 2, 3)]),
        ("too_large", [(0, mn.INT_MAX + 1)]),
        ("float", [(0.5, 2)]),
        ("not_a_pair", [3]),
        ("single_bound", [(3,)]),
    )
    def test_invalid_intervals(self, intervals):
        with self.assertRaises(errors.InvalidDomainError):
            domain.Domain.from_intervals(intervals)

    def test_invalid_domain_is_a_value_error(self):
        with self.assertRaises(ValueError):
            domain.Domain(2, 1)

    def test_contains(self):
        d = domain.Domain.from_intervals([(0, 2), (5, 9)])
        self.assertTrue(d.contains(0))
        self.assertTrue(d.contains(2))
        self.assertFalse(d.contains(3))
        self.assertIn(7, d)
        self.assertNotIn(10, d)
        self.assertNotIn(-1, d)

    @parameterized.named_parameters(
        ("unsorted", [(5, 9), (0, 2)]),
        ("overlapping", [(0, 4), (2, 6), (3, 3)]),
        ("touching", [(0, 2), (3, 5), (7, 8)]),
        ("single_points", [(4, 4), (-1, -1), (6, 6)]),
        ("nested", [(0, 10), (2, 3), (-3, -2)]),
    )
    def test_contains_matches_the_union(self, intervals):
        d = domain.Domain.from_intervals(intervals)
        lows = [lo for lo, _ in intervals]
        highs = [hi for _, hi in intervals]
        for v in range(min(lows) - 1, max(highs) + 2):
            self.assertEqual(
                any(lo <= v <= hi for lo, hi in intervals), d.contains(v), msg=v
            )

    def test_min_max_size(self):
        d = domain.Domain.from_intervals([(-2, 2), (5, 9)])
        self.assertEqual(-2, d.min())
        self.assertEqual(9, d.max())
        self.assertEqual(10, d.size())
        self.assertFalse(d.is_fixed())

    def test_complement(self):
        d = domain.Domain(3, 3)
        self.assertEqual(
            [mn.INT_MIN, 2, 4, mn.INT_MAX], d.complement().flattened_intervals()
        )
        self.assertEqual(d, d.complement().complement())
        with self.assertRaises(errors.InvalidDomainError):
            domain.Domain.all_values().complement()

    def test_shifted(self):
        d = domain.Domain.from_intervals([(0, 2), (5, 9)])
        self.assertEqual([3, 5, 8, 12], d.shifted(3).flattened_intervals())
        unbounded = domain.Domain(mn.INT_MIN, 10)
        self.assertEqual([mn.INT_MIN, 5], unbounded.shifted(-5).flattened_intervals())

    def test_shifted_is_capped(self):
        d = domain.Domain(0, mn.INT_MAX - 1)
        self.assertEqual([10, mn.INT_MAX], d.shifted(10).flattened_intervals())

    def test_equality_and_hash(self):
        a = domain.Domain.from_intervals([(0, 1), (2, 4)])
        b = domain.Domain(0, 4)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, domain.Domain(0, 3))
        self.assertLen({a, b}, 1)


if __name__ == "__main__":
    absltest.main()
