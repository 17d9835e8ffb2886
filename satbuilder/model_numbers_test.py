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

from absl.testing import absltest
from absl.testing import parameterized
import numpy as np

from satbuilder import errors
from satbuilder import model_numbers as mn


class ModelNumbersTest(parameterized.TestCase):

    def test_is_boolean(self):
        self.assertTrue(mn.is_boolean(True))
        self.assertTrue(mn.is_boolean(np.bool_(0)))
        self.assertFalse(mn.is_boolean(1))
        self.assertFalse(mn.is_boolean(0))

    @parameterized.parameters(
        (1, True),
        (np.int32(3), True),
        (np.int64(-7), True),
        (True, False),
        (np.bool_(1), False),
        (1.0, False),
        ("1", False),
    )
    def test_is_integral(self, value, expected):
        self.assertEqual(mn.is_integral(value), expected)

    def test_assert_is_int64(self):
        self.assertEqual(mn.assert_is_int64(np.int64(12)), 12)
        self.assertIsInstance(mn.assert_is_int64(np.int64(12)), int)
        self.assertEqual(mn.assert_is_int64(mn.INT_MAX), mn.INT_MAX)
        with self.assertRaises(errors.ArithmeticOverflowError):
            mn.assert_is_int64(mn.INT_MAX + 1)
        with self.assertRaises(errors.ArithmeticOverflowError):
            mn.assert_is_int64(mn.INT_MIN - 1)
        with self.assertRaises(TypeError):
            mn.assert_is_int64(2.5)

    def test_assert_is_zero_or_one(self):
        self.assertEqual(mn.assert_is_zero_or_one(True), 1)
        self.assertEqual(mn.assert_is_zero_or_one(0), 0)
        self.assertRaises(TypeError, mn.assert_is_zero_or_one, 2)
        self.assertRaises(TypeError, mn.assert_is_zero_or_one, "x")

    def test_checked_arithmetic(self):
        self.assertEqual(mn.checked_add(3, 4), 7)
        self.assertEqual(mn.checked_mul(-3, 4), -12)
        self.assertRaises(errors.ArithmeticOverflowError, mn.checked_add, mn.INT_MAX, 1)
        self.assertRaises(errors.ArithmeticOverflowError, mn.checked_mul, mn.INT_MIN, -1)
        # Also an OverflowError for callers that do not know the package errors.
        self.assertRaises(OverflowError, mn.checked_mul, mn.INT_MAX, 2)

    def test_to_capped_int64(self):
        self.assertEqual(mn.to_capped_int64(mn.INT_MAX + 1), mn.INT_MAX)
        self.assertEqual(mn.to_capped_int64(mn.INT_MIN - 1), mn.INT_MIN)
        self.assertEqual(mn.to_capped_int64(15), 15)


if __name__ == "__main__":
    absltest.main()
