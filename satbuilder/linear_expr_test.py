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
import numpy as np

from satbuilder import domain
from satbuilder import errors
from satbuilder import linear_expr
from satbuilder import model_numbers as mn
from satbuilder import variables

LinearExpr = linear_expr.LinearExpr


class LinearExprTest(absltest.TestCase):

    def setUp(self):
        super().setUp()
        self.table = variables.VariableTable()
        self.x = self.table.add_int([(0, 10)], "x")
        self.y = self.table.add_int([(0, 10)], "y")
        self.b = self.table.add_bool("b")

    def test_from_variable(self):
        expr = LinearExpr.from_variable(self.y)
        self.assertEqual({1: 1}, dict(expr.terms))
        self.assertEqual(0, expr.offset)
        self.assertEqual(self.table.model_id, expr.model_id)
        self.assertRaises(TypeError, LinearExpr.from_variable, 3)

    def test_negated_literal_expression(self):
        expr = LinearExpr.from_variable(~self.b)
        self.assertEqual({2: -1}, dict(expr.terms))
        self.assertEqual(1, expr.offset)

    def test_constant(self):
        expr = LinearExpr.constant(-4)
        self.assertTrue(expr.is_constant())
        self.assertIsNone(expr.model_id)
        self.assertEqual("-4", str(expr))

    def test_operators(self):
        expr = 2 * self.x - self.y + 3
        self.assertEqual({0: 2, 1: -1}, dict(expr.terms))
        self.assertEqual(3, expr.offset)
        self.assertEqual("2 * v0 - v1 + 3", str(expr))

        expr = 5 - (self.x + self.y) * 2
        self.assertEqual({0: -2, 1: -2}, dict(expr.terms))
        self.assertEqual(5, expr.offset)

        expr = -self.x
        self.assertEqual({0: -1}, dict(expr.terms))

    def test_cancelled_terms_are_dropped(self):
        expr = self.x + self.y - self.x
        self.assertEqual({1: 1}, dict(expr.terms))
        expr = self.x - self.x
        self.assertTrue(expr.is_constant())
        self.assertIsNone(expr.model_id)

    def test_scale_by_zero(self):
        expr = (self.x + 7).scale(0)
        self.assertTrue(expr.is_constant())
        self.assertEqual(0, expr.offset)

    def test_numpy_coefficients(self):
        expr = np.int64(3) * self.x + np.int32(2)
        self.assertEqual({0: 3}, dict(expr.terms))
        self.assertEqual(2, expr.offset)

    def test_sum_and_weighted_sum(self):
        expr = LinearExpr.sum([self.x, self.y, 4, self.x])
        self.assertEqual({0: 2, 1: 1}, dict(expr.terms))
        self.assertEqual(4, expr.offset)

        expr = LinearExpr.weighted_sum([self.x, self.y, 1], [3, -2, 5])
        self.assertEqual({0: 3, 1: -2}, dict(expr.terms))
        self.assertEqual(5, expr.offset)

        with self.assertRaises(ValueError):
            LinearExpr.weighted_sum([self.x, self.y], [1])

        expr = LinearExpr.term(self.y, 6)
        self.assertEqual({1: 6}, dict(expr.terms))

    def test_evaluate(self):
        expr = 2 * self.x - 3 * self.y + 1
        self.assertEqual(2 * 4 - 3 * 2 + 1, expr.evaluate([4, 2, 0]))

    def test_non_linear_and_float_errors(self):
        with self.assertRaises(TypeError):
            self.x * self.y
        with self.assertRaises(TypeError):
            self.x * 2.5
        with self.assertRaises(TypeError):
            self.x + 0.5
        with self.assertRaises(TypeError):
            self.x / 2

    def test_overflow(self):
        big = self.x * mn.INT_MAX
        with self.assertRaises(errors.ArithmeticOverflowError):
            big + self.x * mn.INT_MAX
        with self.assertRaises(errors.ArithmeticOverflowError):
            big * 2
        with self.assertRaises(errors.ArithmeticOverflowError):
            LinearExpr.constant(mn.INT_MAX + 1)

    def test_mixing_models(self):
        other = variables.VariableTable()
        z = other.add_int([(0, 1)], "z")
        with self.assertRaises(errors.InvalidHandleError):
            self.x + z
        with self.assertRaises(errors.InvalidHandleError):
            LinearExpr.sum([self.x, z])

    def test_comparisons(self):
        ct = self.x <= 5
        self.assertIsInstance(ct, linear_expr.BoundedLinearExpression)
        self.assertEqual(domain.Domain(mn.INT_MIN, 5), ct.domain)

        ct = self.x + 1 <= self.y
        self.assertEqual({0: 1, 1: -1}, dict(ct.expression.terms))
        self.assertEqual(1, ct.expression.offset)
        self.assertEqual(domain.Domain(mn.INT_MIN, 0), ct.domain)

        self.assertEqual(domain.Domain(4, mn.INT_MAX), (self.x >= 4).domain)
        self.assertEqual(domain.Domain(mn.INT_MIN, 3), (self.x < 4).domain)
        self.assertEqual(domain.Domain(5, mn.INT_MAX), (self.x > 4).domain)
        self.assertEqual(domain.Domain(2, 2), (self.x == 2).domain)
        self.assertEqual(
            domain.Domain.from_intervals([(mn.INT_MIN, 1), (3, mn.INT_MAX)]),
            (self.x != 2).domain,
        )

    def test_comparison_is_not_a_boolean(self):
        with self.assertRaises(NotImplementedError):
            bool(self.x <= 5)
        with self.assertRaises(NotImplementedError):
            bool(self.x + 1 == 2)
        with self.assertRaises(NotImplementedError):
            bool(self.x)

    def test_handle_identity(self):
        self.assertTrue(self.x == self.x)
        self.assertFalse(self.x == self.y)
        self.assertTrue(self.x != self.y)
        self.assertFalse(self.x != self.x)
        self.assertFalse(self.x == None)  # pylint: disable=g-equals-none
        self.assertIn(self.y, [self.x, self.y])
        self.assertEqual({self.x: 1, self.y: 2}[self.y], 2)

    def test_handles_of_other_models_are_different(self):
        other = variables.VariableTable()
        x_other = other.add_int([(0, 10)], "x")
        self.assertEqual(x_other.index, self.x.index)
        self.assertFalse(self.x == x_other)
        self.assertTrue(self.x != x_other)


if __name__ == "__main__":
    absltest.main()
