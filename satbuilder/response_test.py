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

"""Tests for satbuilder.response."""

from absl.testing import absltest
from absl.testing import parameterized
import pandas as pd

from ortools.sat import cp_model_pb2

from satbuilder import errors
from satbuilder import response
from satbuilder import variables


class SolveResponseTest(parameterized.TestCase):

    def setUp(self):
        super().setUp()
        self.table = variables.VariableTable()
        self.x = self.table.add_int([(0, 10)], "x")
        self.b = self.table.add_bool("b")
        self.y = self.table.add_int([(-5, 5)], "y")
        self.proto = cp_model_pb2.CpSolverResponse(
            status=cp_model_pb2.OPTIMAL,
            solution=[7, 1, -3],
            objective_value=4.0,
            best_objective_bound=4.0,
            num_conflicts=2,
            num_branches=5,
            wall_time=0.5,
            user_time=0.25,
            solution_info="test",
        )
        self.response = response.SolveResponse(
            self.proto, self.table.model_id, has_objective=True
        )

    def test_values(self):
        self.assertEqual(7, self.response.value(self.x))
        self.assertEqual(-3, self.response.value(self.y))
        self.assertEqual(7 * 2 - (-3) + 1, self.response.value(2 * self.x - self.y + 1))
        self.assertEqual(12, self.response.value(12))

    def test_boolean_values(self):
        self.assertTrue(self.response.boolean_value(self.b))
        self.assertFalse(self.response.boolean_value(~self.b))
        self.assertEqual(0, self.response.value(~self.b))
        self.assertTrue(self.response.boolean_value(True))
        with self.assertRaises(TypeError):
            self.response.boolean_value(self.x)
        with self.assertRaises(TypeError):
            self.response.boolean_value(self.x + 1)

    def test_statistics(self):
        self.assertEqual(cp_model_pb2.OPTIMAL, self.response.status)
        self.assertEqual("OPTIMAL", self.response.status_name())
        self.assertTrue(self.response.has_solution)
        self.assertEqual(4.0, self.response.objective_value)
        self.assertEqual(4.0, self.response.best_objective_bound)
        self.assertEqual(2, self.response.num_conflicts)
        self.assertEqual(5, self.response.num_branches)
        self.assertEqual(0.5, self.response.wall_time)
        self.assertEqual(0.25, self.response.user_time)
        self.assertEqual("test", self.response.solution_info)
        self.assertIs(self.proto, self.response.proto)
        self.assertEqual(self.table.model_id, self.response.model_id)
        self.assertEqual("SolveResponse(status=OPTIMAL)", str(self.response))

    def test_pandas_values(self):
        handles = pd.Series([self.x, self.y], index=pd.Index(["a", "c"]))
        values = self.response.values(handles)
        self.assertEqual([7, -3], values.tolist())
        self.assertEqual(["a", "c"], values.index.tolist())

        literals = pd.Series([self.b, ~self.b], index=pd.Index(["on", "off"]))
        booleans = self.response.boolean_values(literals)
        self.assertEqual([True, False], booleans.tolist())
        self.assertEqual(["on", "off"], booleans.index.tolist())

    def test_handle_of_another_model(self):
        other = variables.VariableTable()
        z = other.add_int([(0, 10)], "z")
        with self.assertRaises(errors.InvalidHandleError):
            self.response.value(z)

    def test_index_out_of_range(self):
        short = cp_model_pb2.CpSolverResponse(
            status=cp_model_pb2.FEASIBLE, solution=[1]
        )
        with self.assertRaises(errors.InvalidHandleError):
            response.evaluate(self.y, short)

    @parameterized.parameters(
        cp_model_pb2.INFEASIBLE,
        cp_model_pb2.UNKNOWN,
        cp_model_pb2.MODEL_INVALID,
    )
    def test_no_solution(self, status):
        no_solution = response.SolveResponse(
            cp_model_pb2.CpSolverResponse(status=status),
            self.table.model_id,
            has_objective=False,
        )
        self.assertFalse(no_solution.has_solution)
        with self.assertRaises(errors.NoSolutionAvailableError):
            no_solution.value(self.x)
        with self.assertRaises(errors.NoSolutionAvailableError):
            no_solution.boolean_value(self.b)


if __name__ == "__main__":
    absltest.main()
