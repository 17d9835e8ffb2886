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

import datetime

from absl.testing import absltest
from ortools.sat import sat_parameters_pb2

from satbuilder import parameters


class SolveParametersTest(absltest.TestCase):

    def test_defaults_to_empty_proto(self) -> None:
        self.assertEqual(
            sat_parameters_pb2.SatParameters(), parameters.SolveParameters().to_proto()
        )

    def test_common_parameters(self) -> None:
        params = parameters.SolveParameters(
            time_limit=datetime.timedelta(seconds=10),
            num_workers=4,
            random_seed=12,
            enable_output=True,
        )
        expected = sat_parameters_pb2.SatParameters(
            max_time_in_seconds=10.0,
            num_workers=4,
            random_seed=12,
            log_search_progress=True,
            log_to_stdout=False,
        )
        self.assertEqual(expected, params.to_proto())

    def test_common_parameters_override_cp_sat(self) -> None:
        cp_sat = sat_parameters_pb2.SatParameters(
            max_time_in_seconds=100.0, cp_model_presolve=False
        )
        params = parameters.SolveParameters(
            time_limit=datetime.timedelta(milliseconds=1500), cp_sat=cp_sat
        )
        proto = params.to_proto()
        self.assertEqual(1.5, proto.max_time_in_seconds)
        self.assertFalse(proto.cp_model_presolve)
        # The escape hatch is not modified.
        self.assertEqual(100.0, cp_sat.max_time_in_seconds)

    def test_invalid_num_workers(self) -> None:
        with self.assertRaises(ValueError):
            parameters.SolveParameters(num_workers=0).to_proto()


class ParseSatParametersTest(absltest.TestCase):

    def test_parse(self) -> None:
        params = parameters.parse_sat_parameters(
            "num_workers:16, max_time_in_seconds:30"
        )
        self.assertEqual(16, params.num_workers)
        self.assertEqual(30.0, params.max_time_in_seconds)

    def test_parse_empty(self) -> None:
        self.assertEqual(
            sat_parameters_pb2.SatParameters(), parameters.parse_sat_parameters("")
        )

    def test_parse_error(self) -> None:
        with self.assertRaises(ValueError):
            parameters.parse_sat_parameters("not_a_field:3")


if __name__ == "__main__":
    absltest.main()
