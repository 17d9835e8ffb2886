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

"""Simple solve, then a small optimization problem."""

from typing import Sequence

from absl import app
from absl import flags

from satbuilder import cp_model
from satbuilder import parameters

_PARAMS = flags.DEFINE_string(
    "params", "num_workers:8", "Sat solver parameters, in text format."
)
_PROTO_FILE = flags.DEFINE_string(
    "proto_file", "", "If not empty, output the proto to this file."
)


def simple_sat_program(params: parameters.SolveParameters) -> None:
    """Minimal CP-SAT example to showcase calling the solver."""
    # Creates the model.
    model = cp_model.CpModel("simple_sat_program")

    # Creates the variables.
    num_vals = 3
    x = model.new_int_var(0, num_vals - 1, "x")
    y = model.new_int_var(0, num_vals - 1, "y")
    z = model.new_int_var(0, num_vals - 1, "z")

    # Creates the constraints.
    model.add_ne(x, y)

    response = model.solve(params)

    if response.has_solution:
        print(f"x = {response.value(x)}")
        print(f"y = {response.value(y)}")
        print(f"z = {response.value(z)}")
    else:
        print("No solution found.")


def optimization_program(params: parameters.SolveParameters) -> None:
    """Maximizes a linear objective over three bounded integer variables."""
    model = cp_model.CpModel("optimization_program")

    var_upper_bound = max(50, 45, 37)
    x = model.new_int_var(0, var_upper_bound, "x")
    y = model.new_int_var(0, var_upper_bound, "y")
    z = model.new_int_var(0, var_upper_bound, "z")

    model.add_linear_le(2 * x + 7 * y + 3 * z, 50)
    model.add_linear_le(3 * x - 5 * y + 7 * z, 45)
    model.add_linear_le(5 * x + 2 * y - 6 * z, 37)

    model.maximize(2 * x + 2 * y + 3 * z)

    if _PROTO_FILE.value:
        model.export_to_file(_PROTO_FILE.value)

    response = model.solve(params)

    print(f"Status = {response.status_name()}")
    if response.has_solution:
        print(f"Maximum of objective function: {response.objective_value}")
        print(f"x = {response.value(x)}")
        print(f"y = {response.value(y)}")
        print(f"z = {response.value(z)}")
    print(response.response_stats())


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    params = parameters.SolveParameters(
        cp_sat=parameters.parse_sat_parameters(_PARAMS.value)
    )
    simple_sat_program(params)
    optimization_program(params)


if __name__ == "__main__":
    app.run(main)
