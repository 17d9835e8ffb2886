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

"""Solves a problem with a time limit."""

import datetime
from typing import Sequence

from absl import app
from absl import flags

from satbuilder import cp_model
from satbuilder import parameters

_TIME_LIMIT = flags.DEFINE_float(
    "time_limit", 10.0, "Time limit of the solve, in seconds."
)
_LOG = flags.DEFINE_bool("log", False, "Log the search progress.")


def solve_with_time_limit(time_limit: float, log: bool) -> None:
    """Minimal CP-SAT example to showcase calling the solver."""
    # Creates the model.
    model = cp_model.CpModel()
    # Creates the variables.
    num_vals = 3
    x = model.new_int_var(0, num_vals - 1, "x")
    y = model.new_int_var(0, num_vals - 1, "y")
    z = model.new_int_var(0, num_vals - 1, "z")
    # Adds an all-different constraint.
    model.add_ne(x, y)

    print(model.model_stats())

    params = parameters.SolveParameters(
        time_limit=datetime.timedelta(seconds=time_limit), enable_output=log
    )
    response = model.solve(params)

    if response.status == cp_model.OPTIMAL:
        print(f"x = {response.value(x)}")
        print(f"y = {response.value(y)}")
        print(f"z = {response.value(z)}")
    print(response.response_stats())


def main(argv: Sequence[str]) -> None:
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    solve_with_time_limit(_TIME_LIMIT.value, _LOG.value)


if __name__ == "__main__":
    app.run(main)
