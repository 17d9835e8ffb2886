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

"""The boundary with the native CP-SAT engine.

Everything that crosses into native code goes through the SolverEngine
interface. CpSatEngine is the only implementation, it uses the solver shipped in
the ortools wheel.

Any failure of the engine itself (an exception raised by the native layer, a
missing output, or a response that cannot be decoded) is reported as an
EngineError. Infeasible or invalid models are normal responses.
"""

import re
import time
from typing import Callable, Optional, Protocol, Sequence, TypeVar

from absl import logging

from google.protobuf import message
from ortools.sat import cp_model_pb2
from ortools.sat import sat_parameters_pb2
from ortools.sat.python import cp_model_helper as cmh

from satbuilder import domain as domain_lib
from satbuilder import errors

_T = TypeVar("_T")

# Lines of the response statistics that only make sense with an objective.
_OBJECTIVE_STATS_LINE = re.compile(
    r"^(objective|best_bound|gap)\s*:.*$", re.MULTILINE
)


class SolverEngine(Protocol):
    """The operations the model builder needs from a solving engine."""

    def solve(
        self, model: cp_model_pb2.CpModelProto
    ) -> cp_model_pb2.CpSolverResponse: ...

    def solve_with_parameters(
        self,
        model: cp_model_pb2.CpModelProto,
        params: sat_parameters_pb2.SatParameters,
    ) -> cp_model_pb2.CpSolverResponse: ...

    def model_stats(self, model: cp_model_pb2.CpModelProto) -> str: ...

    def response_stats(
        self, response: cp_model_pb2.CpSolverResponse, has_objective: bool
    ) -> str: ...

    def validate(self, model: cp_model_pb2.CpModelProto) -> str: ...

    def solution_is_feasible(
        self, model: cp_model_pb2.CpModelProto, solution: Sequence[int]
    ) -> bool: ...


def _call_engine(what: str, fn: Callable[[], Optional[_T]]) -> _T:
    """Calls the native engine, turns any failure into an EngineError."""
    try:
        result = fn()
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise errors.EngineError(f"the CP-SAT engine failed in {what}: {e}") from e
    if result is None:
        raise errors.EngineError(f"the CP-SAT engine returned nothing in {what}")
    return result


def _as_response_proto(response) -> cp_model_pb2.CpSolverResponse:
    """Returns response as a CpSolverResponse, decoding it if needed."""
    if isinstance(response, cp_model_pb2.CpSolverResponse):
        return response
    try:
        return cp_model_pb2.CpSolverResponse.FromString(response.SerializeToString())
    except (AttributeError, message.DecodeError) as e:
        raise errors.EngineError(
            f"cannot decode the response of the CP-SAT engine: {e}"
        ) from e


class CpSatEngine:
    """Runs the CP-SAT engine of the ortools package.

    Each solve is a single blocking call. Its duration is bounded only by the
    engine parameters (max_time_in_seconds).
    """

    def __init__(self, log_callback: Optional[Callable[[str], None]] = None) -> None:
        """Creates an engine adapter.

        Args:
          log_callback: receives the search log lines when the parameters enable
            log_search_progress. Defaults to absl.logging.info.
        """
        self._log_callback: Callable[[str], None] = log_callback or _log_line

    def solve(
        self, model: cp_model_pb2.CpModelProto
    ) -> cp_model_pb2.CpSolverResponse:
        """Solves the model with the default parameters."""
        return self.solve_with_parameters(model, sat_parameters_pb2.SatParameters())

    def solve_with_parameters(
        self,
        model: cp_model_pb2.CpModelProto,
        params: sat_parameters_pb2.SatParameters,
    ) -> cp_model_pb2.CpSolverResponse:
        """Solves the model with the given parameters."""
        logging.vlog(
            1,
            "Solving a model with %d variables and %d constraints",
            len(model.variables),
            len(model.constraints),
        )
        start = time.monotonic()

        def run():
            solve_wrapper = cmh.SolveWrapper()
            solve_wrapper.set_parameters(params)
            if params.log_search_progress:
                solve_wrapper.add_log_callback(self._log_callback)
            response_wrapper = solve_wrapper.solve_and_return_response_wrapper(model)
            if response_wrapper is None:
                return None
            return response_wrapper.response()

        response = _as_response_proto(_call_engine("solve", run))
        logging.vlog(
            1,
            "Solve finished with status %s in %.3fs",
            cp_model_pb2.CpSolverStatus.Name(response.status),
            time.monotonic() - start,
        )
        return response

    def model_stats(self, model: cp_model_pb2.CpModelProto) -> str:
        """Returns a string with some statistics on the model."""
        return _call_engine("model_stats", lambda: cmh.CpSatHelper.model_stats(model))

    def response_stats(
        self, response: cp_model_pb2.CpSolverResponse, has_objective: bool
    ) -> str:
        """Returns a string with some statistics on a response.

        If has_objective is false, the objective related lines read NA instead of
        the meaningless zero values.
        """
        stats = _call_engine(
            "response_stats",
            lambda: cmh.CpSatHelper.solver_response_stats(response),
        )
        if not has_objective:
            stats = _OBJECTIVE_STATS_LINE.sub(lambda m: f"{m.group(1)}: NA", stats)
        return stats

    def validate(self, model: cp_model_pb2.CpModelProto) -> str:
        """Returns an empty string if the model is valid, or the first error."""
        return _call_engine("validate", lambda: cmh.CpSatHelper.validate_model(model))

    def solution_is_feasible(
        self, model: cp_model_pb2.CpModelProto, solution: Sequence[int]
    ) -> bool:
        """Checks that an assignment satisfies all the constraints of the model.

        The values are positional: solution[i] is the value of model.variables[i].
        The check is done by the engine, on a copy of the model where every
        variable is fixed to its value.
        """
        if len(solution) != len(model.variables):
            logging.warning(
                "solution_is_feasible: got %d values for %d variables",
                len(solution),
                len(model.variables),
            )
            return False
        for index, (var, value) in enumerate(zip(model.variables, solution)):
            if not domain_lib.Domain.from_flat_intervals(var.domain).contains(
                int(value)
            ):
                logging.vlog(
                    1, "value %d of variable %d is out of its domain", value, index
                )
                return False
        fixed = cp_model_pb2.CpModelProto()
        fixed.CopyFrom(model)
        fixed.ClearField("objective")
        fixed.ClearField("solution_hint")
        fixed.ClearField("search_strategy")
        for var, value in zip(fixed.variables, solution):
            value = int(value)
            var.ClearField("domain")
            var.domain.extend([value, value])
        params = sat_parameters_pb2.SatParameters(num_workers=1)
        response = self.solve_with_parameters(fixed, params)
        return response.status in (cp_model_pb2.OPTIMAL, cp_model_pb2.FEASIBLE)


def _log_line(line: str) -> None:
    logging.info("%s", line)
