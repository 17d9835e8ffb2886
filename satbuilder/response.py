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

"""Decodes the values of a solver response.

Decoding is positional: the value of the variable with index i is
response.solution[i]. A SolveResponse remembers which model it was produced
for, so that handles of another model are rejected instead of silently reading
the value of an unrelated variable.
"""

from typing import Optional, Union

import pandas as pd

from ortools.sat import cp_model_pb2

from satbuilder import engine as engine_lib
from satbuilder import errors
from satbuilder import linear_expr
from satbuilder import model_numbers as mn
from satbuilder import variables

_IndexOrSeries = Union[pd.Index, pd.Series]

_STATUSES_WITH_SOLUTION = (cp_model_pb2.OPTIMAL, cp_model_pb2.FEASIBLE)


def has_solution(response: cp_model_pb2.CpSolverResponse) -> bool:
    """Returns true if the response holds an assignment of all variables."""
    return response.status in _STATUSES_WITH_SOLUTION


def _checked_solution(
    response: cp_model_pb2.CpSolverResponse,
) -> cp_model_pb2.CpSolverResponse:
    if not has_solution(response):
        raise errors.NoSolutionAvailableError(
            "no solution available, the solve status is"
            f" {cp_model_pb2.CpSolverStatus.Name(response.status)}"
        )
    return response


def _solution_value(
    response: cp_model_pb2.CpSolverResponse, index: int
) -> int:
    if index < 0 or index >= len(response.solution):
        raise errors.InvalidHandleError(
            f"variable index {index} is out of range of the response"
            f" [0, {len(response.solution)})"
        )
    return int(response.solution[index])


def evaluate(
    expression: linear_expr.LinearTypes,
    response: cp_model_pb2.CpSolverResponse,
    model_id: Optional[int] = None,
) -> int:
    """Returns the value of an expression in the solution of a response.

    Args:
      expression: a variable handle, a literal, a LinearExpr or a constant.
      response: the engine response.
      model_id: if set, the id of the model the response was produced for.

    Returns:
      The value of the expression. Boolean variables decode to 0 or 1.

    Raises:
      InvalidHandleError: if the expression belongs to another model, or if it
        uses a variable unknown to the response.
      NoSolutionAvailableError: if the response status is neither OPTIMAL nor
        FEASIBLE.
    """
    _checked_solution(response)
    if mn.is_integral(expression):
        return int(expression)
    expr = linear_expr.as_linear_expr(expression)
    if (
        model_id is not None
        and expr.model_id is not None
        and expr.model_id != model_id
    ):
        raise errors.InvalidHandleError(
            f"{expression} does not belong to the model of this response"
        )
    value = expr.offset
    for index, coeff in expr.terms.items():
        value += coeff * _solution_value(response, index)
    return value


class SolveResponse:
    """The result of solving a CpModel.

    It wraps the CpSolverResponse returned by the engine, with the id of the
    model it was produced for. Values are read with value() and
    boolean_value(), as well as general statistics about the solve.
    """

    def __init__(
        self,
        response: cp_model_pb2.CpSolverResponse,
        model_id: int,
        has_objective: bool,
        engine: Optional[engine_lib.SolverEngine] = None,
    ) -> None:
        self.__response: cp_model_pb2.CpSolverResponse = response
        self.__model_id: int = model_id
        self.__has_objective: bool = has_objective
        self.__engine: Optional[engine_lib.SolverEngine] = engine

    @property
    def proto(self) -> cp_model_pb2.CpSolverResponse:
        """Returns the response object."""
        return self.__response

    @property
    def model_id(self) -> int:
        return self.__model_id

    @property
    def status(self) -> cp_model_pb2.CpSolverStatus:
        return self.__response.status

    def status_name(self) -> str:
        """Returns the name of the status, e.g. OPTIMAL or INFEASIBLE."""
        return cp_model_pb2.CpSolverStatus.Name(self.__response.status)

    @property
    def has_solution(self) -> bool:
        return has_solution(self.__response)

    def value(self, expression: linear_expr.LinearTypes) -> int:
        """Returns the value of a linear expression in the solution."""
        return evaluate(expression, self.__response, self.__model_id)

    def boolean_value(self, literal: Union[variables.LiteralT, bool]) -> bool:
        """Returns the boolean value of a literal in the solution."""
        if mn.is_boolean(literal):
            return bool(literal)
        if not isinstance(
            literal, (variables.IntVar, variables.NotBooleanVariable)
        ):
            raise TypeError(f"not a literal: {literal!r}")
        if not literal.is_boolean:
            raise TypeError(f"{literal} is not a Boolean literal")
        return bool(self.value(literal))

    def values(self, handles: _IndexOrSeries) -> pd.Series:
        """Returns the values of the input variables.

        If `handles` is a `pd.Index`, then the output will be indexed by the
        variables. If `handles` is a `pd.Series` indexed by the underlying
        dimensions, then the output will be indexed by the same underlying
        dimensions.

        Args:
          handles (Union[pd.Index, pd.Series]): The set of variables from which to
            get the values.

        Returns:
          pd.Series: The values of all variables in the set.
        """
        return pd.Series(
            data=[self.value(var) for var in handles],
            index=_get_index(handles),
        )

    def boolean_values(self, literals: _IndexOrSeries) -> pd.Series:
        """Returns the boolean values of the input literals, see values()."""
        return pd.Series(
            data=[self.boolean_value(lit) for lit in literals],
            index=_get_index(literals),
        )

    @property
    def objective_value(self) -> float:
        """Returns the value of the objective after solve."""
        return self.__response.objective_value

    @property
    def best_objective_bound(self) -> float:
        """Returns the best lower (upper) bound found when min(max)imizing."""
        return self.__response.best_objective_bound

    @property
    def num_conflicts(self) -> int:
        return self.__response.num_conflicts

    @property
    def num_branches(self) -> int:
        return self.__response.num_branches

    @property
    def wall_time(self) -> float:
        """Returns the wall time in seconds of the solve."""
        return self.__response.wall_time

    @property
    def user_time(self) -> float:
        return self.__response.user_time

    @property
    def solution_info(self) -> str:
        """How the solution was found, or why the model or parameters are invalid."""
        return self.__response.solution_info

    def response_stats(self) -> str:
        """Returns some statistics on the solution found as a string."""
        engine = self.__engine
        if engine is None:
            engine = engine_lib.CpSatEngine()
        return engine.response_stats(self.__response, self.__has_objective)

    def __str__(self) -> str:
        return f"SolveResponse(status={self.status_name()})"


def _get_index(obj: _IndexOrSeries) -> pd.Index:
    """Returns the indices of `obj` as a `pd.Index`."""
    if isinstance(obj, pd.Series):
        return obj.index
    return obj
