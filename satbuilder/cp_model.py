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

"""Methods for building and solving CP-SAT models.

The following two sections describe the main
methods for building and solving CP-SAT models.

* [`CpModel`](#cp_model.CpModel): Methods for creating
models, including variables and constraints.
* [`SolveResponse`](#response.SolveResponse): The result of a solve, with
the values of the variables.

Additional methods for building linear expressions are in the linear_expr
module.

    model = CpModel()
    x = model.new_int_var(0, 10, "x")
    y = model.new_int_var(0, 10, "y")
    model.add(x + 2 * y <= 14)
    model.maximize(x + y)
    response = model.solve()
    if response.has_solution:
        print(response.value(x), response.value(y))

The model is an in-memory description. It is lowered to a fresh
`cp_model_pb2.CpModelProto` by finish(), which can be called at any time and
any number of times. The same sequence of calls always produces the same bytes.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from google.protobuf import text_format
from ortools.sat import cp_model_pb2
from ortools.sat import sat_parameters_pb2

from satbuilder import constraints
from satbuilder import domain as domain_lib
from satbuilder import engine as engine_lib
from satbuilder import errors
from satbuilder import linear_expr
from satbuilder import model_numbers as mn
from satbuilder import parameters as parameters_lib
from satbuilder import response as response_lib
from satbuilder import variables as variables_lib

Constraint = constraints.Constraint
Domain = domain_lib.Domain
IntVar = variables_lib.IntVar
LinearExpr = linear_expr.LinearExpr
ObjectiveDirection = constraints.ObjectiveDirection
SolveParameters = parameters_lib.SolveParameters
SolveResponse = response_lib.SolveResponse

INT_MIN = mn.INT_MIN
INT_MAX = mn.INT_MAX

# The possible status of a solve.
UNKNOWN = cp_model_pb2.UNKNOWN
MODEL_INVALID = cp_model_pb2.MODEL_INVALID
FEASIBLE = cp_model_pb2.FEASIBLE
INFEASIBLE = cp_model_pb2.INFEASIBLE
OPTIMAL = cp_model_pb2.OPTIMAL

LiteralT = Union[variables_lib.LiteralT, bool, int]
ResponseT = Union[response_lib.SolveResponse, cp_model_pb2.CpSolverResponse]


def _expand(args: Sequence) -> List:
    """Accepts either f(a, b, c) or f([a, b, c])."""
    if len(args) != 1:
        return list(args)
    arg = args[0]
    if isinstance(arg, linear_expr.LinearBase) or mn.is_integral(arg):
        return [arg]
    if mn.is_boolean(arg):
        return [arg]
    return list(arg)


class CpModel:
    """Methods for building a CP model.

    Methods beginning with:

    * ```new``` create integer or Boolean variables.
    * ```add``` create new constraints and add them to the model.

    Every method checks its arguments before touching the model: a call that
    raises leaves the model as it was.
    """

    def __init__(
        self, name: str = "", engine: Optional[engine_lib.SolverEngine] = None
    ) -> None:
        self.__name: str = name or ""
        self.__table = variables_lib.VariableTable()
        self.__constraints: constraints.ConstraintSet = constraints.ConstraintSet()
        self.__constant_map: Dict[int, IntVar] = {}
        self.__engine: engine_lib.SolverEngine = (
            engine if engine is not None else engine_lib.CpSatEngine()
        )

    # Naming.
    @property
    def name(self) -> str:
        """Returns the name of the model."""
        return self.__name

    @name.setter
    def name(self, name: str):
        """Sets the name of the model."""
        self.__name = name or ""

    @property
    def model_id(self) -> int:
        """The identity tag shared by all the handles of this model."""
        return self.__table.model_id

    @property
    def constraint_set(self) -> constraints.ConstraintSet:
        return self.__constraints

    @property
    def num_variables(self) -> int:
        return len(self.__table)

    @property
    def num_constraints(self) -> int:
        return len(self.__constraints)

    # Integer variable.

    def new_int_var(self, lb: int, ub: int, name: str = "") -> IntVar:
        """Create an integer variable with domain [lb, ub].

        The CP-SAT solver is limited to integer variables. If you have fractional
        values, scale them up so that they become integers; if you have strings,
        encode them as integers.

        Args:
          lb: Lower bound for the variable.
          ub: Upper bound for the variable.
          name: The name of the variable.

        Returns:
          a variable whose domain is [lb, ub].

        Raises:
          InvalidDomainError: if lb > ub or a bound is not an int64.
        """
        return self.__table.add_int(domain_lib.Domain(lb, ub), name)

    def new_int_var_from_domain(
        self, domain: variables_lib.DomainT, name: str = ""
    ) -> IntVar:
        """Create an integer variable from a domain.

        A domain is a set of integers specified by a collection of intervals.
        For example, `model.new_int_var_from_domain(
             Domain.from_intervals([[1, 2], [4, 6]]), 'x')`

        Args:
          domain: An instance of the Domain class, or a list of [lo, hi] pairs.
          name: The name of the variable.

        Returns:
            a variable whose domain is the given domain.
        """
        return self.__table.add_int(domain, name)

    def new_bool_var(self, name: str = "") -> IntVar:
        """Creates a 0-1 variable with the given name."""
        return self.__table.add_bool(name)

    def new_constant(self, value: int) -> IntVar:
        """Declares a constant integer.

        Constants are cached: declaring the same value twice returns the same
        variable.
        """
        value = mn.assert_is_int64(value)
        if value not in self.__constant_map:
            self.__constant_map[value] = self.__table.add_int(
                domain_lib.Domain(value, value)
            )
        return self.__constant_map[value]

    def get_int_var_from_proto_index(self, index: int) -> IntVar:
        """Returns an already created integer variable from its index."""
        return self.__table.handle(index)

    def get_variable(
        self, handle: variables_lib.LiteralT
    ) -> variables_lib.Variable:
        """Returns the record of the variable behind a handle."""
        return self.__table.get(handle)

    def variables(self) -> List[IntVar]:
        """Returns the handles of all variables, in index order."""
        return [self.__table.handle(i) for i in range(len(self.__table))]

    # Literals and expressions.

    def _check_literal(self, literal: LiteralT) -> None:
        if mn.is_boolean(literal):
            return
        if mn.is_integral(literal):
            mn.assert_is_zero_or_one(literal)
            return
        if isinstance(
            literal, (variables_lib.IntVar, variables_lib.NotBooleanVariable)
        ):
            self.__table.literal_index(literal)
            return
        raise TypeError(f"not a literal: {literal!r}")

    def literal_index(self, literal: LiteralT) -> int:
        """Returns the wire index of a literal.

        Constant literals (True, False, 0, 1) are mapped to constant variables.

        Raises:
          InvalidHandleError: if the literal belongs to another model.
          TypeError: if the argument is not a Boolean literal.
        """
        self._check_literal(literal)
        if isinstance(literal, linear_expr.LinearBase):
            return literal.index
        return self.new_constant(int(literal)).index

    def literal_indices(self, literals: Sequence[LiteralT]) -> List[int]:
        """Returns the wire indices of literals, see literal_index().

        All literals are checked before any constant variable is created.
        """
        for literal in literals:
            self._check_literal(literal)
        return [self.literal_index(literal) for literal in literals]

    def _linear_expr(self, expr: linear_expr.LinearTypes) -> LinearExpr:
        result = linear_expr.as_linear_expr(expr)
        self.__table.check_expr(result)
        return result

    def _expr_record(
        self, expr: linear_expr.LinearTypes, negate: bool = False
    ) -> constraints.ExprRecord:
        flat = self._linear_expr(expr)
        if negate:
            flat = flat.scale(-1)
        return constraints.ExprRecord.from_linear_expr(flat)

    def _append(self, record: constraints.ConstraintRecord) -> Constraint:
        return Constraint(self, self.__constraints.append(record))

    # Linear constraints.

    def add_linear_expression_in_domain(
        self, expr: linear_expr.LinearTypes, domain: domain_lib.Domain
    ) -> Constraint:
        """Adds the constraint: `expr` in `domain`."""
        if not isinstance(domain, domain_lib.Domain):
            raise TypeError(f"not a Domain: {domain!r}")
        flat = self._linear_expr(expr)
        return self._append(constraints.linear_constraint(flat, domain))

    def add_linear_le(self, expr: linear_expr.LinearTypes, bound: int) -> Constraint:
        """Adds `expr <= bound`."""
        return self.add_linear_expression_in_domain(
            expr, domain_lib.Domain(INT_MIN, bound)
        )

    def add_linear_ge(self, expr: linear_expr.LinearTypes, bound: int) -> Constraint:
        """Adds `expr >= bound`."""
        return self.add_linear_expression_in_domain(
            expr, domain_lib.Domain(bound, INT_MAX)
        )

    def add_linear_eq(self, expr: linear_expr.LinearTypes, value: int) -> Constraint:
        """Adds `expr == value`."""
        return self.add_linear_expression_in_domain(
            expr, domain_lib.Domain(value, value)
        )

    def add_linear_bounded(
        self, expr: linear_expr.LinearTypes, lb: int, ub: int
    ) -> Constraint:
        """Adds the constraint: `lb <= expr <= ub`.

        Raises:
          InvalidDomainError: if lb > ub.
        """
        return self.add_linear_expression_in_domain(expr, domain_lib.Domain(lb, ub))

    def add(self, ct: Union[linear_expr.BoundedLinearExpression, bool]) -> Constraint:
        """Adds a `BoundedLinearExpression` to the model.

        Args:
          ct: A [`BoundedLinearExpression`](#boundedlinearexpression), or a
            Boolean constant.

        Returns:
          An instance of the `Constraint` class.

        Raises:
          TypeError: If the `ct` is not a `BoundedLinearExpression` or a Boolean.
        """
        if isinstance(ct, linear_expr.BoundedLinearExpression):
            return self.add_linear_expression_in_domain(ct.expression, ct.domain)
        if ct and mn.is_boolean(ct):
            return self._append(constraints.BoolAndConstraint(literals=()))
        if not ct and mn.is_boolean(ct):
            return self._append(constraints.BoolOrConstraint(literals=()))
        raise TypeError(f"not supported: CpModel.add({type(ct).__name__!r})")

    # Boolean constraints.

    def add_bool_and(self, *literals) -> Constraint:
        """Adds `And(literals) == true`. An empty list is always satisfied."""
        indices = self.literal_indices(_expand(literals))
        return self._append(constraints.BoolAndConstraint(literals=tuple(indices)))

    def add_and(self, literals: Iterable[LiteralT]) -> Constraint:
        """Same as add_bool_and()."""
        return self.add_bool_and(list(literals))

    def add_bool_or(self, *literals) -> Constraint:
        """Adds `Or(literals) == true`: sum(literals) >= 1."""
        indices = self.literal_indices(_expand(literals))
        return self._append(constraints.BoolOrConstraint(literals=tuple(indices)))

    def add_or(self, literals: Iterable[LiteralT]) -> Constraint:
        return self.add_bool_or(list(literals))

    def add_bool_xor(self, *literals) -> Constraint:
        """Adds `XOr(literals) == true`.

        Args:
          *literals: the list of literals in the constraint.

        Returns:
          An `Constraint` object.
        """
        indices = self.literal_indices(_expand(literals))
        return self._append(constraints.BoolXorConstraint(literals=tuple(indices)))

    def add_xor(self, literals: Iterable[LiteralT]) -> Constraint:
        return self.add_bool_xor(list(literals))

    def add_at_most_one(self, *literals) -> Constraint:
        """Adds `AtMostOne(literals)`: `sum(literals) <= 1`."""
        indices = self.literal_indices(_expand(literals))
        return self._append(constraints.AtMostOneConstraint(literals=tuple(indices)))

    def add_exactly_one(self, *literals) -> Constraint:
        """Adds `ExactlyOne(literals)`: `sum(literals) == 1`."""
        indices = self.literal_indices(_expand(literals))
        return self._append(constraints.ExactlyOneConstraint(literals=tuple(indices)))

    def add_implication(self, a: LiteralT, b: LiteralT) -> Constraint:
        """Adds `a => b` (`a` implies `b`)."""
        premise, conclusion = self.literal_indices([a, b])
        return self._append(
            constraints.BoolOrConstraint(
                literals=(conclusion,), enforcement_literals=[premise]
            )
        )

    # General integer constraints.

    def add_ne(
        self, a: linear_expr.LinearTypes, b: linear_expr.LinearTypes
    ) -> Constraint:
        """Adds `a != b`.

        When both sides are affine (at most one variable), the constraint is sent
        to the engine as a disequality. Otherwise it is added as
        `a - b in [INT_MIN, -1] U [1, INT_MAX]`.
        """
        left = self._expr_record(a)
        right = self._expr_record(b)
        if left.is_affine() and right.is_affine():
            return self._append(constraints.NotEqualConstraint(left=left, right=right))
        diff = self._linear_expr(a) - self._linear_expr(b)
        return self.add_linear_expression_in_domain(
            diff, domain_lib.Domain(0, 0).complement()
        )

    def add_all_different(self, *expressions) -> Constraint:
        """Adds AllDifferent(expressions).

        This constraint forces all expressions to have different values.

        Args:
          *expressions: simple expressions of the form a * var + constant.

        Returns:
          An instance of the `Constraint` class.
        """
        exprs = tuple(self._expr_record(e) for e in _expand(expressions))
        return self._append(constraints.AllDifferentConstraint(exprs=exprs))

    def add_max_equality(
        self, target: linear_expr.LinearTypes, exprs: Iterable[linear_expr.LinearTypes]
    ) -> Constraint:
        """Adds `target == Max(exprs)`."""
        return self._append(
            constraints.LinMaxConstraint(
                target=self._expr_record(target),
                exprs=tuple(self._expr_record(e) for e in exprs),
            )
        )

    def add_min_equality(
        self, target: linear_expr.LinearTypes, exprs: Iterable[linear_expr.LinearTypes]
    ) -> Constraint:
        """Adds `target == Min(exprs)`, as `-target == Max(-exprs)`."""
        return self._append(
            constraints.LinMaxConstraint(
                target=self._expr_record(target, negate=True),
                exprs=tuple(self._expr_record(e, negate=True) for e in exprs),
            )
        )

    # Objective.

    def set_objective(
        self, expr: linear_expr.LinearTypes, direction: ObjectiveDirection
    ) -> None:
        """Sets the objective of the model, replacing the previous one."""
        if not isinstance(direction, ObjectiveDirection):
            raise TypeError(f"not an ObjectiveDirection: {direction!r}")
        flat = self._linear_expr(expr)
        self.__constraints.set_objective(
            constraints.Objective.from_linear_expr(flat, direction)
        )

    def minimize(self, obj: linear_expr.LinearTypes) -> None:
        """Sets the objective of the model to minimize(obj)."""
        self.set_objective(obj, ObjectiveDirection.MINIMIZE)

    def maximize(self, obj: linear_expr.LinearTypes) -> None:
        """Sets the objective of the model to maximize(obj)."""
        self.set_objective(obj, ObjectiveDirection.MAXIMIZE)

    def has_objective(self) -> bool:
        return self.__constraints.objective is not None

    def clear_objective(self) -> None:
        self.__constraints.clear_objective()

    # Hints.

    def add_hint(
        self, var: variables_lib.LiteralT, value: Union[int, bool]
    ) -> None:
        """Adds 'var == value' as a hint to the solver."""
        self.__table.check_handle(var)
        if isinstance(var, variables_lib.NotBooleanVariable):
            self.__constraints.add_hint(
                var.negated().index, int(not mn.assert_is_zero_or_one(value))
            )
            return
        if mn.is_boolean(value):
            value = int(value)
        self.__constraints.add_hint(var.index, mn.assert_is_int64(value))

    def clear_hints(self) -> None:
        """Removes any solution hint from the model."""
        self.__constraints.clear_hints()

    # Lowering.

    def finish(self) -> cp_model_pb2.CpModelProto:
        """Returns the model in the CP-SAT wire format.

        Each call builds a new proto. The model can still be modified after, and
        finish() called again.
        """
        proto = cp_model_pb2.CpModelProto()
        if self.__name:
            proto.name = self.__name
        for var in self.__table:
            var_proto = proto.variables.add()
            if var.name:
                var_proto.name = var.name
            var_proto.domain.extend(var.domain.flattened_intervals())
        self.__constraints.fill_proto(proto)
        return proto

    @property
    def proto(self) -> cp_model_pb2.CpModelProto:
        """Returns the model as a CpModelProto, see finish()."""
        return self.finish()

    def serialize(self) -> bytes:
        """Returns the deterministic binary encoding of the model."""
        return self.finish().SerializeToString(deterministic=True)

    def export_to_file(self, file: str) -> bool:
        """Write the model as a protocol buffer to 'file'.

        Args:
          file: file to write the model to. If the filename ends with 'txt', the
            model will be written as a text file, otherwise, the binary format will
            be used.

        Returns:
          True if the model was correctly written.
        """
        if file.endswith("txt"):
            with open(file, "w") as f:
                f.write(text_format.MessageToString(self.finish()))
        else:
            with open(file, "wb") as f:
                f.write(self.serialize())
        return True

    def __str__(self) -> str:
        return str(self.finish())

    # Engine.

    def model_stats(self) -> str:
        """Returns a string containing some model statistics."""
        return self.__engine.model_stats(self.finish())

    def validate(self) -> str:
        """Returns a string indicating that the model is invalid."""
        return self.__engine.validate(self.finish())

    def solution_is_feasible(self, values: Sequence[int]) -> bool:
        """Checks that values[i], the value of variable i, satisfy the model."""
        return self.__engine.solution_is_feasible(self.finish(), list(values))

    def solve(
        self,
        parameters: Union[
            parameters_lib.SolveParameters, sat_parameters_pb2.SatParameters, None
        ] = None,
    ) -> response_lib.SolveResponse:
        """Solves the model and returns the response.

        Args:
          parameters: a SolveParameters, raw SatParameters, or None for the
            engine defaults.

        Returns:
          A SolveResponse bound to this model.

        Raises:
          EngineError: if the engine itself fails. An infeasible or invalid model
            is reported through the status of the response.
        """
        if parameters is None:
            params = sat_parameters_pb2.SatParameters()
        elif isinstance(parameters, parameters_lib.SolveParameters):
            params = parameters.to_proto()
        elif isinstance(parameters, sat_parameters_pb2.SatParameters):
            params = parameters
        else:
            raise TypeError(f"not solve parameters: {parameters!r}")
        response = self.__engine.solve_with_parameters(self.finish(), params)
        return response_lib.SolveResponse(
            response, self.model_id, self.has_objective(), self.__engine
        )

    # Decoding.

    def _checked_response(self, response: ResponseT) -> cp_model_pb2.CpSolverResponse:
        if isinstance(response, response_lib.SolveResponse):
            if response.model_id != self.model_id:
                raise errors.InvalidHandleError(
                    "the response was produced for another model"
                )
            return response.proto
        if isinstance(response, cp_model_pb2.CpSolverResponse):
            return response
        raise TypeError(f"not a solver response: {response!r}")

    def solution_value(
        self, expression: linear_expr.LinearTypes, response: ResponseT
    ) -> int:
        """Returns the value of a variable or an expression in a response.

        Raises:
          InvalidHandleError: if the handle or the response belongs to another
            model, or if the response does not cover the variable.
          NoSolutionAvailableError: if the response holds no solution.
        """
        proto = self._checked_response(response)
        self._linear_expr(expression)
        return response_lib.evaluate(expression, proto, self.model_id)

    def boolean_value(self, literal: LiteralT, response: ResponseT) -> bool:
        """Returns the Boolean value of a literal in a response."""
        proto = self._checked_response(response)
        if mn.is_boolean(literal):
            return bool(literal)
        self.__table.literal_index(literal)
        return bool(response_lib.evaluate(literal, proto, self.model_id))
