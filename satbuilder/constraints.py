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

"""Constraint and objective records, and their lowering to CP-SAT protos.

Records only store variable indices, coefficients and bounds resolved when the
constraint is added. They never hold a reference to a handle, so a record stays
valid whatever the caller does with its handles.

Lowering is done by to_proto() on each record, and by ConstraintSet.fill_proto()
for the whole set, always in insertion order.
"""

import dataclasses
import enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple

from ortools.sat import cp_model_pb2

from satbuilder import domain as domain_lib
from satbuilder import linear_expr

if TYPE_CHECKING:
    from satbuilder import cp_model

Terms = Tuple[Tuple[int, int], ...]


@dataclasses.dataclass(frozen=True)
class ExprRecord:
    """A linear expression resolved to (index, coefficient) pairs and an offset."""

    terms: Terms
    offset: int = 0

    @classmethod
    def from_linear_expr(cls, expr: linear_expr.LinearExpr) -> "ExprRecord":
        return cls(expr.sorted_terms(), expr.offset)

    def is_affine(self) -> bool:
        """True if the expression has at most one variable."""
        return len(self.terms) <= 1

    def to_proto(self, proto: cp_model_pb2.LinearExpressionProto) -> None:
        for index, coeff in self.terms:
            proto.vars.append(index)
            proto.coeffs.append(coeff)
        proto.offset = self.offset


@dataclasses.dataclass(kw_only=True)
class ConstraintRecord:
    """Fields shared by all constraints.

    Attributes:
      enforcement_literals: the wire indices of the literals whose conjunction
        enables the constraint. An empty list means always enforced.
      name: an optional name, only used for diagnostics.
    """

    enforcement_literals: List[int] = dataclasses.field(default_factory=list)
    name: str = ""

    def to_proto(self, proto: cp_model_pb2.ConstraintProto) -> None:
        if self.name:
            proto.name = self.name
        proto.enforcement_literal.extend(self.enforcement_literals)
        self._fill(proto)

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        raise NotImplementedError


@dataclasses.dataclass
class LinearConstraint(ConstraintRecord):
    """sum(coeff * var) in domain. The expression offset is already folded."""

    terms: Terms
    domain: domain_lib.Domain

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        for index, coeff in self.terms:
            proto.linear.vars.append(index)
            proto.linear.coeffs.append(coeff)
        proto.linear.domain.extend(self.domain.flattened_intervals())


@dataclasses.dataclass
class BoolAndConstraint(ConstraintRecord):
    """All literals are true. An empty list is always satisfied."""

    literals: Tuple[int, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        # Set the field even when empty, so that the constraint keeps its type.
        proto.bool_and.SetInParent()
        proto.bool_and.literals.extend(self.literals)


@dataclasses.dataclass
class BoolOrConstraint(ConstraintRecord):
    """At least one literal is true. An empty list is never satisfied."""

    literals: Tuple[int, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        proto.bool_or.SetInParent()
        proto.bool_or.literals.extend(self.literals)


@dataclasses.dataclass
class BoolXorConstraint(ConstraintRecord):
    """An odd number of literals is true."""

    literals: Tuple[int, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        proto.bool_xor.SetInParent()
        proto.bool_xor.literals.extend(self.literals)


@dataclasses.dataclass
class AtMostOneConstraint(ConstraintRecord):
    literals: Tuple[int, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        proto.at_most_one.SetInParent()
        proto.at_most_one.literals.extend(self.literals)


@dataclasses.dataclass
class ExactlyOneConstraint(ConstraintRecord):
    literals: Tuple[int, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        proto.exactly_one.SetInParent()
        proto.exactly_one.literals.extend(self.literals)


@dataclasses.dataclass
class NotEqualConstraint(ConstraintRecord):
    """left != right, for two affine expressions.

    The engine handles disequality natively as an all_diff over two expressions.
    """

    left: ExprRecord
    right: ExprRecord

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        self.left.to_proto(proto.all_diff.exprs.add())
        self.right.to_proto(proto.all_diff.exprs.add())


@dataclasses.dataclass
class AllDifferentConstraint(ConstraintRecord):
    """All affine expressions take pairwise different values."""

    exprs: Tuple[ExprRecord, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        proto.all_diff.SetInParent()
        for expr in self.exprs:
            expr.to_proto(proto.all_diff.exprs.add())


@dataclasses.dataclass
class LinMaxConstraint(ConstraintRecord):
    """target == max(exprs)."""

    target: ExprRecord
    exprs: Tuple[ExprRecord, ...]

    def _fill(self, proto: cp_model_pb2.ConstraintProto) -> None:
        self.target.to_proto(proto.lin_max.target)
        for expr in self.exprs:
            expr.to_proto(proto.lin_max.exprs.add())


def linear_constraint(
    expr: linear_expr.LinearExpr, domain: domain_lib.Domain
) -> LinearConstraint:
    """Returns the record for `expr in domain`, with the offset folded.

    Finite bounds are shifted by -offset (capped to the int64 range), INT_MIN
    and INT_MAX stay infinite.
    """
    return LinearConstraint(
        terms=expr.sorted_terms(), domain=domain.shifted(-expr.offset)
    )


@enum.unique
class ObjectiveDirection(enum.Enum):
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


@dataclasses.dataclass(frozen=True)
class Objective:
    """The linear objective of a model, in the minimizing form of the engine.

    Maximization is encoded by negating the coefficients and the offset, with a
    scaling factor of -1 so that reported objective values are in the direction
    chosen by the caller.
    """

    terms: Terms
    offset: int
    direction: ObjectiveDirection

    @classmethod
    def from_linear_expr(
        cls, expr: linear_expr.LinearExpr, direction: ObjectiveDirection
    ) -> "Objective":
        """Returns the objective of `expr`, negated when maximizing.

        Raises:
          ArithmeticOverflowError: if a negated coefficient leaves the int64 range.
        """
        if direction == ObjectiveDirection.MAXIMIZE:
            expr = expr.scale(-1)
        return cls(expr.sorted_terms(), expr.offset, direction)

    def to_proto(self, proto: cp_model_pb2.CpObjectiveProto) -> None:
        for index, coeff in self.terms:
            proto.vars.append(index)
            proto.coeffs.append(coeff)
        proto.offset = self.offset
        if self.direction == ObjectiveDirection.MINIMIZE:
            proto.scaling_factor = 1
        else:
            proto.scaling_factor = -1


class ConstraintSet:
    """The ordered constraints, the objective and the hints of a model."""

    def __init__(self) -> None:
        self._records: List[ConstraintRecord] = []
        self._objective: Optional[Objective] = None
        self._hints: List[Tuple[int, int]] = []

    def append(self, record: ConstraintRecord) -> int:
        """Appends a record, returns its index."""
        self._records.append(record)
        return len(self._records) - 1

    def record(self, index: int) -> ConstraintRecord:
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ConstraintRecord]:
        return iter(self._records)

    @property
    def objective(self) -> Optional[Objective]:
        return self._objective

    def set_objective(self, objective: Objective) -> None:
        """Replaces the current objective, if any."""
        self._objective = objective

    def clear_objective(self) -> None:
        self._objective = None

    @property
    def hints(self) -> List[Tuple[int, int]]:
        return list(self._hints)

    def add_hint(self, index: int, value: int) -> None:
        self._hints.append((index, value))

    def clear_hints(self) -> None:
        self._hints.clear()

    def fill_proto(self, proto: cp_model_pb2.CpModelProto) -> None:
        """Appends the constraints, the objective and the hints to proto."""
        for record in self._records:
            record.to_proto(proto.constraints.add())
        if self._objective is not None:
            self._objective.to_proto(proto.objective)
        for index, value in self._hints:
            proto.solution_hint.vars.append(index)
            proto.solution_hint.values.append(value)


class Constraint:
    """A handle on a constraint added to a CpModel.

    Constraints are built by the CpModel through the add<XXX> methods.
    Once created by the CpModel class, they are automatically added to the model.
    The purpose of this class is to allow specification of enforcement literals
    and names for this constraint.

        b = model.new_bool_var('b')
        x = model.new_int_var(0, 10, 'x')
        y = model.new_int_var(0, 10, 'y')

        model.add(x + 2 * y == 5).only_enforce_if(b.negated())
    """

    def __init__(self, model: "cp_model.CpModel", index: int) -> None:
        self.__model: "cp_model.CpModel" = model
        self.__index: int = index

    @property
    def _record(self) -> ConstraintRecord:
        return self.__model.constraint_set.record(self.__index)

    def only_enforce_if(self, *literals) -> "Constraint":
        """Adds one or more enforcement literals to the constraint.

        The conjunction of all these literals determines whether the constraint is
        active or not. It acts as an implication, so if the conjunction is true, it
        implies that the constraint must be enforced. If it is false, then the
        constraint is ignored.

        Args:
          *literals: One or more Boolean literals, or a single iterable of them.

        Returns:
          self.

        Raises:
          InvalidHandleError: if a literal belongs to another model. Nothing is
            added in that case.
        """
        if len(literals) == 1 and not isinstance(
            literals[0], (linear_expr.LinearBase, bool, int)
        ):
            literals = tuple(literals[0])
        indices = self.__model.literal_indices(
            [
                lit
                for lit in literals
                if not (isinstance(lit, (bool, int)) and int(lit) == 1)
            ]
        )
        self._record.enforcement_literals.extend(indices)
        return self

    def with_name(self, name: str) -> "Constraint":
        """Sets the name of the constraint."""
        self._record.name = name or ""
        return self

    @property
    def name(self) -> str:
        """Returns the name of the constraint."""
        return self._record.name

    @property
    def index(self) -> int:
        """Returns the index of the constraint in the model."""
        return self.__index

    @property
    def proto(self) -> cp_model_pb2.ConstraintProto:
        """Returns a lowered copy of the constraint."""
        proto = cp_model_pb2.ConstraintProto()
        self._record.to_proto(proto)
        return proto
