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

"""Variables, variable handles and the table that owns them."""

import dataclasses
import enum
import itertools
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from satbuilder import domain as domain_lib
from satbuilder import errors
from satbuilder import linear_expr

# Each table gets a distinct id, carried by all the handles it creates.
_model_ids = itertools.count()


@enum.unique
class VariableKind(enum.Enum):
    """The kind of a variable, fixed at creation."""

    BOOL = "bool"
    INT = "int"


@dataclasses.dataclass(frozen=True)
class Variable:
    """The record stored for each variable of a model.

    Attributes:
      index: the dense, zero-based position of the variable in the model.
      kind: BOOL or INT.
      domain: the values the variable can take. [0, 1] for BOOL variables.
      name: an optional name, only used for diagnostics.
    """

    index: int
    kind: VariableKind
    domain: domain_lib.Domain
    name: str = ""


class IntVar(linear_expr.LinearBase):
    """A handle on an integer or Boolean variable of a model.

    An IntVar is an object that can take on any integer value within defined
    ranges. Variables appear in constraint like:

        x + y >= 5
        model.add_all_different([x, y, z])

    The handle is a small immutable value: the id of the model that created it,
    the index of the variable, its kind and its name. Using it with another model
    raises InvalidHandleError.
    """

    __slots__ = ("_model_id", "_index", "_kind", "_name", "_is_boolean", "_negation")

    def __init__(
        self,
        model_id: int,
        index: int,
        kind: VariableKind,
        name: str = "",
        is_boolean: Optional[bool] = None,
    ) -> None:
        self._model_id: int = model_id
        self._index: int = index
        self._kind: VariableKind = kind
        self._name: str = name
        self._is_boolean: bool = (
            kind == VariableKind.BOOL if is_boolean is None else is_boolean
        )
        self._negation: Optional["NotBooleanVariable"] = None

    @property
    def model_id(self) -> int:
        return self._model_id

    @property
    def index(self) -> int:
        """Returns the index of the variable in the model."""
        return self._index

    @property
    def kind(self) -> VariableKind:
        return self._kind

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_boolean(self) -> bool:
        """True if the variable can be used as a literal."""
        return self._is_boolean

    def negated(self) -> "NotBooleanVariable":
        """Returns the negation of a Boolean variable.

        This method implements the logical negation of a Boolean variable.
        It is only valid if the variable has a Boolean domain (0 or 1).

        Note that this method is nilpotent: `x.negated().negated() == x`.

        Raises:
          TypeError: if the variable is not Boolean.
        """
        if not self._is_boolean:
            raise TypeError(f"cannot negate the non Boolean variable {self}")
        if self._negation is None:
            self._negation = NotBooleanVariable(self)
        return self._negation

    def __invert__(self) -> "NotBooleanVariable":
        return self.negated()

    def to_linear_expr(self) -> linear_expr.LinearExpr:
        return linear_expr.LinearExpr({self._index: 1}, 0, self._model_id)

    def _identity_key(self) -> Tuple[int, int]:
        return (self._model_id, self._index)

    def __hash__(self) -> int:
        return hash((self._model_id, self._index))

    def __str__(self) -> str:
        if self._name:
            return self._name
        if self._kind == VariableKind.BOOL:
            return f"BooleanVar({self._index})"
        return f"IntVar({self._index})"

    def __repr__(self) -> str:
        return (
            f"IntVar(index={self._index}, kind={self._kind.value},"
            f" name={self._name!r})"
        )


class NotBooleanVariable(linear_expr.LinearBase):
    """The negation of a Boolean variable.

    As a literal, its wire index is `-index - 1`. In a linear expression, it is
    equal to `1 - var`.
    """

    __slots__ = ("_var",)

    def __init__(self, var: IntVar) -> None:
        self._var: IntVar = var

    @property
    def model_id(self) -> int:
        return self._var.model_id

    @property
    def index(self) -> int:
        """Returns the wire index of the literal."""
        return -self._var.index - 1

    @property
    def is_boolean(self) -> bool:
        return True

    def negated(self) -> IntVar:
        return self._var

    def __invert__(self) -> IntVar:
        return self._var

    def to_linear_expr(self) -> linear_expr.LinearExpr:
        return linear_expr.LinearExpr({self._var.index: -1}, 1, self._var.model_id)

    def _identity_key(self) -> Tuple[int, int]:
        return (self._var.model_id, self.index)

    def __hash__(self) -> int:
        return hash((self._var.model_id, self.index))

    def __str__(self) -> str:
        return f"not({self._var})"

    def __repr__(self) -> str:
        return f"NotBooleanVariable({self._var!r})"


LiteralT = Union[IntVar, NotBooleanVariable]
DomainT = Union[domain_lib.Domain, Sequence[Sequence[int]]]


class VariableTable:
    """Owns the variables of one model.

    Indices are assigned densely in creation order and never reused. Records are
    immutable once created.
    """

    def __init__(self) -> None:
        self._model_id: int = next(_model_ids)
        self._variables: List[Variable] = []
        self._handles: List[IntVar] = []

    @property
    def model_id(self) -> int:
        """The opaque identity tag carried by the handles of this table."""
        return self._model_id

    def _append(
        self, kind: VariableKind, domain: domain_lib.Domain, name: Optional[str]
    ) -> IntVar:
        if name is None:
            name = ""
        if not isinstance(name, str):
            raise TypeError(f"variable names must be strings, got {name!r}")
        index = len(self._variables)
        self._variables.append(Variable(index, kind, domain, name))
        handle = IntVar(
            self._model_id,
            index,
            kind,
            name,
            is_boolean=domain.min() >= 0 and domain.max() <= 1,
        )
        self._handles.append(handle)
        return handle

    def add_bool(self, name: Optional[str] = "") -> IntVar:
        """Creates a Boolean variable with domain [0, 1]."""
        return self._append(VariableKind.BOOL, domain_lib.Domain(0, 1), name)

    def add_int(self, domain: DomainT, name: Optional[str] = "") -> IntVar:
        """Creates an integer variable.

        Args:
          domain: a Domain, or a list of (lo, hi) pairs.
          name: an optional name, stored verbatim.

        Returns:
          The handle of the new variable.

        Raises:
          InvalidDomainError: if the domain is malformed.
        """
        if not isinstance(domain, domain_lib.Domain):
            domain = domain_lib.Domain.from_intervals(domain)
        return self._append(VariableKind.INT, domain, name)

    def check_handle(self, handle: linear_expr.LinearBase) -> None:
        """Raises InvalidHandleError if the handle was not created by this table."""
        if not isinstance(handle, (IntVar, NotBooleanVariable)):
            raise TypeError(f"not a variable handle: {handle!r}")
        if handle.model_id != self._model_id:
            raise errors.InvalidHandleError(
                f"variable {handle} belongs to another model"
            )
        var_index = handle.index if handle.index >= 0 else -handle.index - 1
        if var_index >= len(self._variables):
            raise errors.InvalidHandleError(
                f"variable index {var_index} is out of range"
                f" [0, {len(self._variables)})"
            )

    def check_expr(self, expr: linear_expr.LinearExpr) -> None:
        """Raises InvalidHandleError if expr uses variables of another table."""
        if expr.model_id is None:
            return
        if expr.model_id != self._model_id:
            raise errors.InvalidHandleError(
                "the expression uses variables of another model"
            )
        for index in expr.terms:
            if index >= len(self._variables):
                raise errors.InvalidHandleError(
                    f"variable index {index} is out of range"
                )

    def get(self, handle: LiteralT) -> Variable:
        """Returns the record of the variable behind a handle or a literal."""
        self.check_handle(handle)
        var_index = handle.index if handle.index >= 0 else -handle.index - 1
        return self._variables[var_index]

    def handle(self, index: int) -> IntVar:
        """Returns the handle of the variable at the given index."""
        if index < 0 or index >= len(self._handles):
            raise errors.InvalidHandleError(
                f"variable index {index} is out of range [0, {len(self._handles)})"
            )
        return self._handles[index]

    def literal_index(self, literal: LiteralT) -> int:
        """Returns the wire index of a literal after checking it.

        Raises:
          InvalidHandleError: if the literal belongs to another model.
          TypeError: if the variable is not Boolean.
        """
        self.check_handle(literal)
        if not literal.is_boolean:
            raise TypeError(f"{literal} is not a Boolean literal")
        return literal.index

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables)
