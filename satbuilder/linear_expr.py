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

"""Integer linear expressions and the operators that build them.

A linear expression is built from constants and variables. For example,
`x + 2 * (y - z + 1)`.

Linear expressions are used in constraints and in the objective:

* You can define linear constraints as in:

```
model.add(x + 2 * y <= 5)
model.add(sum(array_of_vars) == 5)
```

* The objective is a linear expression:

```
model.minimize(x + 2 * y + z)
```

* For large arrays, using the LinearExpr class is faster that using the python
`sum()` function:

```
model.minimize(LinearExpr.sum(expressions))
model.add(LinearExpr.weighted_sum(expressions, coeffs) >= 0)
```

Every expression is flattened eagerly into a map from variable index to
coefficient plus an offset. All coefficients are integers in the int64 range;
leaving it raises ArithmeticOverflowError.
"""

import abc
from typing import Iterable, Mapping, NoReturn, Optional, Sequence, Tuple, Union

import immutabledict

from satbuilder import domain as domain_lib
from satbuilder import errors
from satbuilder import model_numbers as mn

LinearTypes = Union[int, "LinearBase"]


def _raise_non_linear_error(lhs: "LinearBase", rhs: "LinearBase") -> NoReturn:
    raise TypeError(
        f"cannot multiply {lhs!s} by {rhs!s}: only linear expressions are supported"
    )


def _merge_model_ids(first: Optional[int], second: Optional[int]) -> Optional[int]:
    """Returns the model id shared by two expressions."""
    if first is None:
        return second
    if second is None or first == second:
        return first
    raise errors.InvalidHandleError(
        "cannot combine variables that belong to two different models"
    )


def as_linear_expr(value: LinearTypes) -> "LinearExpr":
    """Converts a constant, a variable or an expression into a LinearExpr."""
    if isinstance(value, LinearBase):
        return value.to_linear_expr()
    return LinearExpr.constant(value)


class LinearBase(metaclass=abc.ABCMeta):
    """Interface for types that can build linear expressions with operators.

    Subclasses only need to implement to_linear_expr(). Variables override
    _identity_key() so that `x == y` can also be used to compare two handles.
    """

    __slots__ = ()

    @abc.abstractmethod
    def to_linear_expr(self) -> "LinearExpr":
        """Returns the flattened expression."""

    def _identity_key(self) -> Optional[Tuple[int, int]]:
        return None

    def __hash__(self) -> int:
        return object.__hash__(self)

    def __bool__(self) -> bool:
        raise NotImplementedError(
            f"Cannot use a linear expression {self} as a Boolean value"
        )

    def __add__(self, other: LinearTypes) -> "LinearExpr":
        return self.to_linear_expr().add(as_linear_expr(other))

    def __radd__(self, other: LinearTypes) -> "LinearExpr":
        return as_linear_expr(other).add(self.to_linear_expr())

    def __sub__(self, other: LinearTypes) -> "LinearExpr":
        return self.to_linear_expr().add(as_linear_expr(other).scale(-1))

    def __rsub__(self, other: LinearTypes) -> "LinearExpr":
        return as_linear_expr(other).add(self.to_linear_expr().scale(-1))

    def __mul__(self, other: int) -> "LinearExpr":
        if isinstance(other, LinearBase):
            _raise_non_linear_error(self, other)
        return self.to_linear_expr().scale(other)

    def __rmul__(self, other: int) -> "LinearExpr":
        return self.__mul__(other)

    def __neg__(self) -> "LinearExpr":
        return self.to_linear_expr().scale(-1)

    def __pos__(self) -> "LinearExpr":
        return self.to_linear_expr()

    def __truediv__(self, _):
        return NotImplemented

    def __floordiv__(self, _):
        return NotImplemented

    def __mod__(self, _):
        return NotImplemented

    def __pow__(self, _):
        return NotImplemented

    def _compare(
        self, other: LinearTypes, make_domain
    ) -> "BoundedLinearExpression":
        if isinstance(other, LinearBase):
            return BoundedLinearExpression(self - other, make_domain(0))
        return BoundedLinearExpression(
            self.to_linear_expr(), make_domain(mn.assert_is_int64(other))
        )

    def __eq__(self, other):
        if other is None:
            return False
        if not isinstance(other, LinearBase) and not mn.is_integral(other):
            return NotImplemented
        lhs_key = self._identity_key()
        rhs_key = other._identity_key() if isinstance(other, LinearBase) else None
        if lhs_key is not None and rhs_key is not None and lhs_key[0] != rhs_key[0]:
            # Handles of two different models are never equal.
            return False
        bounded = self._compare(other, lambda v: domain_lib.Domain(v, v))
        if lhs_key is not None and rhs_key is not None:
            bounded._identity = lhs_key == rhs_key
        return bounded

    def __ne__(self, other):
        if other is None:
            return True
        if not isinstance(other, LinearBase) and not mn.is_integral(other):
            return NotImplemented
        lhs_key = self._identity_key()
        rhs_key = other._identity_key() if isinstance(other, LinearBase) else None
        if lhs_key is not None and rhs_key is not None and lhs_key[0] != rhs_key[0]:
            return True
        bounded = self._compare(
            other, lambda v: domain_lib.Domain(v, v).complement()
        )
        if lhs_key is not None and rhs_key is not None:
            bounded._identity = lhs_key != rhs_key
        return bounded

    def __le__(self, other: LinearTypes) -> "BoundedLinearExpression":
        return self._compare(other, lambda v: domain_lib.Domain(mn.INT_MIN, v))

    def __ge__(self, other: LinearTypes) -> "BoundedLinearExpression":
        return self._compare(other, lambda v: domain_lib.Domain(v, mn.INT_MAX))

    def __lt__(self, other: LinearTypes) -> "BoundedLinearExpression":
        return self._compare(other, lambda v: domain_lib.Domain(mn.INT_MIN, v - 1))

    def __gt__(self, other: LinearTypes) -> "BoundedLinearExpression":
        return self._compare(other, lambda v: domain_lib.Domain(v + 1, mn.INT_MAX))


class LinearExpr(LinearBase):
    """A flattened linear expression: sum(coeff[i] * var[i]) + offset.

    Variables are referenced by their index in the model. The expression
    remembers the id of the model its variables belong to, and refuses to be
    combined with variables from another model.
    """

    __slots__ = ("_terms", "_offset", "_model_id")

    def __init__(
        self,
        terms: Optional[Mapping[int, int]] = None,
        offset: int = 0,
        model_id: Optional[int] = None,
    ) -> None:
        cleaned = {}
        if terms:
            if model_id is None:
                raise ValueError("an expression with variables needs a model id")
            for index, coeff in terms.items():
                coeff = mn.assert_is_int64(coeff)
                if coeff != 0:
                    cleaned[int(index)] = coeff
        self._terms: Mapping[int, int] = immutabledict.immutabledict(cleaned)
        self._offset: int = mn.assert_is_int64(offset)
        self._model_id: Optional[int] = model_id if cleaned else None

    @classmethod
    def constant(cls, value: int) -> "LinearExpr":
        """Returns the expression `value`, without variables."""
        return cls(offset=mn.assert_is_int64(value))

    @classmethod
    def from_variable(cls, variable: LinearBase) -> "LinearExpr":
        """Returns `1 * variable`."""
        if not isinstance(variable, LinearBase):
            raise TypeError(f"not a variable: {variable!r}")
        return variable.to_linear_expr()

    @classmethod
    def sum(cls, expressions: Iterable[LinearTypes]) -> "LinearExpr":
        """Creates the expression sum(expressions)."""
        result = LinearExpr()
        for expr in expressions:
            result = result.add(as_linear_expr(expr))
        return result

    @classmethod
    def weighted_sum(
        cls,
        expressions: Sequence[LinearTypes],
        coefficients: Sequence[int],
    ) -> "LinearExpr":
        """Creates the expression sum(expressions[i] * coefficients[i])."""
        if len(expressions) != len(coefficients):
            raise ValueError(
                "In the LinearExpr.weighted_sum method, the expression array and"
                " the coefficient array must have the same length."
            )
        result = LinearExpr()
        for expr, coeff in zip(expressions, coefficients):
            result = result.add(as_linear_expr(expr).scale(coeff))
        return result

    @classmethod
    def term(cls, expression: LinearTypes, coefficient: int) -> "LinearExpr":
        """Creates `expression * coefficient`."""
        return as_linear_expr(expression).scale(coefficient)

    @property
    def terms(self) -> Mapping[int, int]:
        """The nonzero coefficients, keyed by variable index."""
        return self._terms

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def model_id(self) -> Optional[int]:
        return self._model_id

    def is_constant(self) -> bool:
        return not self._terms

    def sorted_terms(self) -> Tuple[Tuple[int, int], ...]:
        """Returns the (index, coefficient) pairs by increasing index."""
        return tuple(sorted(self._terms.items()))

    def to_linear_expr(self) -> "LinearExpr":
        return self

    def scale(self, factor: int) -> "LinearExpr":
        """Returns factor * self. A zero factor yields the empty expression."""
        factor = mn.assert_is_int64(factor)
        if factor == 0:
            return LinearExpr()
        if factor == 1:
            return self
        terms = {
            index: mn.checked_mul(coeff, factor)
            for index, coeff in self._terms.items()
        }
        return LinearExpr(
            terms, mn.checked_mul(self._offset, factor), self._model_id
        )

    def add(self, other: "LinearExpr") -> "LinearExpr":
        """Returns self + other, dropping the terms that cancel out."""
        other = as_linear_expr(other)
        model_id = _merge_model_ids(self._model_id, other.model_id)
        terms = dict(self._terms)
        for index, coeff in other.terms.items():
            new_coeff = mn.checked_add(terms.get(index, 0), coeff)
            if new_coeff == 0:
                terms.pop(index, None)
            else:
                terms[index] = new_coeff
        return LinearExpr(
            terms, mn.checked_add(self._offset, other.offset), model_id
        )

    def evaluate(self, values: Sequence[int]) -> int:
        """Evaluates the expression with values[i] as the value of variable i."""
        result = self._offset
        for index, coeff in self._terms.items():
            result += coeff * int(values[index])
        return result

    def __str__(self) -> str:
        output = ""
        for index, coeff in self.sorted_terms():
            var_name = f"v{index}"
            if not output:
                if coeff == 1:
                    output = var_name
                elif coeff == -1:
                    output = f"-{var_name}"
                else:
                    output = f"{coeff} * {var_name}"
            elif coeff == 1:
                output += f" + {var_name}"
            elif coeff == -1:
                output += f" - {var_name}"
            elif coeff > 1:
                output += f" + {coeff} * {var_name}"
            else:
                output += f" - {-coeff} * {var_name}"
        if not output:
            return str(self._offset)
        if self._offset > 0:
            output += f" + {self._offset}"
        elif self._offset < 0:
            output += f" - {-self._offset}"
        return output

    def __repr__(self) -> str:
        return f"LinearExpr({dict(self.sorted_terms())}, {self._offset})"


class BoundedLinearExpression:
    """Represents a linear constraint: `expression in domain`.

    It is created by comparing linear expressions (<=, >=, ==, !=, <, >), and
    passed to CpModel.add().

    Comparing two variable handles with == or != also gives a truth value, so
    handles can be tested for identity and used in containers.
    """

    __slots__ = ("_expression", "_domain", "_identity")

    def __init__(self, expression: LinearExpr, domain: domain_lib.Domain) -> None:
        self._expression: LinearExpr = expression
        self._domain: domain_lib.Domain = domain
        self._identity: Optional[bool] = None

    @property
    def expression(self) -> LinearExpr:
        return self._expression

    @property
    def domain(self) -> domain_lib.Domain:
        return self._domain

    def __bool__(self) -> bool:
        if self._identity is None:
            raise NotImplementedError(
                f"Evaluating a BoundedLinearExpression '{self}' as a Boolean value"
                " is not supported."
            )
        return self._identity

    def __str__(self) -> str:
        return f"{self._expression} in {self._domain}"

    def __repr__(self) -> str:
        return f"BoundedLinearExpression({self._expression!r}, {self._domain!r})"
