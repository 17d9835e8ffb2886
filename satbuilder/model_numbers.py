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

"""Integer helpers shared by the model building modules."""

import numbers
from typing import Any

import numpy as np

from satbuilder import errors


INT_MIN = -9223372036854775808  # hardcoded to be platform independent.
INT_MAX = 9223372036854775807


def is_boolean(x: Any) -> bool:
    """Checks if the x is a boolean."""
    if isinstance(x, bool):
        return True
    if isinstance(x, np.bool_):
        return True
    return False


def is_integral(x: Any) -> bool:
    """Checks if x is an integer, excluding Python and numpy booleans."""
    if is_boolean(x):
        return False
    return isinstance(x, (numbers.Integral, np.integer))


def assert_is_int64(x: Any) -> int:
    """Asserts that x is an integer in the int64 range and returns it as an int."""
    if not is_integral(x):
        raise TypeError(f"Not an integer: {x} of type {type(x)}")
    x_as_int = int(x)
    if x_as_int < INT_MIN or x_as_int > INT_MAX:
        raise errors.ArithmeticOverflowError(
            f"{x_as_int} is outside the int64 range"
        )
    return x_as_int


def assert_is_zero_or_one(x: Any) -> int:
    """Asserts that x is 0 or 1 and returns it as an int."""
    if not isinstance(x, (numbers.Integral, np.integer, np.bool_)):
        raise TypeError(f"Not a boolean: {x} of type {type(x)}")
    x_as_int = int(x)
    if x_as_int < 0 or x_as_int > 1:
        raise TypeError(f"Not a boolean: {x}")
    return x_as_int


def checked_add(x: int, y: int) -> int:
    """Returns x + y, raises ArithmeticOverflowError outside the int64 range."""
    result = x + y
    if result < INT_MIN or result > INT_MAX:
        raise errors.ArithmeticOverflowError(f"overflow when computing {x} + {y}")
    return result


def checked_mul(x: int, y: int) -> int:
    """Returns x * y, raises ArithmeticOverflowError outside the int64 range."""
    result = x * y
    if result < INT_MIN or result > INT_MAX:
        raise errors.ArithmeticOverflowError(f"overflow when computing {x} * {y}")
    return result


def to_capped_int64(v: int) -> int:
    """Restrict v within [INT_MIN..INT_MAX] range."""
    if v > INT_MAX:
        return INT_MAX
    if v < INT_MIN:
        return INT_MIN
    return v

