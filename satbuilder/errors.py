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

"""Errors raised while building, solving and decoding models.

Each error derives from the standard Python error we would use for the same
problem in plain Python code, so callers can catch either.

- InvalidDomainError: ValueError
- InvalidHandleError: ValueError
- ArithmeticOverflowError: OverflowError
- NoSolutionAvailableError: RuntimeError
- EngineError: RuntimeError
"""


class InvalidDomainError(ValueError):
    """A domain or a pair of bounds is malformed.

    Raised when an interval has lo > hi, when an interval list is empty, or when
    a bound does not fit in a signed 64-bit integer. The model is not modified.
    """


class InvalidHandleError(ValueError):
    """A variable handle does not belong to the model it is used with.

    Raised when a handle created by one model is passed to another one, or when
    its index is outside the range of the variables known to the model or to a
    response.
    """


class ArithmeticOverflowError(OverflowError):
    """A coefficient, offset or bound left the signed 64-bit integer range."""


class NoSolutionAvailableError(RuntimeError):
    """A value was requested from a response that does not hold a solution.

    Check the response status (OPTIMAL or FEASIBLE) before decoding values.
    """


class EngineError(RuntimeError):
    """The solving engine failed to produce a well formed output.

    This error is not recoverable: the engine boundary offers no partial failure
    semantics. Infeasible or invalid models are reported through the response
    status, never through this error.
    """
