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

"""Configures the solving of a model."""

import dataclasses
import datetime
from typing import Optional

from google.protobuf import text_format
from ortools.sat import sat_parameters_pb2


@dataclasses.dataclass
class SolveParameters:
    """Parameters to control a single solve.

    If a value is set both in a common field and in cp_sat, the common field
    wins. Unset fields keep the engine defaults.

    Attributes:
      time_limit: The maximum time the engine should spend on the problem, or if
        None, then the time limit is infinite. This value is not a hard limit,
        solve time may slightly exceed this value.
      num_workers: An integer >= 1, how many threads to use when solving. If
        None, the engine picks a value from the number of cores.
      random_seed: Seed for the pseudo-random number generator of the engine.
      enable_output: If the engine should log its search progress. The lines
        are forwarded to absl.logging.
      cp_sat: Raw engine parameters, for everything not covered above.
    """

    time_limit: Optional[datetime.timedelta] = None
    num_workers: Optional[int] = None
    random_seed: Optional[int] = None
    enable_output: bool = False
    cp_sat: sat_parameters_pb2.SatParameters = dataclasses.field(
        default_factory=sat_parameters_pb2.SatParameters
    )

    def to_proto(self) -> sat_parameters_pb2.SatParameters:
        """Returns the engine parameters, without modifying self.cp_sat."""
        result = sat_parameters_pb2.SatParameters()
        result.CopyFrom(self.cp_sat)
        if self.time_limit is not None:
            result.max_time_in_seconds = self.time_limit.total_seconds()
        if self.num_workers is not None:
            if self.num_workers < 1:
                raise ValueError(f"num_workers must be >= 1, got {self.num_workers}")
            result.num_workers = self.num_workers
        if self.random_seed is not None:
            result.random_seed = self.random_seed
        if self.enable_output:
            result.log_search_progress = True
            result.log_to_stdout = False
        return result


def parse_sat_parameters(text: str) -> sat_parameters_pb2.SatParameters:
    """Parses engine parameters written in the protobuf text format.

    For example: "max_time_in_seconds:10.0 num_workers:8".

    Args:
      text: the parameters, in protobuf text format. Fields can be separated by
        spaces, commas or new lines.

    Returns:
      The parsed parameters.

    Raises:
      ValueError: if the text cannot be parsed.
    """
    params = sat_parameters_pb2.SatParameters()
    if text:
        try:
            text_format.Parse(text, params)
        except text_format.ParseError as e:
            raise ValueError(f"cannot parse the solver parameters {text!r}: {e}") from e
    return params
