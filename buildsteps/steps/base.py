# Copyright The Volcano Authors.
#
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

"""
The contract every step of the build graph implements.

The graph scheduler only talks to steps through this interface: it uses
requires() and creates() to order steps and run() to execute them.
"""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from buildsteps.models.build import StepLink


class ExecutionMode(str, Enum):
    """Whether a run talks to the cluster or only simulates it."""
    REAL = "real"
    SIMULATED = "simulated"

    @classmethod
    def from_dry(cls, dry: bool) -> "ExecutionMode":
        return cls.SIMULATED if dry else cls.REAL

    @property
    def simulated(self) -> bool:
        return self is ExecutionMode.SIMULATED


class Step(ABC):
    """Base class for all steps in the build graph."""

    @abstractmethod
    def inputs(self, dry: bool) -> Optional[Dict[str, Any]]:
        """Return the definition of external inputs the step's output depends on."""

    @abstractmethod
    def run(self, ctx: threading.Event, dry: bool) -> None:
        """Execute the step once; setting ctx cancels it. Raises on failure."""

    @abstractmethod
    def requires(self) -> List[StepLink]:
        """Links that must exist before the step runs."""

    @abstractmethod
    def creates(self) -> List[StepLink]:
        """Links the step produces."""

    @abstractmethod
    def provides(self) -> Tuple[Dict[str, Any], Optional[StepLink]]:
        """Parameters exposed to later steps and the link they describe."""

    @abstractmethod
    def name(self) -> str:
        """Unique identity of the step in the graph."""

    @abstractmethod
    def description(self) -> str:
        """Human-readable summary of the step."""
