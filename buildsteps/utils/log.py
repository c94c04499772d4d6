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

import copy
import logging
import threading
from typing import Any, Dict, IO, List, Optional, Union

import yaml

# Initialize logger configuration once
def get_logger(name: str, level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Get a logger instance with basic configuration"""
    logger = logging.getLogger(name)

    # Configure only if no handlers are already set
    if not logger.handlers:
        logger.setLevel(level)
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-4s | %(name)-20s | %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


class DryLogger:
    """Records the objects a dry run would have created."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or get_logger(f"{__name__}.DryLogger", logging.DEBUG)
        self._objects: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def add_object(self, obj: Dict[str, Any]) -> None:
        metadata = obj.get("metadata", {})
        self.logger.debug(f"Dry run: would create {obj.get('kind', 'object')} {metadata.get('namespace', '')}/{metadata.get('name', '')}")
        with self._lock:
            self._objects.append(copy.deepcopy(obj))

    @property
    def objects(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._objects)

    def dump(self, stream: Optional[IO[str]] = None) -> Optional[str]:
        """Write the recorded objects as a YAML stream, or return it when no stream is given."""
        return yaml.safe_dump_all(self.objects, stream, default_flow_style=False, sort_keys=True)
