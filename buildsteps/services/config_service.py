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
Config service for loading pipeline configuration.

This service reads the YAML pipeline configuration and validates it into
the step configuration models.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from buildsteps.exceptions import ConfigurationError
from buildsteps.models.config import PipelineConfiguration, StepConfiguration

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing pipeline configuration."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def load(self, config_path: Path) -> PipelineConfiguration:
        """
        Load the pipeline configuration from a YAML file.

        Args:
            config_path: Path to the configuration file

        Returns:
            PipelineConfiguration: Validated configuration

        Raises:
            ConfigurationError: If the file is missing, is not YAML or is invalid
        """
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        if self.verbose:
            logger.debug(f"Loading configuration from: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e

        return self.parse(config_dict)

    def parse(self, config_dict) -> PipelineConfiguration:
        """Validate an already decoded configuration."""
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a mapping")
        try:
            configuration = PipelineConfiguration.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        if self.verbose:
            logger.debug(f"Loaded {len(configuration.steps)} step(s)")
        return configuration

    def find_step(self, configuration: PipelineConfiguration, name: str) -> StepConfiguration:
        """
        Find the step that creates the given pipeline image.

        Raises:
            ConfigurationError: If no step has that name
        """
        for step in configuration.steps:
            if getattr(step.config, "to", None) == name:
                return step
        raise ConfigurationError(f"No step named {name} in configuration")
