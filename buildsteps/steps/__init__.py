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
Steps module for the build graph.

Each configured step kind maps to one Step implementation; build_step
selects it from the configuration variant that is set.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from kubernetes import client

from buildsteps.exceptions import ConfigurationError
from buildsteps.models.config import JobSpec, ResourceConfiguration, StepConfiguration
from buildsteps.services.build_service import BuildSubmitter
from buildsteps.services.k8s_provider import ImageStreamReader, WorkingDirResolver
from buildsteps.utils.log import DryLogger

from .base import ExecutionMode, Step
from .bundle_source import BundleSourceStep
from .pull_spec import PullSpecResolver
from .recipe import ReplaceCommand, plan_substitutions, render_recipe


@dataclass
class StepClients:
    """Collaborators a step may need."""
    build_submitter: BuildSubmitter
    image_streams: ImageStreamReader
    working_dirs: WorkingDirResolver


def _bundle_source_step(config, resources, clients, job_spec, artifact_dir, dry_logger, pull_secret):
    return BundleSourceStep(
        config,
        resources,
        clients.build_submitter,
        clients.image_streams,
        clients.working_dirs,
        artifact_dir,
        job_spec,
        dry_logger,
        pull_secret,
    )


STEP_BUILDERS: Dict[str, Callable[..., Step]] = {
    "bundle_source_step": _bundle_source_step,
}


def build_step(
    configuration: StepConfiguration,
    resources: ResourceConfiguration,
    clients: StepClients,
    job_spec: JobSpec,
    artifact_dir: Optional[str],
    dry_logger: DryLogger,
    pull_secret: Optional[client.V1Secret] = None,
) -> Step:
    """
    Create the step for a configuration variant.

    Raises:
        ConfigurationError: If no step kind handles the variant
    """
    builder = STEP_BUILDERS.get(configuration.kind)
    if builder is None:
        raise ConfigurationError(f"Unsupported step kind: {configuration.kind}")
    return builder(configuration.config, resources, clients, job_spec, artifact_dir, dry_logger, pull_secret)


__all__ = [
    "BundleSourceStep",
    "ExecutionMode",
    "PullSpecResolver",
    "ReplaceCommand",
    "Step",
    "StepClients",
    "build_step",
    "plan_substitutions",
    "render_recipe",
]
