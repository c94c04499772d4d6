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
Bundle source step.

This step takes the source image, rewrites the image pull specs in its
operator manifests and builds the result as a new pipeline image.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from kubernetes import client

from buildsteps.constants import BUNDLE_SOURCE_REASON, DRY_WORKING_DIR, PIPELINE_SOURCE_TAG
from buildsteps.exceptions import StepFailedError, WorkingDirError
from buildsteps.models.build import (
    ImageSource,
    StepLink,
    build_from_source,
    internal_image_link,
    pipeline_image_ref,
)
from buildsteps.models.config import BundleSourceStepConfiguration, JobSpec, ResourceConfiguration
from buildsteps.services.build_service import BuildSubmitter
from buildsteps.services.k8s_provider import ImageStreamReader, WorkingDirResolver
from buildsteps.steps.base import ExecutionMode, Step
from buildsteps.steps.pull_spec import PullSpecResolver
from buildsteps.steps.recipe import plan_substitutions, render_recipe
from buildsteps.utils.log import DryLogger

logger = logging.getLogger(__name__)


class BundleSourceStep(Step):
    """Builds a pipeline image with pull specs in the operator manifests replaced."""

    def __init__(
        self,
        config: BundleSourceStepConfiguration,
        resources: ResourceConfiguration,
        build_submitter: BuildSubmitter,
        image_streams: ImageStreamReader,
        working_dirs: WorkingDirResolver,
        artifact_dir: Optional[str],
        job_spec: JobSpec,
        dry_logger: DryLogger,
        pull_secret: Optional[client.V1Secret] = None,
    ) -> None:
        self.config = config
        self.resources = resources
        self.build_submitter = build_submitter
        self.working_dirs = working_dirs
        self.artifact_dir = artifact_dir
        self.job_spec = job_spec
        self.dry_logger = dry_logger
        self.pull_secret = pull_secret
        self.resolver = PullSpecResolver(image_streams, job_spec.namespace)

    def inputs(self, dry: bool) -> Optional[Dict[str, Any]]:
        return None

    def run(self, ctx: threading.Event, dry: bool) -> None:
        try:
            self._run(ctx, ExecutionMode.from_dry(dry))
        except Exception as e:
            raise StepFailedError.for_reason(BUNDLE_SOURCE_REASON, e) from e

    def _run(self, ctx: threading.Event, mode: ExecutionMode) -> None:
        source = pipeline_image_ref(PIPELINE_SOURCE_TAG)

        logger.info(f"Resolving inputs for {self.name()}")
        if mode.simulated:
            working_dir = DRY_WORKING_DIR
        else:
            try:
                working_dir = self.working_dirs.resolve(source, self.job_spec.namespace)
            except Exception as e:
                raise WorkingDirError(f"failed to get workingDir: {e}") from e

        logger.info(f"Generating Dockerfile for {self.name()}")
        dockerfile = self.dockerfile(mode)

        build = build_from_source(
            self.job_spec,
            PIPELINE_SOURCE_TAG,
            self.config.to,
            dockerfile,
            [ImageSource(from_image=source, source_path=f"{working_dir}/{self.config.context_dir}/.")],
            self.resources.requirements_for(self.name()),
            self.pull_secret,
        )

        logger.info(f"Submitting build for {self.name()}")
        self.build_submitter.submit(ctx, build, mode.simulated, self.artifact_dir, self.dry_logger)

    def dockerfile(self, mode: ExecutionMode) -> str:
        """Generate the Dockerfile replacing the configured pull specs."""
        commands = plan_substitutions(
            self.config.manifest_dir,
            self.config.substitute,
            self.resolver,
            mode,
        )
        return render_recipe(pipeline_image_ref(PIPELINE_SOURCE_TAG), commands)

    def requires(self) -> List[StepLink]:
        return [internal_image_link(PIPELINE_SOURCE_TAG)]

    def creates(self) -> List[StepLink]:
        return [internal_image_link(self.config.to)]

    def provides(self) -> Tuple[Dict[str, Any], Optional[StepLink]]:
        return {}, internal_image_link(self.config.to)

    def name(self) -> str:
        return self.config.to

    def description(self) -> str:
        return f"Build image {self.config.to} from the repository"
