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
Build service for submitting image builds to the cluster.

This service creates OpenShift Build objects from build requests and
waits for them to reach a terminal phase.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from kubernetes import client
from kubernetes.client.rest import ApiException

from buildsteps.constants import (
    BUILD_API_GROUP,
    DEFAULT_BUILD_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    OPENSHIFT_API_VERSION,
)
from buildsteps.exceptions import BuildSubmissionError
from buildsteps.models.build import BuildRequest
from buildsteps.utils.log import DryLogger

logger = logging.getLogger(__name__)

BUILD_SUCCEEDED_PHASES = ("Complete",)
BUILD_FAILED_PHASES = ("Failed", "Error", "Cancelled")


class BuildSubmitter(ABC):
    """Runs build requests to completion."""

    @abstractmethod
    def submit(
        self,
        ctx: threading.Event,
        request: BuildRequest,
        dry: bool,
        artifact_dir: Optional[str],
        dry_logger: DryLogger,
    ) -> None:
        """
        Create or reuse the build and wait for it unless dry.

        Raises:
            BuildSubmissionError: If the build cannot be created or does not succeed
        """


class KubernetesBuildSubmitter(BuildSubmitter):
    """Service for running OpenShift builds through the custom objects API."""

    def __init__(
        self,
        custom_api: client.CustomObjectsApi,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_BUILD_TIMEOUT,
        verbose: bool = False,
    ) -> None:
        self.custom_api = custom_api
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.verbose = verbose

    def submit(
        self,
        ctx: threading.Event,
        request: BuildRequest,
        dry: bool,
        artifact_dir: Optional[str],
        dry_logger: DryLogger,
    ) -> None:
        body = request.to_dict()
        if dry:
            dry_logger.add_object(body)
            return

        self._create_or_reuse(request, body)
        build = self._wait_for_build(ctx or threading.Event(), request)
        if artifact_dir:
            self._save_build(artifact_dir, request.name, build)

        phase = self._phase(build)
        if phase not in BUILD_SUCCEEDED_PHASES:
            status = build.get("status") or {}
            reason = status.get("message") or status.get("reason") or "no reason given"
            raise BuildSubmissionError(f"build {request.namespace}/{request.name} ended in phase {phase}: {reason}")

        logger.info(f"Build {request.namespace}/{request.name} succeeded")

    def _create_or_reuse(self, request: BuildRequest, body: Dict[str, Any]) -> None:
        """Create the build, reusing an existing build of the same name."""
        try:
            self.custom_api.create_namespaced_custom_object(
                group=BUILD_API_GROUP,
                version=OPENSHIFT_API_VERSION,
                namespace=request.namespace,
                plural="builds",
                body=body,
            )
            logger.info(f"Created build {request.namespace}/{request.name}")
        except ApiException as e:
            if e.status == 409:
                logger.info(f"Build {request.namespace}/{request.name} already exists, reusing it")
            else:
                raise BuildSubmissionError(f"could not create build {request.namespace}/{request.name}: {e}") from e

    def _wait_for_build(self, ctx: threading.Event, request: BuildRequest) -> Dict[str, Any]:
        """Wait for the build to reach a terminal phase and return it."""
        if self.verbose:
            logger.info(f"Waiting for build {request.namespace}/{request.name} to complete...")

        start_time = time.time()
        while True:
            if ctx.is_set():
                raise BuildSubmissionError(f"build {request.namespace}/{request.name} was cancelled")

            try:
                build = self.custom_api.get_namespaced_custom_object(
                    group=BUILD_API_GROUP,
                    version=OPENSHIFT_API_VERSION,
                    namespace=request.namespace,
                    plural="builds",
                    name=request.name,
                )
            except ApiException as e:
                raise BuildSubmissionError(f"could not get build {request.namespace}/{request.name}: {e}") from e

            phase = self._phase(build)
            if phase in BUILD_SUCCEEDED_PHASES or phase in BUILD_FAILED_PHASES:
                return build

            if self.verbose:
                logger.debug(f"Build {request.name} is in phase {phase or 'Unknown'}")

            if time.time() - start_time >= self.timeout:
                raise BuildSubmissionError(
                    f"build {request.namespace}/{request.name} did not complete within {self.timeout} seconds"
                )

            # Returns early when the build is cancelled
            ctx.wait(self.poll_interval)

    @staticmethod
    def _phase(build: Dict[str, Any]) -> str:
        return (build.get("status") or {}).get("phase", "")

    @staticmethod
    def _save_build(artifact_dir: str, name: str, build: Dict[str, Any]) -> None:
        path = Path(artifact_dir) / "builds" / f"{name}.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(build, f, default_flow_style=False)
        logger.debug(f"Saved build {name} to {path}")
