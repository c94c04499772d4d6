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

import logging

from buildsteps.constants import DRY_REGISTRY, STABLE_IMAGE_STREAM
from buildsteps.exceptions import PullSpecResolutionError
from buildsteps.services.k8s_provider import ImageStreamReader
from buildsteps.steps.base import ExecutionMode

logger = logging.getLogger(__name__)


class PullSpecResolver:
    """Resolves tags of the stable image stream to full pull specs."""

    def __init__(
        self,
        image_streams: ImageStreamReader,
        namespace: str,
        stream_name: str = STABLE_IMAGE_STREAM,
    ) -> None:
        self.image_streams = image_streams
        self.namespace = namespace
        self.stream_name = stream_name

    def resolve(self, tag: str, mode: ExecutionMode) -> str:
        """
        Resolve a tag of the stable stream to a pull spec.

        The public repository of the stream is preferred over the
        cluster-internal one.

        Args:
            tag: Tag in the stable stream
            mode: Simulated runs return a fixed registry without a lookup

        Returns:
            The full pull spec, e.g. registry/namespace/stable:tag

        Raises:
            PullSpecResolutionError: If the stream cannot be read or exposes no repository
        """
        if mode.simulated:
            return f"{DRY_REGISTRY}:{tag}"

        try:
            status = self.image_streams.get_stream(self.namespace, self.stream_name)
        except Exception as e:
            raise PullSpecResolutionError(
                f"could not get image stream {self.stream_name} in namespace {self.namespace}: {e}"
            ) from e

        if status.public_docker_image_repository:
            return f"{status.public_docker_image_repository}:{tag}"
        if status.docker_image_repository:
            logger.debug(f"Image stream {self.stream_name} has no public repository, using the internal one")
            return f"{status.docker_image_repository}:{tag}"
        raise PullSpecResolutionError(f"no pull spec available for image stream {self.stream_name}")
