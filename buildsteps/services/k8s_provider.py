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
Kubernetes provider for image stream lookups.

This service reads OpenShift image streams and image stream tags through
the Kubernetes custom objects API.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from buildsteps.constants import IMAGE_API_GROUP, OPENSHIFT_API_VERSION
from buildsteps.exceptions import WorkingDirError

logger = logging.getLogger(__name__)


def load_custom_objects_api(kubeconfig: Optional[str] = None) -> client.CustomObjectsApi:
    """
    Load Kubernetes configuration and return a custom objects API client.

    Args:
        kubeconfig: Path to kubeconfig file (uses in-cluster, then default config if not specified)

    Raises:
        RuntimeError: If no configuration can be loaded
    """
    try:
        if kubeconfig:
            config.load_kube_config(config_file=kubeconfig)
        else:
            # Try in-cluster config first, then local kubeconfig
            try:
                config.load_incluster_config()
                logger.debug("Loaded in-cluster Kubernetes config")
            except config.ConfigException:
                config.load_kube_config()
                logger.debug("Loaded local Kubernetes config")
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Kubernetes client: {str(e)}") from e

    return client.CustomObjectsApi()


@dataclass(frozen=True)
class ImageStreamStatus:
    """Repository addresses an image stream is exposed at."""
    public_docker_image_repository: str = ""
    docker_image_repository: str = ""


class ImageStreamReader(ABC):
    """Reads image streams."""

    @abstractmethod
    def get_stream(self, namespace: str, name: str) -> ImageStreamStatus:
        ...


class WorkingDirResolver(ABC):
    """Finds the working directory configured in an image."""

    @abstractmethod
    def resolve(self, image_ref: str, namespace: str) -> str:
        ...


class KubernetesImageStreamReader(ImageStreamReader):
    """Service for reading image streams from the cluster."""

    def __init__(self, custom_api: client.CustomObjectsApi, verbose: bool = False) -> None:
        self.custom_api = custom_api
        self.verbose = verbose

    def get_stream(self, namespace: str, name: str) -> ImageStreamStatus:
        """
        Get the repository addresses of an image stream.

        Raises:
            ApiException: If the image stream cannot be read
        """
        stream = self.custom_api.get_namespaced_custom_object(
            group=IMAGE_API_GROUP,
            version=OPENSHIFT_API_VERSION,
            namespace=namespace,
            plural="imagestreams",
            name=name,
        )
        status = stream.get("status") or {}
        result = ImageStreamStatus(
            public_docker_image_repository=status.get("publicDockerImageRepository", ""),
            docker_image_repository=status.get("dockerImageRepository", ""),
        )
        if self.verbose:
            logger.debug(f"Image stream {namespace}/{name}: {result}")
        return result


class KubernetesWorkingDirResolver(WorkingDirResolver):
    """Service for reading the working directory of an image stream tag."""

    def __init__(self, custom_api: client.CustomObjectsApi, verbose: bool = False) -> None:
        self.custom_api = custom_api
        self.verbose = verbose

    def resolve(self, image_ref: str, namespace: str) -> str:
        """
        Get the working directory of the image an image stream tag points at.

        Args:
            image_ref: Image stream tag, e.g. pipeline:src
            namespace: Namespace of the image stream

        Raises:
            WorkingDirError: If the tag cannot be read or carries no image metadata
        """
        try:
            tag = self.custom_api.get_namespaced_custom_object(
                group=IMAGE_API_GROUP,
                version=OPENSHIFT_API_VERSION,
                namespace=namespace,
                plural="imagestreamtags",
                name=image_ref,
            )
        except ApiException as e:
            if e.status == 404:
                raise WorkingDirError(f"image stream tag {namespace}/{image_ref} does not exist") from e
            raise WorkingDirError(f"could not get image stream tag {namespace}/{image_ref}: {e}") from e

        metadata = (tag.get("image") or {}).get("dockerImageMetadata")
        if not isinstance(metadata, dict):
            raise WorkingDirError(f"image stream tag {namespace}/{image_ref} has no image metadata")

        working_dir = self._image_config(metadata).get("WorkingDir", "")
        if self.verbose:
            logger.debug(f"Working directory of {namespace}/{image_ref}: {working_dir!r}")
        return working_dir

    @staticmethod
    def _image_config(metadata: Dict[str, Any]) -> Dict[str, Any]:
        return metadata.get("Config") or metadata.get("config") or {}
