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
This module defines the data models exchanged between steps, the graph
and the build submitter.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kubernetes import client

from buildsteps.constants import BUILD_API_GROUP, OPENSHIFT_API_VERSION, PIPELINE_IMAGE_STREAM
from buildsteps.models.config import JobSpec, ResourceRequirements


@dataclass(frozen=True)
class StepLink:
    """An edge in the step graph: a step requires or creates what the link names."""
    kind: str
    name: str


def internal_image_link(tag: str) -> StepLink:
    """Link to the pipeline image with the given tag."""
    return StepLink(kind="internal_image", name=tag)


def pipeline_image_ref(tag: str) -> str:
    return f"{PIPELINE_IMAGE_STREAM}:{tag}"


@dataclass
class ImageSource:
    """Files extracted from an image into the build context."""
    from_image: str
    source_path: str
    destination_dir: str = "."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": {"kind": "ImageStreamTag", "name": self.from_image},
            "paths": [{"sourcePath": self.source_path, "destinationDir": self.destination_dir}],
        }


@dataclass
class BuildRequest:
    """A Docker build of a pipeline image from an inline recipe."""
    name: str
    namespace: str
    from_tag: str
    to_tag: str
    dockerfile: str
    images: List[ImageSource] = field(default_factory=list)
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)
    pull_secret: Optional[client.V1Secret] = None
    labels: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Render the request as an OpenShift Build object."""
        strategy: Dict[str, Any] = {
            "from": {"kind": "ImageStreamTag", "name": pipeline_image_ref(self.from_tag)},
            "forcePull": True,
            "noCache": True,
            "imageOptimizationPolicy": "SkipLayers",
        }
        if self.pull_secret is not None and self.pull_secret.metadata is not None:
            strategy["pullSecret"] = {"name": self.pull_secret.metadata.name}

        return {
            "apiVersion": f"{BUILD_API_GROUP}/{OPENSHIFT_API_VERSION}",
            "kind": "Build",
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": dict(self.labels),
            },
            "spec": {
                "resources": self.resources.to_dict(),
                "source": {
                    "type": "Dockerfile",
                    "dockerfile": self.dockerfile,
                    "images": [image.to_dict() for image in self.images],
                },
                "strategy": {
                    "type": "Docker",
                    "dockerStrategy": strategy,
                },
                "output": {
                    "to": {"kind": "ImageStreamTag", "name": pipeline_image_ref(self.to_tag)},
                },
            },
        }


def build_from_source(
    job_spec: JobSpec,
    from_tag: str,
    to_tag: str,
    dockerfile: str,
    images: List[ImageSource],
    resources: ResourceRequirements,
    pull_secret: Optional[client.V1Secret] = None,
) -> BuildRequest:
    """Assemble a build request producing pipeline:<to_tag> on top of pipeline:<from_tag>."""
    labels = {
        "creates": to_tag,
    }
    if job_spec.job:
        labels["job"] = job_spec.job
    if job_spec.buildid:
        labels["build-id"] = job_spec.buildid
    if job_spec.prowjobid:
        labels["prow.k8s.io/id"] = job_spec.prowjobid

    return BuildRequest(
        name=to_tag,
        namespace=job_spec.namespace,
        from_tag=from_tag,
        to_tag=to_tag,
        dockerfile=dockerfile,
        images=images,
        resources=resources,
        pull_secret=pull_secret,
        labels=labels,
    )
