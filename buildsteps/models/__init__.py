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

from .build import BuildRequest, ImageSource, StepLink, build_from_source, internal_image_link, pipeline_image_ref
from .config import (
    BundleSourceStepConfiguration,
    JobSpec,
    PipelineConfiguration,
    ResourceConfiguration,
    ResourceRequirements,
    StepConfiguration,
    Substitution,
    bundle_source_name,
)

__all__ = [
    "BuildRequest",
    "BundleSourceStepConfiguration",
    "ImageSource",
    "JobSpec",
    "PipelineConfiguration",
    "ResourceConfiguration",
    "ResourceRequirements",
    "StepConfiguration",
    "StepLink",
    "Substitution",
    "build_from_source",
    "bundle_source_name",
    "internal_image_link",
    "pipeline_image_ref",
]
