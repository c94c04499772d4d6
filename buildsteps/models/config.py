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
Configuration models for pipeline build steps.

These models are built once from the static pipeline configuration and
are read-only afterwards.
"""

import json
import os
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

from buildsteps.constants import (
    BUNDLE_SOURCE_SUFFIX,
    DEFAULT_RESOURCES_KEY,
    JOB_SPEC_ENV,
    NAMESPACE_ENV,
    UNSAFE_PATH_CHARACTERS,
    UNSAFE_REPLACEMENT_CHARACTERS,
)
from buildsteps.exceptions import ConfigurationError
from buildsteps.utils.utils import ensure_substitutable, join_path


def bundle_source_name(bundle_name: str) -> str:
    """Return the pipeline tag of the source image for the given bundle tag."""
    return f"{bundle_name}{BUNDLE_SOURCE_SUFFIX}"


class Substitution(BaseModel):
    """One pull spec to replace in the operator manifests."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pull_spec: str = Field(..., alias="pullspec", description="Literal pull spec to search for")
    with_: str = Field(..., alias="with", description="Stable image tag to replace it with")

    @field_validator('pull_spec')
    @classmethod
    def validate_pull_spec(cls, v):
        return ensure_substitutable(v, "pullspec")

    @field_validator('with_')
    @classmethod
    def validate_with(cls, v):
        return ensure_substitutable(v, "with", UNSAFE_REPLACEMENT_CHARACTERS)


class BundleSourceStepConfiguration(BaseModel):
    """Configuration of a step that rewrites pull specs in operator manifests."""

    model_config = ConfigDict(frozen=True)

    to: str = Field(..., description="Pipeline image tag produced by the step")
    context_dir: str = Field("", description="Directory of the source tree holding the manifests")
    operator_manifests: str = Field("", description="Manifest directory, relative to context_dir")
    substitute: Tuple[Substitution, ...] = Field((), description="Ordered pull spec substitutions")

    @field_validator('to')
    @classmethod
    def validate_to(cls, v):
        if not v.strip():
            raise ValueError("'to' must name a pipeline image tag")
        if v != v.strip():
            raise ValueError(f"'to' must not have leading or trailing whitespace: {v!r}")
        return v

    @field_validator('context_dir', 'operator_manifests')
    @classmethod
    def validate_path(cls, v, info):
        return ensure_substitutable(v, info.field_name, UNSAFE_PATH_CHARACTERS, allow_empty=True)

    @property
    def manifest_dir(self) -> str:
        return join_path(self.context_dir, self.operator_manifests)

    @classmethod
    def for_bundle(cls, bundle_name: str, **fields: Any) -> "BundleSourceStepConfiguration":
        """Create the source step configuration feeding the named bundle image."""
        return cls(to=bundle_source_name(bundle_name), **fields)


class ResourceRequirements(BaseModel):
    """Resource requests and limits for a build."""

    requests: Dict[str, str] = Field(default_factory=dict)
    limits: Dict[str, str] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        result = {}
        if self.requests:
            result["requests"] = dict(self.requests)
        if self.limits:
            result["limits"] = dict(self.limits)
        return result


class ResourceConfiguration(RootModel[Dict[str, ResourceRequirements]]):
    """Resource requirements keyed by step name, with '*' as the default."""

    root: Dict[str, ResourceRequirements] = Field(default_factory=dict)

    def requirements_for(self, name: str) -> ResourceRequirements:
        if name in self.root:
            return self.root[name]
        return self.root.get(DEFAULT_RESOURCES_KEY, ResourceRequirements())


class StepConfiguration(BaseModel):
    """Tagged variant holding the configuration of exactly one step kind."""

    bundle_source_step: Optional[BundleSourceStepConfiguration] = None

    @model_validator(mode='after')
    def validate_single_variant(self):
        if len(self.variants()) != 1:
            raise ValueError("exactly one step kind must be configured per step")
        return self

    def variants(self) -> Dict[str, BaseModel]:
        return {
            name: value
            for name, value in ((name, getattr(self, name)) for name in type(self).model_fields)
            if value is not None
        }

    @property
    def kind(self) -> str:
        return next(iter(self.variants()))

    @property
    def config(self) -> BaseModel:
        return self.variants()[self.kind]


class PipelineConfiguration(BaseModel):
    """Static configuration for a set of steps."""

    resources: ResourceConfiguration = Field(default_factory=ResourceConfiguration)
    steps: List[StepConfiguration] = Field(default_factory=list)


class JobSpec(BaseModel):
    """Identity of the CI job the steps run for."""

    type: str = Field("", description="presubmit, postsubmit, periodic or batch")
    job: str = Field("", description="Name of the job")
    buildid: str = Field("", description="Build number of the job run")
    prowjobid: str = Field("", description="Unique ID of the job run")
    refs: Optional[Dict[str, Any]] = Field(None, description="Repository refs under test")
    namespace: str = Field("", description="Namespace the pipeline images live in")

    @classmethod
    def from_env(cls, namespace: Optional[str] = None) -> "JobSpec":
        """
        Load the job spec from the JOB_SPEC environment variable.

        The namespace is taken from the argument first, then from the
        NAMESPACE environment variable.

        Raises:
            ConfigurationError: If JOB_SPEC is not valid JSON
        """
        raw = os.getenv(JOB_SPEC_ENV, "")
        data: Dict[str, Any] = {}
        if raw:
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {JOB_SPEC_ENV}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigurationError(f"Invalid {JOB_SPEC_ENV}: expected a JSON object")
        data["namespace"] = namespace or os.getenv(NAMESPACE_ENV, "")
        return cls.model_validate(data)
