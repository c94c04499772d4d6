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

JOB_SPEC_ENV = "JOB_SPEC"
NAMESPACE_ENV = "NAMESPACE"

PIPELINE_IMAGE_STREAM = "pipeline"
PIPELINE_SOURCE_TAG = "src"
STABLE_IMAGE_STREAM = "stable"

BUNDLE_SOURCE_SUFFIX = "-sub"
BUNDLE_SOURCE_REASON = "building_bundle_source"

DRY_REGISTRY = "dry-registry.ci.openshift.org/namespace/" + STABLE_IMAGE_STREAM
DRY_WORKING_DIR = "dry-fake"

# Characters that would break out of the generated sed/bash/RUN quoting.
# The search pattern is still read by sed as a regular expression.
UNSAFE_SUBSTITUTION_CHARACTERS = "?'\"\\ \t\n"
# '&' in a sed replacement stands for the matched text
UNSAFE_REPLACEMENT_CHARACTERS = UNSAFE_SUBSTITUTION_CHARACTERS + "&"
# Paths sit outside the sed quotes, so shell metacharacters are unsafe too
UNSAFE_PATH_CHARACTERS = UNSAFE_SUBSTITUTION_CHARACTERS + "$;`&|<>(){}[]*~!#"

IMAGE_API_GROUP = "image.openshift.io"
BUILD_API_GROUP = "build.openshift.io"
OPENSHIFT_API_VERSION = "v1"

DEFAULT_RESOURCES_KEY = "*"
DEFAULT_POLL_INTERVAL = 5.0  # seconds
DEFAULT_BUILD_TIMEOUT = 3600.0  # seconds
