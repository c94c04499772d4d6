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

class BuildStepError(Exception):
    """Base exception for all build step operations"""
    pass

class ConfigurationError(BuildStepError):
    """Raised when pipeline configuration cannot be loaded or validated"""
    pass

class WorkingDirError(BuildStepError):
    """Raised when the working directory of an input image cannot be determined"""
    pass

class PullSpecResolutionError(BuildStepError):
    """Raised when a symbolic tag cannot be resolved to a pull spec"""
    pass

class UnsafeSubstitutionError(BuildStepError, ValueError):
    """Raised when a substitution value cannot be embedded in a recipe verbatim"""
    def __init__(self, value, field="value"):
        self.value = value
        self.field = field
        super().__init__(f"{field} {value!r} contains characters that cannot be substituted safely")

class BuildSubmissionError(BuildStepError):
    """Raised when a build cannot be submitted or does not succeed"""
    pass

class StepFailedError(BuildStepError):
    """Raised by a step's run when any part of it fails.

    The reason tags the step category so failures can be attributed
    uniformly across step kinds.
    """
    def __init__(self, reason, message):
        self.reason = reason
        super().__init__(message)

    @classmethod
    def for_reason(cls, reason, err):
        return cls(reason, f"{reason}: {err}")
