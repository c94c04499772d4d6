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
Dockerfile generation for pull spec substitution.

Substitutions become sequential RUN instructions, so a later substitution
sees the files as rewritten by the earlier ones.
"""

from dataclasses import dataclass
from typing import List, Sequence

from buildsteps.constants import UNSAFE_PATH_CHARACTERS, UNSAFE_REPLACEMENT_CHARACTERS
from buildsteps.exceptions import PullSpecResolutionError
from buildsteps.models.config import Substitution
from buildsteps.steps.base import ExecutionMode
from buildsteps.steps.pull_spec import PullSpecResolver
from buildsteps.utils.utils import ensure_substitutable


@dataclass(frozen=True)
class ReplaceCommand:
    """In-place replacement of a literal pull spec in every file under a directory."""
    manifest_dir: str
    pull_spec: str
    replacement: str

    def __post_init__(self):
        ensure_substitutable(self.manifest_dir, "manifest_dir", UNSAFE_PATH_CHARACTERS, allow_empty=True)
        ensure_substitutable(self.pull_spec, "pullspec")
        ensure_substitutable(self.replacement, "replacement", UNSAFE_REPLACEMENT_CHARACTERS)

    def __str__(self) -> str:
        return f"find {self.manifest_dir} -type f -exec sed -i 's?{self.pull_spec}?{self.replacement}?g' {{}} +"


def plan_substitutions(
    manifest_dir: str,
    substitutions: Sequence[Substitution],
    resolver: PullSpecResolver,
    mode: ExecutionMode,
) -> List[ReplaceCommand]:
    """
    Resolve each substitution and turn it into a replace command, in order.

    Raises:
        PullSpecResolutionError: On the first tag that cannot be resolved
    """
    commands = []
    for sub in substitutions:
        try:
            replacement = resolver.resolve(sub.with_, mode)
        except PullSpecResolutionError as e:
            raise PullSpecResolutionError(
                f"failed to get replacement imagestream for image tag `{sub.with_}`: {e}"
            ) from e
        commands.append(ReplaceCommand(manifest_dir, sub.pull_spec, replacement))
    return commands


def render_recipe(base_image: str, commands: Sequence[ReplaceCommand]) -> str:
    """Render the Dockerfile: the base image followed by one RUN per command."""
    lines = ["", f"FROM {base_image}"]
    for command in commands:
        lines.append(f'RUN ["bash", "-c", "{command}"]')
    lines.append("")
    return "\n".join(lines)
