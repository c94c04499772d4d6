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

import posixpath

from buildsteps.constants import UNSAFE_SUBSTITUTION_CHARACTERS
from buildsteps.exceptions import UnsafeSubstitutionError


def ensure_substitutable(
    value: str,
    field: str = "value",
    unsafe: str = UNSAFE_SUBSTITUTION_CHARACTERS,
    allow_empty: bool = False,
) -> str:
    """Reject values that cannot be placed verbatim in a sed expression
    inside a bash command inside a RUN instruction.

    Args:
        value: The string to check
        field: Name used in the error message
        unsafe: Characters the value must not contain
        allow_empty: Accept an empty value

    Returns:
        The value unchanged

    Raises:
        UnsafeSubstitutionError: If the value is empty or contains an unsafe character
    """
    if not value:
        if allow_empty:
            return value
        raise UnsafeSubstitutionError(value, field)
    if any(c in unsafe for c in value):
        raise UnsafeSubstitutionError(value, field)
    return value


def join_path(*parts: str) -> str:
    """Join and clean slash-separated path parts like filepath.Join.

    Empty parts are skipped and every later part is appended, even when it
    starts with a slash. All-empty parts give an empty path.
    """
    parts = [part for part in parts if part]
    if not parts:
        return ""
    joined = "/".join([parts[0]] + [part.lstrip("/") for part in parts[1:]])
    return posixpath.normpath(joined)
