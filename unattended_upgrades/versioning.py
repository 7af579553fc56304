# Copyright 2025 Roger Cibrian
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

"""Add-on version comparison.

App store releases use semver-like version strings ("1.4.2", "2.0.0-beta.3",
"v3.1.0-rc1"). This module parses and orders them so the app store update
check can tell whether a catalog release is newer than what is installed.
It does no network or file I/O.

Ordering rules:

- Release tuples compare numerically, padded with zeros ("1.2" == "1.2.0")
- A leading "v" is ignored
- "+build" metadata is ignored
- Prereleases sort before the final release: dev < alpha < beta < rc < final
- Unknown prerelease tags sort between beta and rc

Example:
    ```python
    from unattended_upgrades.versioning import compare_versions, is_newer

    compare_versions("1.2.0", "1.1.9")   # 1
    is_newer("2.0.0-rc.1", "2.0.0")      # False
    ```
"""

from __future__ import annotations

import re

__all__ = ["compare_versions", "is_newer", "is_prerelease", "version_key"]

# Known prerelease tag ordering (lower = older)
_PRE_TAG_RANK: dict[str, float] = {
    "dev": 0,
    "nightly": 0,
    "alpha": 1,
    "a": 1,
    "beta": 2,
    "b": 2,
    "rc": 3,
}
_UNKNOWN_PRE_RANK = 2.5
_FINAL_RANK = 4.0

_VERSION_RE = re.compile(
    r"^\s*v?(?P<release>\d+(?:\.\d+)*)(?:[-.]?(?P<pre>[A-Za-z][0-9A-Za-z.\-]*))?\s*$"
)


def _pre_tokens(pre: str) -> tuple[tuple[int, object], ...]:
    """Split a prerelease suffix into comparable tokens.

    "rc.10" -> ((1, "rc"), (0, 10)); numeric tokens sort before text.
    """
    tokens: list[tuple[int, object]] = []
    for part in re.split(r"[.\-]|(?<=[A-Za-z])(?=\d)", pre):
        if not part:
            continue
        if part.isdigit():
            tokens.append((0, int(part)))
        else:
            tokens.append((1, part.lower()))
    return tuple(tokens)


def version_key(version: str) -> tuple:
    """Compute a sortable key for a version string.

    Strings that are not version-like fall back to ("text", raw) and sort
    after every parsed version.
    """
    base = version.split("+", 1)[0]
    m = _VERSION_RE.match(base)
    if not m:
        return (1, (), 0.0, (("text", version),))

    release = tuple(int(p) for p in m.group("release").split("."))
    # Trailing zeros carry no ordering information
    while len(release) > 1 and release[-1] == 0:
        release = release[:-1]

    pre = m.group("pre")
    if not pre:
        return (0, release, _FINAL_RANK, ())

    tokens = _pre_tokens(pre)
    tag = str(tokens[0][1]) if tokens else ""
    rank = float(_PRE_TAG_RANK.get(tag, _UNKNOWN_PRE_RANK))
    return (0, release, rank, tokens)


def is_prerelease(version: str) -> bool:
    """Return True if the version carries a prerelease suffix."""
    key = version_key(version)
    return key[0] == 0 and key[2] < _FINAL_RANK


def compare_versions(a: str, b: str) -> int:
    """Compare two versions.

    Returns -1 if a < b, 0 if equal, 1 if a > b.
    """
    ka = version_key(a)
    kb = version_key(b)
    return (ka > kb) - (ka < kb)


def is_newer(remote: str, current: str | None) -> bool:
    """Return True iff 'remote' is strictly newer than 'current'.

    A missing current version means the add-on is not installed, which is
    not an upgrade.
    """
    if current is None:
        return False
    return compare_versions(remote, current) > 0
