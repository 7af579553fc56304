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

"""Allow/block policy for unattended upgrades.

Decides whether an add-on that has an update available may be upgraded
without supervision.

Rules, applied in order:

1. If `allowed` is non-empty and the add-on is not in it: skip ("not allowed")
2. If `blocked` is non-empty and the add-on is in it: skip ("blocked")
3. Otherwise the upgrade is permitted

An empty allow-list means "no restriction", not "nothing allowed". When an
add-on appears in both lists, the allow check passes it and the block check
then skips it, so blocked wins.

Example:
    ```python
    from unattended_upgrades.policy.upgrades import UpgradePolicy

    policy = UpgradePolicy.from_lists(allowed=[], blocked=["calendar"])
    policy.decide("calendar")  # PolicyDecision(permitted=False, reason='blocked')
    policy.decide("contacts")  # PolicyDecision(permitted=True, reason=None)
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

SkipReason = Literal["not allowed", "blocked"]


@dataclass(frozen=True)
class PolicyDecision:
    permitted: bool
    reason: SkipReason | None = None


@dataclass(frozen=True)
class UpgradePolicy:
    """Allow-list and block-list of add-on ids.

    Attributes:
        allowed: If non-empty, only these add-ons may be upgraded.
        blocked: These add-ons are never upgraded.
    """

    allowed: frozenset[str] = field(default_factory=frozenset)
    blocked: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_lists(
        cls,
        allowed: Iterable[str] | None = None,
        blocked: Iterable[str] | None = None,
    ) -> UpgradePolicy:
        """Build a policy from any iterables of ids (None means empty)."""
        return cls(
            allowed=frozenset(allowed or ()),
            blocked=frozenset(blocked or ()),
        )

    @property
    def unrestricted(self) -> bool:
        return not self.allowed and not self.blocked

    def decide(self, addon_id: str) -> PolicyDecision:
        """Decide whether 'addon_id' may be upgraded."""
        if self.allowed and addon_id not in self.allowed:
            return PolicyDecision(permitted=False, reason="not allowed")
        if self.blocked and addon_id in self.blocked:
            return PolicyDecision(permitted=False, reason="blocked")
        return PolicyDecision(permitted=True)
