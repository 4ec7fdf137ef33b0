# tgzpack/policy.py
# tgzpack: Packages a source tree and its install script into a delivery archive.
# Copyright (C) 2025 Dank A. Saurus

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Decides which directory entries are left out of a package.
"""

from collections.abc import Iterable


class PathPolicy:
    """Exact-name ignore rule applied to the base name of every directory entry."""

    def __init__(self, ignored_names: Iterable[str]):
        self.ignored_names = frozenset(ignored_names)

    def is_ignored(self, base_name: str) -> bool:
        """True if base_name equals one of the ignored names; no globbing, case-sensitive."""
        return base_name in self.ignored_names

    def __repr__(self) -> str:
        return f"PathPolicy({sorted(self.ignored_names)!r})"
