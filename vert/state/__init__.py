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

"""Package store for vert.

This package persists the tracked packages between runs: their master
sites, the newest upstream version seen, the installed version, and when
each was last checked.

Public API:

- PackageTracker: Main interface for store operations
- load_state: Load state from JSON file
- save_state: Save state to JSON file with pretty-printing

"""

from .tracker import PackageTracker, load_state, save_state

__all__ = ["PackageTracker", "load_state", "save_state"]
