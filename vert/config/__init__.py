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

"""Configuration loading for vert.

Public API:

- load_config: Read vert.yaml (optional) and .env into a VertConfig
- VertConfig: Frozen effective configuration

Example:
    Basic usage:

        from pathlib import Path
        from vert.config import load_config

        config = load_config(Path("vert.yaml"))
        print(config.state_file)

"""

from .loader import VertConfig, load_config

__all__ = ["VertConfig", "load_config"]
