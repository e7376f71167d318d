# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from pathlib import Path
from typing import Any, Union

import yaml

# A config file may name another one, relative to itself, whose values it overrides.
EXTENDS_KEY = 'extends'


def merge_settings(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Apply `override` on top of `base`, in place. Nested mappings are merged key by key.

    >>> base = dict(POOL_NAME='pool', LIMITS=dict(a=1, b=2))
    >>> merge_settings(base, dict(LIMITS=dict(b=3), SLOW_ASSERTS=True))
    >>> base == dict(POOL_NAME='pool', LIMITS=dict(a=1, b=3), SLOW_ASSERTS=True)
    True
    """
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_settings(current, value)
        else:
            base[key] = value


def load_yaml_mapping(filepath: Union[Path, str]) -> dict[str, Any]:
    """Read a yaml file that holds a mapping. An empty file is an empty mapping."""
    path = Path(filepath)
    if not path.is_file():
        raise ValueError(f"'{path}' is not a file")

    contents = yaml.safe_load(path.read_text())
    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{path}' cannot be parsed as a dictionary")
    return contents


def load_extended_yaml(filepath: Union[Path, str], *, _seen: frozenset[Path] = frozenset()) -> dict[str, Any]:
    """Read a yaml config file, following its `extends` chain.

    The `extends` key itself is never part of the result.
    """
    path = Path(filepath).resolve()
    if path in _seen:
        raise ValueError(f"'{path}' extends itself")

    contents = load_yaml_mapping(path)
    base_name = contents.pop(EXTENDS_KEY, None)
    if not base_name:
        return contents

    merged = load_extended_yaml(path.parent / str(base_name), _seen=_seen | {path})
    merge_settings(merged, contents)
    return merged
