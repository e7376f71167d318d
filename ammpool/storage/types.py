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

from typing import final


@final
class _NotProvidedType:
    """Sentinel for a missing `default` argument, so that None can still be used as a default value."""

    def __repr__(self) -> str:
        return '_NOT_PROVIDED'


@final
class DeletedKeyType:
    """Marker stored in a changes tracker for keys deleted during a call."""

    def __repr__(self) -> str:
        return 'DeletedKey'


_NOT_PROVIDED = _NotProvidedType()
DeletedKey = DeletedKeyType()
