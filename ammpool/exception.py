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

"""
This module contains the exceptions raised by pool operations.

Every exception that fails a pool call inherits from PoolFail. When one of them is raised during a call, the
runner discards all changes made by that call (reserves, shares, asset transfers and events) and re-raises it
to the caller.

Any other exception, such as an AssertionError raised by an invariant check, is considered a bug.
"""


class PoolFail(Exception):
    """Base class for all errors that fail a pool call."""


class InvalidAmount(PoolFail):
    """Raised when a zero, negative or otherwise disallowed amount is supplied."""


class InsufficientShares(PoolFail):
    """Raised when a provider tries to burn more shares than it holds."""


class InvalidShareAmount(InvalidAmount, InsufficientShares):
    """Raised when a removal asks for a zero or negative number of shares.

    It is both an invalid amount and a request no share balance can satisfy, so it can be caught as either."""


class InsufficientLiquidity(PoolFail):
    """Raised when the pool cannot serve a request, either because it is empty or because it does not hold
    enough of an asset."""


class TransferFailed(PoolFail):
    """Raised when an asset ledger refuses a pull or a push."""


class SlippageExceeded(PoolFail):
    """Raised when the result of an operation is worse than the minimum accepted by the caller."""


class ForbiddenReentrancy(PoolFail):
    """Raised when the pool is called again while another call is still in progress."""


class InvalidMethodCall(PoolFail):
    """Raised when the method does not exist or is not exposed with the right decorator."""


class ViewMethodError(PoolFail):
    """Raised when a view method changes the state of the pool."""
