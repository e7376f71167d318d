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
This module exports the types and functions needed to host and call a liquidity pool.
"""

from ammpool.conf.get_settings import get_global_settings
from ammpool.conf.settings import PoolSettings
from ammpool.context import Context
from ammpool.events import EventLog, LiquidityAdded, LiquidityRemoved, PoolEvent, Swap
from ammpool.exception import (
    ForbiddenReentrancy,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAmount,
    InvalidMethodCall,
    InvalidShareAmount,
    PoolFail,
    SlippageExceeded,
    TransferFailed,
    ViewMethodError,
)
from ammpool.ledger import AssetLedger, MemoryAssetLedger
from ammpool.pool import LiquidityPool
from ammpool.runner import CallInfo, Runner
from ammpool.types import Address, Amount, AssetId, Timestamp, public, view
from ammpool.version import __version__

__all__ = [
    'get_global_settings',
    'PoolSettings',
    'Context',
    'EventLog',
    'LiquidityAdded',
    'LiquidityRemoved',
    'PoolEvent',
    'Swap',
    'ForbiddenReentrancy',
    'InsufficientLiquidity',
    'InsufficientShares',
    'InvalidAmount',
    'InvalidMethodCall',
    'InvalidShareAmount',
    'PoolFail',
    'SlippageExceeded',
    'TransferFailed',
    'ViewMethodError',
    'AssetLedger',
    'MemoryAssetLedger',
    'LiquidityPool',
    'CallInfo',
    'Runner',
    'Address',
    'Amount',
    'AssetId',
    'Timestamp',
    'public',
    'view',
    '__version__',
]
