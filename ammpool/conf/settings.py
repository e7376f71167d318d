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
from typing import Union

from pydantic import model_validator
from typing_extensions import Self

from ammpool.utils import pydantic
from ammpool.utils.yaml import load_extended_yaml


class PoolSettings(pydantic.BaseModel):
    # Name used to identify the pool in logs.
    POOL_NAME: str = 'pool'

    # Fee rate of all swaps.
    #
    #     fee = FEE_BPS / FEE_DENOM
    #
    # For example, a fee of 0.3% would be 30/10000. The fee is kept in the reserves, so the
    # constant product `reserve_a * reserve_b` grows with every swap.
    FEE_BPS: int = 30
    FEE_DENOM: int = 10_000

    # Fixed-point scale used by get_price().
    PRICE_SCALE: int = 10**18

    # Check the pool invariants after every public call. Expensive, it iterates over all providers.
    SLOW_ASSERTS: bool = False

    @model_validator(mode='after')
    def _validate_fee(self) -> Self:
        if self.FEE_DENOM <= 0:
            raise ValueError('FEE_DENOM must be positive')
        if self.FEE_BPS < 0:
            raise ValueError('negative fee')
        if self.FEE_BPS >= self.FEE_DENOM:
            raise ValueError('invalid fee: FEE_BPS must be smaller than FEE_DENOM')
        if self.PRICE_SCALE <= 0:
            raise ValueError('PRICE_SCALE must be positive')
        return self

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'PoolSettings':
        """Takes a filepath to a yaml file and returns a validated PoolSettings instance."""
        settings_dict = load_extended_yaml(filepath)
        return cls.model_validate(settings_dict)
