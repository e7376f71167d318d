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

from typing_extensions import override

from ammpool.exception import TransferFailed
from ammpool.ledger.base import AssetLedger
from ammpool.types import Address, Amount

_BALANCE_PREFIX = 'balance:'
_ALLOWANCE_PREFIX = 'allowance:'
_TOTAL_SUPPLY_KEY = 'total_supply'


def _balance_key(owner: Address) -> str:
    return f'{_BALANCE_PREFIX}{owner.hex()}'


def _allowance_key(owner: Address, spender: Address) -> str:
    return f'{_ALLOWANCE_PREFIX}{owner.hex()}:{spender.hex()}'


def _check_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TransferFailed(f'amount must be an integer, got {type(amount).__name__}')
    if amount < 0:
        raise TransferFailed(f'amount cannot be negative: {amount}')


class MemoryAssetLedger(AssetLedger):
    """In-memory fungible asset with mint, approve and transfer semantics.

    Zero balances and allowances are not stored.
    """

    @override
    def balance_of(self, owner: Address) -> Amount:
        return Amount(self.storage.get(_balance_key(owner), default=0))

    @override
    def allowance(self, owner: Address, spender: Address) -> Amount:
        return Amount(self.storage.get(_allowance_key(owner, spender), default=0))

    def total_supply(self) -> Amount:
        return Amount(self.storage.get(_TOTAL_SUPPLY_KEY, default=0))

    def holders(self) -> dict[Address, Amount]:
        """Return all addresses with a positive balance."""
        return {
            Address(bytes.fromhex(key[len(_BALANCE_PREFIX):])): Amount(value)
            for key, value in self.storage.iter_items(_BALANCE_PREFIX)
        }

    def mint(self, to: Address, amount: Amount) -> None:
        """Create `amount` new units for `to`."""
        _check_amount(amount)
        self._set_balance(to, self.balance_of(to) + amount)
        self.storage.put(_TOTAL_SUPPLY_KEY, self.total_supply() + amount)
        self.log.debug('mint', to=to.hex(), amount=amount)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> None:
        """Allow `spender` to pull up to `amount` from `owner`, replacing any previous allowance."""
        _check_amount(amount)
        key = _allowance_key(owner, spender)
        if amount == 0:
            self.storage.delete(key)
        else:
            self.storage.put(key, amount)

    @override
    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> None:
        _check_amount(amount)
        self._move(sender, recipient, amount)

    @override
    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: Amount) -> None:
        _check_amount(amount)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise TransferFailed(
                f'{self.name}: insufficient allowance (owner={owner.hex()} allowance={allowed} amount={amount})'
            )
        self._move(owner, recipient, amount)
        self.approve(owner, spender, Amount(allowed - amount))

    def _move(self, sender: Address, recipient: Address, amount: Amount) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise TransferFailed(
                f'{self.name}: insufficient balance (owner={sender.hex()} balance={balance} amount={amount})'
            )
        self._set_balance(sender, Amount(balance - amount))
        self._set_balance(recipient, Amount(self.balance_of(recipient) + amount))

    def _set_balance(self, owner: Address, amount: int) -> None:
        assert amount >= 0, 'balance cannot be negative'
        key = _balance_key(owner)
        if amount == 0:
            self.storage.delete(key)
        else:
            self.storage.put(key, amount)
