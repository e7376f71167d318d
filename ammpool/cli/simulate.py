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

from argparse import ArgumentParser, Namespace
from typing import Any

from structlog import get_logger

logger = get_logger()

PROVIDER = b'provider'
TRADER = b'trader'
POOL_ADDRESS = b'pool'


def _swap_a(value: str) -> tuple[str, int]:
    return 'swap_a_for_b', int(value)


def _swap_b(value: str) -> tuple[str, int]:
    return 'swap_b_for_a', int(value)


def create_parser() -> ArgumentParser:
    from ammpool.cli.util import add_config_yaml_argument, create_parser
    parser = create_parser()
    add_config_yaml_argument(parser)
    parser.add_argument('--seed-a', type=int, required=True, help='Amount of asset A of the first deposit')
    parser.add_argument('--seed-b', type=int, required=True, help='Amount of asset B of the first deposit')
    parser.add_argument('--swap-a', type=_swap_a, dest='swaps', action='append', metavar='AMOUNT_IN',
                        help='Swap AMOUNT_IN of asset A for asset B (can be repeated)')
    parser.add_argument('--swap-b', type=_swap_b, dest='swaps', action='append', metavar='AMOUNT_IN',
                        help='Swap AMOUNT_IN of asset B for asset A (can be repeated)')
    parser.add_argument('--remove-all', action='store_true', help='Withdraw all the liquidity at the end')
    parser.add_argument('--json', action='store_true', help='Print the steps and the event log as json')
    return parser


def execute(args: Namespace) -> None:
    import json

    from ammpool.cli.util import load_settings
    from ammpool.context import Context
    from ammpool.exception import PoolFail
    from ammpool.ledger import MemoryAssetLedger
    from ammpool.runner import Runner
    from ammpool.types import Address, AssetId

    settings = load_settings(args.config_yaml)
    swaps: list[tuple[str, int]] = args.swaps or []

    provider, trader, pool_address = Address(PROVIDER), Address(TRADER), Address(POOL_ADDRESS)
    ledger_a = MemoryAssetLedger(name='A')
    ledger_b = MemoryAssetLedger(name='B')
    traded = {
        AssetId.A: sum(amount for method, amount in swaps if method == 'swap_a_for_b' and amount > 0),
        AssetId.B: sum(amount for method, amount in swaps if method == 'swap_b_for_a' and amount > 0),
    }
    for ledger, seed, asset in [(ledger_a, args.seed_a, AssetId.A), (ledger_b, args.seed_b, AssetId.B)]:
        if seed > 0:
            ledger.mint(provider, seed)
            ledger.approve(provider, pool_address, seed)
        if traded[asset]:
            ledger.mint(trader, traded[asset])
            ledger.approve(trader, pool_address, traded[asset])

    runner = Runner(settings=settings, ledger_a=ledger_a, ledger_b=ledger_b, pool_address=pool_address)
    log = logger.new(pool=settings.POOL_NAME)

    steps: list[dict[str, Any]] = []

    def run_step(caller: Address, method_name: str, *method_args: Any) -> None:
        step: dict[str, Any] = {'method': method_name, 'args': list(method_args)}
        try:
            step['result'] = runner.call_public_method(method_name, Context(caller_id=caller), *method_args)
        except PoolFail as e:
            step['error'] = f'{type(e).__name__}: {e}'
        step.update(runner.call_view_method('get_state'))
        steps.append(step)

    run_step(provider, 'add_liquidity', args.seed_a, args.seed_b)
    for method_name, amount in swaps:
        run_step(trader, method_name, amount)
    if args.remove_all:
        shares = runner.call_view_method('liquidity', provider)
        run_step(provider, 'remove_liquidity', shares)

    log.info('simulation finished', steps=len(steps), events=len(runner.event_log))

    if args.json:
        print(json.dumps({'steps': steps, 'events': runner.event_log.to_json()}, default=str))
        return

    for step in steps:
        outcome = f'error={step["error"]}' if 'error' in step else f'result={step["result"]}'
        print(f'{step["method"]}{tuple(step["args"])} {outcome} reserve_a={step["reserve_a"]} '
              f'reserve_b={step["reserve_b"]} total_shares={step["total_shares"]} price={step["price"]} k={step["k"]}')
    print()
    print('events:')
    for event in runner.event_log:
        print('   ', json.dumps(event.to_json()))


def main():
    parser = create_parser()
    args = parser.parse_args()
    execute(args)
