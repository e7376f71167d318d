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


def create_parser() -> ArgumentParser:
    from ammpool.cli.util import add_config_yaml_argument, create_parser
    parser = create_parser()
    add_config_yaml_argument(parser)
    parser.add_argument('--reserve-in', type=int, required=True, help='Reserve of the asset sent to the pool')
    parser.add_argument('--reserve-out', type=int, required=True, help='Reserve of the asset received from the pool')
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('--amount-in', type=int, help='Exact input, prints the output it buys')
    group.add_argument('--amount-out', type=int, help='Exact output, prints the input it costs')
    parser.add_argument('--json', action='store_true', help='Print the result as json')
    return parser


def execute(args: Namespace) -> None:
    import json

    from ammpool.cli.util import check_or_exit, load_settings
    from ammpool.exception import PoolFail
    from ammpool.pool import curve

    settings = load_settings(args.config_yaml)
    fee = dict(fee_bps=settings.FEE_BPS, fee_denom=settings.FEE_DENOM)

    result: dict[str, int] = {
        'reserve_in': args.reserve_in,
        'reserve_out': args.reserve_out,
        'fee_bps': settings.FEE_BPS,
        'fee_denom': settings.FEE_DENOM,
    }
    try:
        if args.amount_in is not None:
            result['amount_in'] = args.amount_in
            result['amount_out'] = curve.get_amount_out(args.amount_in, args.reserve_in, args.reserve_out, **fee)
        else:
            result['amount_out'] = args.amount_out
            result['amount_in'] = curve.get_amount_in(args.amount_out, args.reserve_in, args.reserve_out, **fee)
    except PoolFail as e:
        check_or_exit(False, f'{type(e).__name__}: {e}')

    if args.json:
        print(json.dumps(result))
        return

    print('amount_in:', result['amount_in'])
    print('amount_out:', result['amount_out'])


def main():
    parser = create_parser()
    args = parser.parse_args()
    execute(args)
