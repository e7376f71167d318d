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

import os
import sys
from collections import defaultdict
from types import ModuleType
from typing import NamedTuple, Optional

from structlog import get_logger

logger = get_logger()


class _Command(NamedTuple):
    group: str
    module: ModuleType
    description: str


class CliManager:
    """Dispatches `ammpool-cli <command> [options]` to the module implementing the command.

    Every command module provides `main()`, which parses the remaining arguments with its own parser.
    """

    def __init__(self) -> None:
        self.basename: str = os.path.basename(sys.argv[0])
        self.commands: dict[str, _Command] = {}

        from ammpool.cli import quote, simulate

        self.add_cmd('pool', 'quote', quote, 'Compute the output of a swap, or the input it needs, for given reserves')
        self.add_cmd('pool', 'simulate', simulate, 'Seed an in-memory pool, run swaps and print the resulting state')

    def add_cmd(self, group: str, cmd: str, module: ModuleType, short_description: Optional[str] = None) -> None:
        assert cmd not in self.commands, f'command {cmd} registered twice'
        self.commands[cmd] = _Command(group=group, module=module, description=short_description or '')

    def help(self) -> None:
        from colorama import Fore, Style

        by_group: dict[str, list[str]] = defaultdict(list)
        for cmd, command in self.commands.items():
            by_group[command.group].append(cmd)
        width = max(len(cmd) for cmd in self.commands)

        print()
        print('Available subcommands:')
        print()
        for group in sorted(by_group):
            print(f'{Fore.RED}{Style.BRIGHT}[{group}]{Style.RESET_ALL}')
            for cmd in by_group[group]:
                print(f'    {cmd.ljust(width)}   {self.commands[cmd].description}')
            print()

    def execute_from_command_line(self) -> int:
        from ammpool.cli.util import process_logging_options, process_logging_output, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] == 'help':
            self.help()
            return 0

        cmd = sys.argv.pop(1)
        command = self.commands.get(cmd)
        if command is None:
            print(f'Unknown command: "{cmd}"')
            print(f'Type "{self.basename} help" for usage.')
            return -1

        # Parsers of the commands show `ammpool-cli <command>` in their usage.
        sys.argv[0] = f'{sys.argv[0]} {cmd}'

        output = process_logging_output(sys.argv)
        options = process_logging_options(sys.argv)
        setup_logging(logging_output=output, logging_options=options)
        command.module.main()
        return 0


def main() -> None:
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warn('Aborting and exiting...')
        sys.exit(1)
    except Exception:
        logger.exception('Uncaught exception:')
        sys.exit(2)


if __name__ == '__main__':
    main()
