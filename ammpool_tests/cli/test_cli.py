import json
import sys
from contextlib import redirect_stdout
from io import StringIO
from unittest.mock import patch

import structlog
from structlog.testing import capture_logs

from ammpool.cli import main, quote, simulate
from ammpool.cli.util import (
    LoggingOutput,
    create_console_renderer,
    process_logging_options,
    process_logging_output,
)
from ammpool_tests import unittest


class CliMainTest(unittest.TestCase):
    def test_help(self) -> None:
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue()

        self.assertIn('quote', output)
        self.assertIn('simulate', output)

    def test_unknown_command(self) -> None:
        cli = main.CliManager()
        f = StringIO()
        with patch.object(sys, 'argv', ['ammpool-cli', 'unknown']):
            with redirect_stdout(f):
                self.assertEqual(-1, cli.execute_from_command_line())
        self.assertIn('Unknown command: "unknown"', f.getvalue())

    def test_command_help(self) -> None:
        cli = main.CliManager()

        f = StringIO()
        with self.assertRaises(SystemExit) as cm:
            with capture_logs():
                with redirect_stdout(f):
                    with patch.object(sys, 'argv', ['ammpool-cli', 'simulate', '--help']), \
                            patch('ammpool.cli.util.setup_logging') as setup_logging:
                        cli.execute_from_command_line()

        self.assertEqual(0, cm.exception.args[0])
        self.assertIn('--seed-a', f.getvalue())
        setup_logging.assert_called_once()

    def test_logging_arguments(self) -> None:
        argv = ['ammpool-cli quote', '--json-logs', '--debug', '--reserve-in', '1']
        self.assertEqual(LoggingOutput.JSON, process_logging_output(argv))
        self.assertTrue(process_logging_options(argv).debug)
        self.assertEqual(['ammpool-cli quote', '--reserve-in', '1'], argv)

        argv = ['ammpool-cli quote', '--disable-logs']
        self.assertEqual(LoggingOutput.NULL, process_logging_output(argv))
        self.assertFalse(process_logging_options(argv).debug)

    def test_console_renderer(self) -> None:
        for colors in (False, True):
            renderer = create_console_renderer(colors=colors)
            self.assertIsInstance(renderer, structlog.dev.ConsoleRenderer)
            line = renderer(None, 'info', {'event': 'call failed', 'level': 'info', 'error': 'InvalidAmount'})
            self.assertIn('call failed', line)
            self.assertIn('InvalidAmount', line)


class QuoteTest(unittest.TestCase):
    def _run(self, params: list[str]) -> str:
        args = quote.create_parser().parse_args(params)
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                quote.execute(args)
        return f.getvalue()

    def test_amount_in(self) -> None:
        output = self._run(['--amount-in', '10', '--reserve-in', '100', '--reserve-out', '200'])
        self.assertEqual(['amount_in: 10', 'amount_out: 18'], output.strip().splitlines())

    def test_amount_out(self) -> None:
        output = self._run(['--amount-out', '18', '--reserve-in', '100', '--reserve-out', '200', '--json'])
        result = json.loads(output)
        self.assertEqual(10, result['amount_in'])
        self.assertEqual(18, result['amount_out'])
        self.assertEqual(30, result['fee_bps'])

    def test_invalid(self) -> None:
        with self.assertRaises(SystemExit) as cm:
            self._run(['--amount-in', '10', '--reserve-in', '0', '--reserve-out', '200'])
        self.assertEqual(2, cm.exception.args[0])

    def test_requires_an_amount(self) -> None:
        with self.assertRaises(SystemExit):
            with redirect_stdout(StringIO()), patch('sys.stderr', StringIO()):
                quote.create_parser().parse_args(['--reserve-in', '100', '--reserve-out', '200'])


class SimulateTest(unittest.TestCase):
    def _run(self, params: list[str]) -> str:
        args = simulate.create_parser().parse_args(params)
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                simulate.execute(args)
        return f.getvalue()

    def test_simulate_json(self) -> None:
        output = self._run([
            '--seed-a', '100', '--seed-b', '200',
            '--swap-a', '10', '--swap-b', '20', '--swap-a', '0',
            '--remove-all', '--json',
        ])
        result = json.loads(output)
        steps = result['steps']

        self.assertEqual(
            ['add_liquidity', 'swap_a_for_b', 'swap_b_for_a', 'swap_a_for_b', 'remove_liquidity'],
            [step['method'] for step in steps],
        )
        self.assertEqual(141, steps[0]['result'])
        self.assertEqual(2 * 10**18, steps[0]['price'])
        self.assertEqual(18, steps[1]['result'])
        self.assertEqual((110, 182), (steps[1]['reserve_a'], steps[1]['reserve_b']))
        self.assertEqual(10, steps[2]['result'])
        self.assertTrue(steps[3]['error'].startswith('InvalidAmount'))
        self.assertEqual(0, steps[4]['total_shares'])
        self.assertEqual(0, steps[4]['k'])

        self.assertEqual(
            ['LiquidityAdded', 'Swap', 'Swap', 'LiquidityRemoved'],
            [event['type'] for event in result['events']],
        )

    def test_simulate_text(self) -> None:
        output = self._run(['--seed-a', '1000', '--seed-b', '1000', '--swap-b', '100'])
        lines = output.strip().splitlines()
        self.assertTrue(lines[0].startswith('add_liquidity(1000, 1000) result=1000'))
        self.assertTrue(lines[1].startswith('swap_b_for_a(100,) result=90'))
        self.assertIn('events:', lines)
