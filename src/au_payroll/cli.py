"""Payroll core command line interface.

Provides operational tools for:
- Superannuation rate lookups
- Award interpretation of exported timesheets
- Leave accrual checks

Usage:
    python -m au_payroll.cli super-rate --date 2024-12-01 [--ote 1000]
    python -m au_payroll.cli interpret --file records.json --rate 30
    python -m au_payroll.cli accrue --ordinary 76 --overtime 4
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable

from au_payroll.calculators import (
    AwardInterpreter,
    LeaveAccrualCalculator,
    SuperRateResolver,
    calculate_gross_pay,
)
from au_payroll.calculators.super_rate import DEFAULT_SUPER_SCHEDULE
from au_payroll.calculators.types import AttendanceRecord
from au_payroll.config import configure_logging, get_settings


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


def parse_decimal(s: str) -> Decimal:
    """Parse a decimal number."""
    try:
        return Decimal(s)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {s}")


class PayrollCli:
    """Payroll core command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m au_payroll.cli",
            description="Payroll compliance calculation tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Logging level (default: $LOG_LEVEL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # super-rate command
        super_rate = subparsers.add_parser(
            "super-rate",
            help="Resolve the super guarantee rate for a date",
        )
        super_rate.add_argument(
            "--date",
            type=parse_date,
            required=True,
            help="Payment date (ISO format)",
        )
        super_rate.add_argument(
            "--ote",
            type=parse_decimal,
            help="Ordinary time earnings to compute a contribution for",
        )

        # interpret command
        interpret = subparsers.add_parser(
            "interpret",
            help="Interpret attendance records into pay components",
        )
        interpret.add_argument(
            "--file",
            type=Path,
            required=True,
            help="JSON file holding a list of attendance records",
        )
        interpret.add_argument(
            "--rate",
            type=parse_decimal,
            help="Base hourly rate (default: $DEFAULT_HOURLY_RATE)",
        )

        # accrue command
        accrue = subparsers.add_parser(
            "accrue",
            help="Leave accrued for a pay period's hours",
        )
        accrue.add_argument(
            "--ordinary",
            type=parse_decimal,
            required=True,
            help="Ordinary hours worked",
        )
        accrue.add_argument(
            "--overtime",
            type=parse_decimal,
            default=Decimal("0"),
            help="Overtime hours worked (default: 0)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(parsed.log_level)

        handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "super-rate": self._cmd_super_rate,
            "interpret": self._cmd_interpret,
            "accrue": self._cmd_accrue,
        }
        return handlers[parsed.command](parsed)

    def _cmd_super_rate(self, args: argparse.Namespace) -> int:
        settings = get_settings()
        resolver = SuperRateResolver(DEFAULT_SUPER_SCHEDULE, settings.super_fallback_rate)

        output: dict[str, Any] = {
            "date": args.date.isoformat(),
            "rate": str(resolver.resolve_rate(args.date)),
        }
        if args.ote is not None:
            output["ote"] = str(args.ote)
            output["contribution"] = str(resolver.calculate_contribution(args.ote, args.date))

        self._emit(output)
        return 0

    def _cmd_interpret(self, args: argparse.Namespace) -> int:
        try:
            raw = json.loads(args.file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            print(f"ERROR: cannot read {args.file}: {e}", file=sys.stderr)
            return 1

        if not isinstance(raw, list):
            print("ERROR: expected a JSON list of attendance records", file=sys.stderr)
            return 1

        rate = args.rate if args.rate is not None else get_settings().default_hourly_rate
        try:
            records = [AttendanceRecord.from_dict(item) for item in raw]
        except (KeyError, ValueError, AttributeError, TypeError) as e:
            print(f"ERROR: invalid attendance record: {e}", file=sys.stderr)
            return 1

        interpretations = AwardInterpreter().interpret_many(records, rate)
        self._emit(
            [
                {
                    "recordId": item.record_id,
                    "date": item.work_date.isoformat(),
                    "components": [c.to_dict() for c in item.components],
                    "gross": str(calculate_gross_pay(item.components)),
                }
                for item in interpretations
            ]
        )
        return 0

    def _cmd_accrue(self, args: argparse.Namespace) -> int:
        results = LeaveAccrualCalculator().accrue(args.ordinary, args.overtime)
        self._emit(
            [
                {"leaveType": r.leave_type.value, "accruedAmount": str(r.accrued_amount)}
                for r in results
            ]
        )
        return 0

    @staticmethod
    def _emit(payload: Any) -> None:
        print(json.dumps(payload, indent=2))


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
