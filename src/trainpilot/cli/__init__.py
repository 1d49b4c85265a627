"""Command-line interface for TrainPilot."""

from __future__ import annotations

import asyncio as asyncio
import logging as logging

from trainpilot import TrainPilot as TrainPilot
from trainpilot import apply_overrides as apply_overrides
from trainpilot import load_config as load_config
from trainpilot.cli.app import main as main
from trainpilot.cli.commands import run as run_command
from trainpilot.cli.parser import _package_version as _package_version
from trainpilot.cli.parser import build_parser as build_parser
from trainpilot.cli.parser import selected_passes as selected_passes

_format_summary = run_command.format_run_summary
_run_passes = run_command.run_passes
