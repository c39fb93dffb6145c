"""Command runner for executing shell commands.

This module provides the base command execution functionality used by
all specialized command modules.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    All specialized command modules (Helm, Docker, registry) use this
    runner for actual command execution.
    """

    def __init__(self, working_dir: Path) -> None:
        """Initialize the command runner.

        Args:
            working_dir: Directory commands are executed from by default.
        """
        self.working_dir = working_dir

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        input_text: str | None = None,
    ) -> CommandResult:
        """Execute a shell command and return structured result.

        A missing executable is reported as a failed result (return code 127)
        rather than raised, so callers only ever inspect CommandResult.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to working_dir)
            capture_output: Whether to capture stdout/stderr
            input_text: Text written to the command's stdin

        Returns:
            CommandResult with success status, output, and return code
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                list(cmd),
                cwd=cwd or self.working_dir,
                capture_output=capture_output,
                text=True,
                input=input_text,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(
                success=False,
                stderr=f"{cmd[0]}: command not found ({e})",
                returncode=127,
            )
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Execute a shell command with real-time output streaming.

        Args:
            cmd: Command and arguments as a sequence
            cwd: Working directory (defaults to working_dir)
            on_output: Callback function called with each line of output.

        Returns:
            CommandResult with success status, collected output, and return code
        """
        logger.debug(f"Streaming: {' '.join(cmd)}")
        env = os.environ.copy()
        env["PYTHONUNBUFFERED"] = "1"

        try:
            process = subprocess.Popen(
                list(cmd),
                cwd=cwd or self.working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,  # Merge stderr into stdout
                text=True,
                bufsize=1,
                env=env,
            )
        except FileNotFoundError as e:
            return CommandResult(
                success=False,
                stderr=f"{cmd[0]}: command not found ({e})",
                returncode=127,
            )

        stdout_lines: list[str] = []
        if process.stdout:
            for line in iter(process.stdout.readline, ""):
                line = line.rstrip("\n")
                if line:
                    stdout_lines.append(line)
                    if on_output:
                        on_output(line)

        process.wait()

        output = "\n".join(stdout_lines)
        success = process.returncode == 0
        return CommandResult(
            success=success,
            stdout=output,
            # stderr is merged into stdout; keep it visible to error reporting
            stderr="" if success else output,
            returncode=process.returncode or 0,
        )
