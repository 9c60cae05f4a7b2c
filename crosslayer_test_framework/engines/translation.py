"""
Translation-process adapter for the cross-layer test framework.

This module drives an external ontology-mediated query translator
(an Ontop-style command line tool). It locates the executable by
probing an ordered candidate list, hands each query over through
temporary files, and waits for the process with a timeout.

Copyright (C) 2025, David Beckett https://www.dajobe.org/

This package is Free Software and part of Redland http://librdf.org/

It is licensed under the following three licenses as alternatives:
  1. GNU Lesser General Public License (LGPL) V2.1 or any newer version
  2. GNU General Public License (GPL) V2 or any newer version
  3. Apache License, V2.0 or any newer version

You may not use this file except in compliance with at least one of
the above three licenses.

See LICENSE.html or LICENSE.txt at the top of this package for the
complete terms and further detail along with the license texts for
the licenses in COPYING.LIB, COPYING and LICENSE-2.0.txt respectively.
"""

import logging
import os
import signal
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import PROBE_TIMEOUT, TranslationConfig
from ..normalizer import count_from_lines
from ..utils import (
    ExecutableNotFoundError,
    MissingArtifactError,
    PreconditionError,
    TempFileManager,
    TranslationExecutionError,
    resolve_executable,
)
from .relational import RelationalEngine

logger = logging.getLogger(__name__)

JDBC_DRIVER = "org.sqlite.JDBC"


# Seconds allowed to collect output after a timed out process tree is killed
REAP_TIMEOUT = 5.0


def _process_group_options() -> dict:
    """Popen options that put the child and its descendants in one group."""
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _kill_process_group(process: subprocess.Popen) -> None:
    """Kill a process started with _process_group_options() and its descendants."""
    if os.name == "nt":
        subprocess.run(
            ["taskkill", "/T", "/F", "/PID", str(process.pid)],
            capture_output=True,
            check=False,
        )
    else:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.debug(f"Process group {process.pid} already exited")
    process.kill()


def run_bounded(cmd: List[str], timeout: float) -> Tuple[str, Optional[int], bool]:
    """
    Run a command with combined output and a hard time limit.

    On timeout the whole process group is killed, including tools
    started by a launcher script, and the output is collected within
    REAP_TIMEOUT.

    Args:
        cmd: Command and arguments
        timeout: Seconds to wait for the command to finish

    Returns:
        Tuple of (output, returncode, timed_out)
    """
    process = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
        **_process_group_options(),
    )

    try:
        output, _ = process.communicate(timeout=timeout)
        return output or "", process.returncode, False
    except subprocess.TimeoutExpired:
        _kill_process_group(process)

    try:
        output, _ = process.communicate(timeout=REAP_TIMEOUT)
    except subprocess.TimeoutExpired:
        # A descendant that left the group still holds the pipe
        logger.warning(f"Output of {cmd[0]} still open after kill; discarding it")
        process.stdout.close()
        process.wait()
        output = ""
    return output or "", process.returncode, True


def probe_executable(path: str, timeout: float = PROBE_TIMEOUT) -> bool:
    """
    Check that an executable answers '--version' with exit status 0.

    Args:
        path: Path to the executable
        timeout: Seconds to wait before giving up on the probe

    Returns:
        True if the probe exited successfully within the timeout
    """
    try:
        output, returncode, timed_out = run_bounded([path, "--version"], timeout)
    except OSError as e:
        logger.debug(f"Probe of {path} failed to run: {e}")
        return False

    if timed_out:
        logger.debug(f"Probe of {path} timed out after {timeout} seconds")
        return False

    if returncode != 0:
        logger.debug(f"Probe of {path} exited with status {returncode}")
        return False

    version = output.strip().splitlines()
    logger.debug(f"Probe of {path} succeeded: {version[0] if version else ''}")
    return True


def discover_executable(
    candidates: Sequence[str], probe_timeout: float = PROBE_TIMEOUT
) -> str:
    """
    Return the first candidate that resolves and passes the probe.

    Args:
        candidates: Ordered candidate paths or bare command names
        probe_timeout: Seconds allowed for each '--version' probe

    Returns:
        Path of the accepted executable
    """
    for candidate in candidates:
        path = resolve_executable(candidate)
        if path is None:
            continue
        if probe_executable(path, probe_timeout):
            logger.info(f"Using translation executable {path}")
            return path

    logger.warning(f"No translation executable found among {list(candidates)}")
    raise ExecutableNotFoundError(
        f"No working translation executable among {len(candidates)} candidates",
        candidates=candidates,
    )


class TranslationEngine:
    """Ontology-mediated layer backed by an external translation process."""

    def __init__(
        self,
        relational: RelationalEngine,
        config: Optional[TranslationConfig] = None,
        discover: Callable[[Sequence[str], float], str] = discover_executable,
    ):
        self.relational = relational
        self.config = config or TranslationConfig()
        self.discover = discover
        self.is_setup = False
        self.properties_path: Optional[Path] = None
        self._owns_properties = False
        self._discovered = False
        self._executable: Optional[str] = None
        self._discovery_error: Optional[ExecutableNotFoundError] = None

    def setup(self) -> None:
        """
        Validate artifacts and write the connection properties file.

        Requires a started relational engine. Executable discovery is
        deferred to the first execute() call.
        """
        if not self.relational.is_started:
            raise PreconditionError(
                "Relational engine must be started before translation setup"
            )

        for label, path in (
            ("ontology", self.config.ontology_path),
            ("mapping", self.config.mapping_path),
        ):
            if not Path(path).is_file():
                raise MissingArtifactError(f"{label} file not found: {path}", path=Path(path))

        self._write_properties()
        self.is_setup = True
        logger.info("Translation engine setup complete")

    def _write_properties(self) -> None:
        db_config = self.relational.config
        content = (
            f"jdbc.url={self.relational.connection_url}\n"
            f"jdbc.driver={JDBC_DRIVER}\n"
            f"jdbc.user={db_config.user}\n"
            f"jdbc.password={db_config.password}\n"
        )

        if self.config.properties_path:
            path = Path(self.config.properties_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            self._owns_properties = False
        else:
            if self.properties_path is not None and self._owns_properties:
                self._remove_properties()
            fd, name = tempfile.mkstemp(
                prefix="ontop_",
                suffix=".properties",
                dir=str(self.config.temp_dir) if self.config.temp_dir else None,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            path = Path(name)
            self._owns_properties = True

        self.properties_path = path
        logger.debug(f"Wrote connection properties to {path}")

    def get_executable(self) -> str:
        """Discover the executable once and return the cached result."""
        if not self._discovered:
            self._discovered = True
            try:
                self._executable = self.discover(
                    self.config.get_candidates(), self.config.probe_timeout
                )
            except ExecutableNotFoundError as e:
                self._discovery_error = e

        if self._discovery_error is not None:
            raise ExecutableNotFoundError(
                str(self._discovery_error), candidates=self._discovery_error.candidates
            )
        return self._executable

    def build_command(self, executable: str, query_file: Path, result_file: Path) -> List[str]:
        return [
            executable,
            "query",
            "--ontology",
            str(self.config.ontology_path),
            "--mapping",
            str(self.config.mapping_path),
            "--properties",
            str(self.properties_path),
            "--query",
            str(query_file),
            "--output",
            str(result_file),
        ]

    def _run(self, cmd: List[str]) -> Tuple[str, int]:
        """Run the translator, killing its process group on timeout."""
        timeout = self.config.timeout
        try:
            output, returncode, timed_out = run_bounded(cmd, timeout)
        except OSError as e:
            raise TranslationExecutionError(f"Cannot run {cmd[0]}: {e}", output=str(e))

        if timed_out:
            logger.warning(f"Translation process timed out after {timeout} seconds")
            raise TranslationExecutionError(
                f"Translation process timed out after {timeout} seconds",
                output=output,
                returncode=returncode,
                timed_out=True,
            )

        return output, returncode

    def execute(self, query: str) -> List[str]:
        """
        Run a query through the translator and return the result lines.

        Args:
            query: SPARQL query text

        Returns:
            Result file lines; the first line is the header
        """
        if not self.is_setup:
            self.setup()
        executable = self.get_executable()

        with TempFileManager(
            self.config.temp_dir, preserve_files=self.config.preserve_temp
        ) as temp_files:
            query_file = temp_files.create("sparql_query_", ".sparql", query)
            result_file = temp_files.create("sparql_result_", ".csv")

            cmd = self.build_command(executable, query_file, result_file)
            logger.debug(f"Running: {' '.join(cmd)}")
            output, returncode = self._run(cmd)

            if returncode != 0:
                logger.debug(f"Translation output:\n{output}")
                raise TranslationExecutionError(
                    f"Translation process exited with status {returncode}",
                    output=output,
                    returncode=returncode,
                )

            try:
                content = result_file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise TranslationExecutionError(
                    f"Cannot read translation result file {result_file}: {e}",
                    output=output,
                    returncode=returncode,
                ) from e
            if not content.strip():
                raise TranslationExecutionError(
                    "Translation process produced an empty result file",
                    output=output,
                    returncode=returncode,
                )

            lines = content.splitlines()

        logger.debug(f"Translation returned {len(lines) - 1} data lines")
        return lines

    def execute_count(self, query: str) -> int:
        """Run a query and normalize its result lines to a count."""
        return count_from_lines(self.execute(query))

    def _remove_properties(self) -> None:
        if self.properties_path is not None and self.properties_path.exists():
            self.properties_path.unlink()
            logger.debug(f"Removed {self.properties_path}")

    def cleanup(self) -> None:
        """Remove the generated properties file; safe to call repeatedly."""
        if self._owns_properties:
            self._remove_properties()
        self.properties_path = None
        self._owns_properties = False
        self.is_setup = False
