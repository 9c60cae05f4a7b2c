"""
Temporary file management for translation process runs.

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

import os
import tempfile
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class TempFileManager:
    """Creates uniquely named temporary files and removes them on cleanup."""

    def __init__(self, temp_dir: Optional[Path] = None, preserve_files: bool = False):
        """
        Initialize the temporary file manager.

        Args:
            temp_dir: Directory for the files, the system temp dir if None
            preserve_files: If True, cleanup leaves the files in place for debugging
        """
        self.temp_dir = Path(temp_dir) if temp_dir else None
        self.preserve_files = preserve_files
        self.temp_files: List[Path] = []

    def create(self, prefix: str, suffix: str, content: str = "") -> Path:
        """
        Create a new temporary file holding content.

        Args:
            prefix: File name prefix (e.g., "sparql_query_")
            suffix: File name suffix (e.g., ".sparql")
            content: Initial text content, empty by default

        Returns:
            Path to the created file
        """
        fd, name = tempfile.mkstemp(
            prefix=prefix,
            suffix=suffix,
            dir=str(self.temp_dir) if self.temp_dir else None,
        )
        file_path = Path(name)
        self.temp_files.append(file_path)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)

        logger.debug(f"Created temp file: {file_path}")
        return file_path

    def cleanup(self) -> None:
        """Remove all temporary files created by this manager."""
        if self.preserve_files:
            logger.debug(f"File preservation mode - keeping {self.temp_files}")
            self.temp_files.clear()
            return

        for file_path in self.temp_files:
            try:
                if file_path.exists():
                    file_path.unlink()
                    logger.debug(f"Cleaned up temporary file: {file_path}")
            except OSError as e:
                logger.warning(f"Failed to clean up {file_path}: {e}")

        self.temp_files.clear()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.cleanup()
