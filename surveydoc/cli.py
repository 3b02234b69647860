#!/usr/bin/env python3
"""
Command-line interface for surveydoc.

Three-phase architecture:
1. Gather user requirements (parse args) -> ExportConfig
2. Prepare execution environment (validate, create dirs, collect inputs)
3. Execute (transform and render with explicit paths)
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import List, Optional

from .cli_gather import gather_user_requirements
from .cli_prepare import prepare_execution_environment
from .cli_execute import execute_pipeline
from .logging_utils import LOG, setup_logging


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with three-phase architecture.

    Phase 1: Gather user requirements (parse args)
    Phase 2: Prepare execution environment (validate, setup)
    Phase 3: Execute (transform, render)
    """
    # Phase 1: Gather requirements
    config = gather_user_requirements(argv)

    # Setup logging (side effect necessary for all phases)
    if config.log_file:
        Path(config.log_file).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
    setup_logging(config.debug, log_file=config.log_file, verbosity=config.verbosity)

    try:
        # Phase 2: Prepare environment
        config = prepare_execution_environment(config)

        # Phase 3: Execute
        return execute_pipeline(config)
    except Exception as e:
        LOG.error(str(e))
        if config.debug:
            LOG.error(traceback.format_exc())
        return 1

if __name__ == "__main__":
    raise SystemExit(main())
