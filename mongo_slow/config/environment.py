"""Environment file loading.

Files are read in priority order and never override variables that are
already set, so the process environment always wins:

1. ``/etc/services/environment/<env>``
2. ``/etc/services/<prog>/environment``
3. ``<prog>-<env>.env`` in the working directory
4. ``.env`` in the working directory
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from mongo_slow.config.env_config import EnvConfig

logger = logging.getLogger(__name__)

SERVICES_ROOT = Path('/etc/services')


def candidate_env_files(env: str, prog: str | None = None, root: Path = SERVICES_ROOT) -> list[Path]:
    prog = prog or Path(sys.argv[0]).name or 'mongo-slow-queries'
    return [
        root / 'environment' / env,
        root / prog / 'environment',
        Path(f"{prog}-{env}.env"),
        Path('.env'),
    ]


def load_environment(env: str | None = None, prog: str | None = None, root: Path = SERVICES_ROOT) -> list[Path]:
    """Load env files for ``env`` and return the ones that were found.

    ``ENVIRONMENT`` is exported (default ``dev``) before loading so settings
    see the effective value.
    """
    env = (env or os.environ.get('ENVIRONMENT') or 'dev').strip() or 'dev'
    os.environ['ENVIRONMENT'] = env

    loaded: list[Path] = []
    for path in candidate_env_files(env, prog=prog, root=root):
        if path.is_file():
            load_dotenv(path, override=False)
            loaded.append(path)
            logger.debug("loaded environment file %s", path)
    EnvConfig.clear_cache()
    if loaded:
        logger.info("environment %s loaded from %d file(s)", env, len(loaded))
    return loaded


__all__ = ['candidate_env_files', 'load_environment', 'SERVICES_ROOT']
