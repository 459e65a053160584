"""Logging setup for applications embedding maptheme.

Library modules only create loggers; handlers are installed here, once, by
the application.
"""

import logging
from typing import Optional, Union

from maptheme.schemas.resolve import resolve_settings
from maptheme.schemas.settings import ResolverSettings


def configure_logging(settings: Optional[Union[ResolverSettings, dict]] = None) -> logging.Logger:
    """Install a console handler on the root logger.

    Existing root handlers are removed first, so calling this twice does
    not duplicate output.

    Parameters
    ----------
    settings : ResolverSettings or dict, optional
        Engine settings; ``logging.level`` sets the root level.

    Returns
    -------
    logging.Logger
        The root logger.
    """
    if not isinstance(settings, ResolverSettings):
        settings = resolve_settings(settings)
    log_level = getattr(logging, settings.logging.level, logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    return root
