"""Config and application model loading shared by ``check`` and ``routes``."""

import argparse
from pathlib import Path

from routecheck.app_model import dump_app_model, load_app_model_file
from routecheck.config import CONFIG_FILENAME, CheckConfig, load_config
from routecheck.model import AppModel


def load_check_config(args: argparse.Namespace) -> CheckConfig:
    """Resolve the config for ``args.root``.

    An explicit ``--config`` must exist; otherwise ``.routecheck.yml`` in
    the project root is used when present, and defaults when not.

    Raises:
        ConfigurationError: If the config file is unreadable or invalid.
    """
    root = Path(args.root)
    config_path = getattr(args, "config", None)
    if config_path is not None:
        return load_config(config_path, root=root)

    default_path = root / CONFIG_FILENAME
    if default_path.is_file():
        return load_config(default_path, root=root)
    return CheckConfig(root=root)


def load_model(args: argparse.Namespace) -> AppModel:
    """Load ``--model`` when given, otherwise dump it from the running app.

    Raises:
        AppModelError: If the model cannot be loaded.
    """
    if args.model is not None:
        return load_app_model_file(args.model, root=args.root)
    return dump_app_model(args.root)
