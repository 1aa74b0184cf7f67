"""routecheck — static drift checks between Rails routes and code.

Finds routes that point at controller actions which no longer exist,
and ``*_path`` / ``*_url`` helper calls that no longer match any route.

Basic usage::

    from routecheck import CheckConfig, RouteChecker, load_app_model_file

    model = load_app_model_file("routes.json")
    report = RouteChecker(model, CheckConfig()).check()
    print(report.render_text())

Or via CLI::

    routecheck check path/to/app
"""

__version__ = "0.1.0"
__all__ = [
    "AppModel",
    "AppModelError",
    "CheckConfig",
    "CheckReport",
    "ConfigurationError",
    "ControllerInfo",
    "HelperCall",
    "ParserError",
    "Route",
    "RouteCheckError",
    "RouteChecker",
    "RouteViolation",
    "dump_app_model",
    "load_app_model_file",
    "load_config",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "AppModel": "routecheck.model",
    "AppModelError": "routecheck.errors",
    "CheckConfig": "routecheck.config",
    "CheckReport": "routecheck.report",
    "ConfigurationError": "routecheck.errors",
    "ControllerInfo": "routecheck.model",
    "HelperCall": "routecheck.model",
    "ParserError": "routecheck.errors",
    "Route": "routecheck.model",
    "RouteCheckError": "routecheck.errors",
    "RouteChecker": "routecheck.checker",
    "RouteViolation": "routecheck.model",
    "dump_app_model": "routecheck.app_model",
    "load_app_model_file": "routecheck.app_model",
    "load_config": "routecheck.config",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import routecheck`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
