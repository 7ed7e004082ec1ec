#!/usr/bin/env python3
"""
Start the Nearest Spot Finder API.

    python run.py --env production --port 9000
    python run.py --create-sample staging
"""

import os
import sys
import argparse

from spotfinder.config import Settings, use_settings
from spotfinder.config.loader import ConfigLoader, load_config_for_environment

ENVIRONMENTS = ["development", "staging", "production", "testing"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nearest Spot Finder Server")
    parser.add_argument("--env", choices=ENVIRONMENTS, default=None,
                        help="Environment whose .env.<env> file to load "
                             "(default: $ENVIRONMENT or development)")

    server = parser.add_argument_group("server overrides")
    server.add_argument("--host", default=None)
    server.add_argument("--port", type=int, default=None)
    server.add_argument("--workers", type=int, default=None)
    server.add_argument("--reload", action="store_true", help="Restart on code changes")
    server.add_argument("--debug", action="store_true")

    tools = parser.add_argument_group("config tools")
    tools.add_argument("--list-envs", action="store_true",
                       help="List environments that have a .env.<env> file")
    tools.add_argument("--create-sample", metavar="ENV", choices=ENVIRONMENTS,
                       help="Write .env.<ENV>.sample with every setting and exit")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line flags win over environment files."""
    for name in ("host", "port", "workers"):
        value = getattr(args, name)
        if value is not None:
            setattr(settings, name, value)
    if args.reload:
        settings.reload = True
    if args.debug:
        settings.debug = True
    return settings


def describe(settings: Settings) -> str:
    return (
        f"{settings.app_name} v{settings.app_version} [{settings.environment.value}] "
        f"on {settings.host}:{settings.port} x{settings.workers}, "
        f"looking for {settings.category.label} within {settings.search.radius_m:g}m"
    )


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list_envs:
        for env in ConfigLoader.get_available_environments():
            print(env)
        return

    if args.create_sample:
        print(ConfigLoader.create_sample_env_file(args.create_sample))
        return

    try:
        settings = apply_overrides(load_config_for_environment(args.env), args)
    except ValueError as e:
        sys.exit(f"Invalid configuration: {e}")

    print(describe(settings))

    # Worker processes rebuild settings from the environment
    os.environ["ENVIRONMENT"] = settings.environment.value
    use_settings(settings)

    import uvicorn

    uvicorn.run(
        "spotfinder.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=1 if settings.reload else settings.workers,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
