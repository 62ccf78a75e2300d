#!/usr/bin/env python3
"""
Aino CLI - Command Line Interface for Aino applications
"""
import argparse
import importlib
import os
import re
import sys
from typing import Any, List

from aino import __version__
from aino.config import get_config_from_environment
from aino.routing.router import Router
from aino.server.application import Application
from aino.server.server import Server

# ``module.path`` with an optional ``:attribute``
TARGET_PATTERN = re.compile(r'^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*(:[A-Za-z_]\w*)?$')


def load_target(target: str) -> Any:
    """Import ``module:attribute``, with the working directory importable"""
    module_path, _, attribute = target.partition(':')
    attribute = attribute or 'app'

    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    module = importlib.import_module(module_path)
    try:
        return getattr(module, attribute)
    except AttributeError:
        raise ImportError(f"Module {module_path!r} has no attribute {attribute!r}") from None


def format_routes(router: Router) -> List[str]:
    """One ``METHOD  /pattern  name`` line per route, in declaration order"""
    rows = [(str(route.method).upper(), route.path, route.name or '') for route in router]
    if not rows:
        return []

    method_width = max(len(row[0]) for row in rows)
    path_width = max(len(row[1]) for row in rows)
    return [
        f"{method.ljust(method_width)}  {path.ljust(path_width)}  {name}".rstrip()
        for method, path, name in rows
    ]


class AinoCLI:
    """Command Line Interface for Aino"""

    def __init__(self):
        self.parser = self._create_parser()
        self.commands = {
            'start': self.cmd_start,
            'routes': self.cmd_routes,
        }

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create and configure the argument parser"""
        parser = argparse.ArgumentParser(
            prog='aino',
            description="Aino Framework CLI",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""Examples:
  aino start --app myapp:app --host 0.0.0.0 --port 3000
  aino start --app myapp:handle --debug
  aino routes --app myapp:routes
            """
        )
        parser.add_argument('--version', action='version', version=f"Aino {__version__}")

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        start_parser = subparsers.add_parser('start', help='Start the server')
        start_parser.add_argument('--app', default='app:app',
                                  help='Application or handler (e.g., myapp:app)')
        start_parser.add_argument('--host', default=None, help='Host to bind to')
        start_parser.add_argument('--port', type=int, default=None, help='Port to bind to')
        start_parser.add_argument('--debug', action='store_true', help='Enable debug mode')

        routes_parser = subparsers.add_parser('routes', help='List the route table')
        routes_parser.add_argument('--app', default='app:routes',
                                   help='Route list or Router (e.g., myapp:routes)')

        return parser

    def check_args(self, args) -> List[str]:
        """Collect argument errors for the selected command"""
        errors = []
        if not TARGET_PATTERN.match(args.app or ''):
            errors.append(f"Invalid app module path: {args.app}")
        port = getattr(args, 'port', None)
        if port is not None and not 0 < port < 65536:
            errors.append(f"Invalid port number: {port} (must be 1-65535)")
        return errors

    def run(self, argv: List[str] = None):
        """Run the CLI"""
        args = self.parser.parse_args(argv)

        if not args.command:
            self.parser.print_help()
            return

        errors = self.check_args(args)
        if errors:
            print("Validation errors:", file=sys.stderr)
            for error in errors:
                print(f"  - {error}", file=sys.stderr)
            sys.exit(2)

        self.commands[args.command](args)

    def cmd_start(self, args):
        """Start the server"""
        config = get_config_from_environment()
        if args.host:
            config.server.host = args.host
        if args.port:
            config.server.port = args.port
        if args.debug:
            config.debug = True
            config.server.debug = True

        target = load_target(args.app)
        app = target if isinstance(target, Application) else Application(target, config)

        Server(app, config).run()

    def cmd_routes(self, args):
        """Print the route table"""
        target = load_target(args.app)
        if isinstance(target, Application):
            print("Cannot list routes of an application, point --app at the route list", file=sys.stderr)
            sys.exit(1)

        if callable(target):
            target = target()

        router = target if isinstance(target, Router) else Router(target)
        for line in format_routes(router):
            print(line)


def main(argv: List[str] = None):
    """Main CLI entry point"""
    cli = AinoCLI()
    cli.run(argv)


if __name__ == '__main__':
    main()
