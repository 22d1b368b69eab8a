import argparse
import asyncio
import sys

from klenhub_backend.core.config import settings
from klenhub_backend.core.logger import apply_logging_configuration
from klenhub_backend.supervisor.exceptions import (
    PidFileError,
    ServerAlreadyRunningError,
)


# Commands import their modules lazily so --no-log is applied before any
# component logger gets created


def cmd_start(args) -> int:
    from klenhub_backend.supervisor.control import start_server

    print("Starting Klenhub backend server...")
    try:
        pid = start_server()
    except ServerAlreadyRunningError as e:
        print(e, file=sys.stderr)
        print('Use "klenhub shutdown" to stop the server first.', file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Failed to start server: {e}", file=sys.stderr)
        return 1
    print(f"Server started with PID: {pid}")
    print(f"Logs are being written to: {settings.LOG_FILE}")
    print('To stop the server, run: klenhub shutdown')
    return 0


def cmd_shutdown(args) -> int:
    from klenhub_backend.supervisor.control import ShutdownResult, shutdown_server

    try:
        result = asyncio.run(shutdown_server())
    except PidFileError as e:
        print(e, file=sys.stderr)
        return 1

    if result is ShutdownResult.STALE:
        print("Server process is not running. Cleaned up PID file.")
    elif result is ShutdownResult.KILLED:
        print("Server did not shut down gracefully. Forced shutdown.")
    else:
        print("Server has been shut down successfully.")
    return 0


def cmd_restart(args) -> int:
    from klenhub_backend.supervisor.control import restart_server

    print("Restarting server...")
    try:
        pid = asyncio.run(restart_server())
    except OSError as e:
        print(f"Failed to restart server: {e}", file=sys.stderr)
        return 1
    print(f"Server restarted with PID: {pid}")
    return 0


def cmd_status(args) -> int:
    from klenhub_backend.supervisor.control import (
        ServerState,
        format_uptime,
        server_status,
    )

    status = server_status(tail=args.tail)
    print("Klenhub Backend Server Status")
    print("----------------------------")

    if status.state is ServerState.STOPPED:
        print("Status: STOPPED")
        print('Use "klenhub start" to start the server.')
    elif status.state is ServerState.STALE:
        print("Status: STOPPED (Stale PID file)")
        print(f"The server with PID {status.pid} is not running, but a PID file existed.")
        print("Cleaned up stale PID file.")
    elif status.state is ServerState.UNKNOWN:
        print("Status: UNKNOWN")
        print(f"Could not determine server status: {status.error}")
        return 1
    else:
        print("Status: RUNNING")
        print(f"PID: {status.pid}")
        print(f"Started: {status.started_at.astimezone():%Y-%m-%d %H:%M:%S}")
        print(f"Uptime: {format_uptime(status.uptime.total_seconds())}")
        if status.recent_logs:
            print("\nRecent Logs:")
            print("------------")
            print("\n".join(status.recent_logs))
    return 0


def cmd_serve(args) -> int:
    from klenhub_backend.main import main as serve

    serve()
    return 0


def cmd_migrate(args) -> int:
    from klenhub_backend.migrations import runner

    try:
        if args.action == "current":
            print(runner.current() or "<base>")
            return 0
        if args.action == "upgrade":
            runner.upgrade(args.revision or "head")
        else:
            runner.downgrade(args.revision or "-1")
    except Exception as e:
        runner.logger.exception("migrate %s failed", args.action)
        print(f"Migration failed: {e}", file=sys.stderr)
        return 1
    print("Migration completed successfully")
    return 0


def cmd_seed(args) -> int:
    from klenhub_backend.seeders.runner import run_seeders

    try:
        names = asyncio.run(run_seeders(args.direction, name=args.name))
    except KeyError as e:
        print(f"Unknown seeder: {e.args[0]}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        return 1
    for name in names:
        print(f"== {name}: {args.direction} done")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="klenhub", description="Klenhub backend")
    parser.add_argument(
        "--no-log", action="store_true", help="disable component log files"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("start", help="start the server in the background").set_defaults(
        func=cmd_start
    )
    sub.add_parser("shutdown", help="stop the background server").set_defaults(
        func=cmd_shutdown
    )
    sub.add_parser("restart", help="stop, then start the server").set_defaults(
        func=cmd_restart
    )

    status = sub.add_parser("status", help="show server status")
    status.add_argument("--tail", type=int, default=5, help="log lines to show")
    status.set_defaults(func=cmd_status)

    sub.add_parser("serve", help="run the server in the foreground").set_defaults(
        func=cmd_serve
    )

    migrate = sub.add_parser("migrate", help="apply database migrations")
    migrate.add_argument("action", choices=("upgrade", "downgrade", "current"))
    migrate.add_argument("revision", nargs="?")
    migrate.set_defaults(func=cmd_migrate)

    seed = sub.add_parser("seed", help="insert or remove demo data")
    seed.add_argument("direction", choices=("up", "down"))
    seed.add_argument("--name", help="run a single seeder")
    seed.set_defaults(func=cmd_seed)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.no_log:
        apply_logging_configuration(False)
    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("Exit")
        return 130


if __name__ == "__main__":
    sys.exit(main())
