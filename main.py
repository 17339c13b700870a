"""Command-line interface for the in-memory user directory."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from userdir import (
    DirectoryConfig,
    DirectoryConfigError,
    RecordIndexError,
    UserDirectory,
    load_directory_config,
    resolve_config_path,
)
from userdir.models import AddStatus, AuthStatus

logger = logging.getLogger("userdir.main")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _add_common_options(parser: argparse.ArgumentParser, *, suppress_defaults: bool) -> None:
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress_defaults else None,
        help="Path to the YAML configuration (default: USERDIR_CONFIG or config/userdir.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=argparse.SUPPRESS if suppress_defaults else "INFO",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="Logging verbosity (default: INFO)",
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="In-memory user directory utilities")
    _add_common_options(parser, suppress_defaults=False)

    # Subcommands accept the same options; suppressed defaults keep values given before the subcommand.
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, suppress_defaults=True)

    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="console")

    subparsers.add_parser("console", parents=[common], help="Launch the interactive directory console")
    subparsers.add_parser("show-config", parents=[common], help="Print the resolved directory configuration")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    return parser.parse_args(args_list)


def _load_config(config_arg: str | None) -> DirectoryConfig:
    config_path: Path = resolve_config_path(config_arg or os.getenv("USERDIR_CONFIG"))
    config = load_directory_config(config_path).with_env_overrides()
    logger.debug("Loaded directory configuration from %s", config_path)
    return config


def _show_config(config: DirectoryConfig) -> None:
    print("Directory configuration:")
    print(f"  default name       : {config.default_name}")
    print(f"  default email      : {config.default_email}")
    print(f"  default age        : {config.default_age}")
    print(f"  acceptance mode    : {config.acceptance_mode} (threshold {config.acceptance_threshold})")
    print(f"  verify passwords   : {'yes' if config.verify_passwords else 'no'}")
    print(f"  token prefix       : {config.token_prefix!r}")
    print(f"  strict removal     : {'yes' if config.strict_removal else 'no'}")
    print(f"  report separator   : {config.report_separator!r}")


def _run_console(directory: UserDirectory) -> None:
    """Provide an interactive console over a fresh in-memory directory."""

    print("User Directory Console")
    print("Press Ctrl+C at any time to exit.\n")

    try:
        while True:
            print("Select an option:")
            print("  1) List all users")
            print("  2) Add a new user")
            print("  3) Authenticate (or create) a user")
            print("  4) Remove a user by position")
            print("  5) Show report")
            print("  6) Exit")

            choice = input("Enter choice [1-6]: ").strip()

            if choice == "1":
                _list_users(directory)
            elif choice == "2":
                _add_user(directory)
            elif choice == "3":
                _authenticate(directory)
            elif choice == "4":
                _remove_user(directory)
            elif choice == "5":
                print(directory.format_report() or "<empty directory>")
            elif choice == "6":
                print("Goodbye!")
                return
            else:
                print("Invalid selection. Please choose a number from the menu.\n")

            print()
    except (KeyboardInterrupt, EOFError):
        print("\nExiting directory console.")


def _list_users(directory: UserDirectory) -> None:
    users = directory.users
    if not users:
        print("No users are currently registered.")
        return

    current = directory.current_user
    print(f"{len(users)} user(s) found:")
    print(f"{'#':>4}  {'Name':<24}  {'Email':<32}  {'Age':>4}  Created")
    print("-" * 88)
    for position, user in enumerate(users):
        marker = "*" if user is current else " "
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{position:>3}{marker}  {user.name:<24}  {user.email:<32}  {user.age:>4}  {created}")


def _add_user(directory: UserDirectory) -> None:
    print("\nAdd a new user (leave fields blank to use defaults).")
    name = input("Name: ").strip() or None
    email = input("Email address: ").strip() or None
    raw_age = input("Age: ").strip()

    age: int | None = None
    if raw_age:
        try:
            age = int(raw_age)
        except ValueError:
            print(f"Invalid age {raw_age!r}; user not added.")
            return

    result = directory.add_record({"name": name, "email": email, "age": age})
    if result.status is AddStatus.REJECTED:
        print(f"User {result.record.name!r} was rejected by the acceptance gate.")
        return

    logger.info("Added user %s", result.record.name)
    print(f"Added {result.record.name!r}; {len(result.matches)} user(s) now share that name.")


def _authenticate(directory: UserDirectory) -> None:
    name = input("Name: ").strip() or None
    password = input("Password: ").strip() or None

    result = directory.authenticate_or_create(name, password)
    if result.status is AuthStatus.REJECTED:
        print("Authentication rejected.")
    elif result.status is AuthStatus.CREATED:
        print(f"Created and selected user {result.record.name!r}.")
    else:
        print(f"Selected user {result.record.name!r}.")
    print(f"Issued token {result.token}")


def _remove_user(directory: UserDirectory) -> None:
    raw_index = input("Position: ").strip()
    try:
        index = int(raw_index)
    except ValueError:
        print(f"Invalid position {raw_index!r}.")
        return

    try:
        result = directory.remove_by_position(index)
    except RecordIndexError as exc:
        print(f"Failed to remove user: {exc}")
        return

    if result.removed is not None:
        logger.info("Removed user %s", result.removed.name)
    print(f"Removal result: {result.describe()}.")


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        config = _load_config(args.config)
    except DirectoryConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.command == "show-config":
        _show_config(config)
    elif args.command == "console":
        _run_console(UserDirectory(config))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
