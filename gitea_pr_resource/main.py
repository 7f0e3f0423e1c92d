"""Resource entry point.

Three commands, one per pipeline step: check (list new versions), in
(fetch a version into a directory) and out (report status/comment).
Each reads a JSON request on stdin and writes the JSON response on stdout.

Usage: gitea-pr-resource check | in <dir> | out <dir>
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Mapping, TextIO

from pydantic import ValidationError

from gitea_pr_resource.adapters.base import PullRequestSource
from gitea_pr_resource.check import CheckRequest, check
from gitea_pr_resource.config import ResourceSettings, load_settings, resolve_factory
from gitea_pr_resource.errors import ResourceError
from gitea_pr_resource.get import GetRequest, get
from gitea_pr_resource.logging import ResourceLogging
from gitea_pr_resource.models import Source
from gitea_pr_resource.put import PutRequest, put

COMMANDS = ("check", "in", "out")

log = logging.getLogger("gitea_pr_resource")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI: command and, for in/out, the build directory."""
    parser = argparse.ArgumentParser(
        prog="gitea-pr-resource",
        description="Gitea pull request resource - check, in, out",
    )
    parser.add_argument("command", choices=COMMANDS, help="Pipeline step to run")
    parser.add_argument("directory", nargs="?", type=Path, help="Build directory (in/out)")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML settings file",
    )
    args = parser.parse_args(argv)
    if args.command != "check" and args.directory is None:
        parser.error(f"{args.command} requires a directory argument")
    return args


def _source_manager(settings: ResourceSettings, source: Source) -> PullRequestSource:
    factory = resolve_factory(settings.collaborators.source_factory, "source_factory")
    return factory(source)


def run(
    command: str,
    payload: str,
    settings: ResourceSettings,
    directory: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Any:
    """Decode the request, run the step and return the JSON-ready response.

    Raises:
        ResourceError: If the step or collaborator setup fails.
        ValidationError: If the request does not match the step's schema.
    """
    environ = dict(os.environ) if environ is None else environ

    if command == "check":
        request = CheckRequest.model_validate_json(payload)
        request.source.validate_source()
        versions = check(request, _source_manager(settings, request.source))
        return [v.model_dump(mode="json") for v in versions]

    if command == "in":
        request = GetRequest.model_validate_json(payload)
        request.source.validate_source()
        git_factory = resolve_factory(settings.collaborators.git_factory, "git_factory")
        response = get(request, _source_manager(settings, request.source), git_factory(directory), directory)
        return response.model_dump(mode="json")

    if command == "out":
        request = PutRequest.model_validate_json(payload)
        request.source.validate_source()
        response = put(
            request,
            _source_manager(settings, request.source),
            directory,
            environ,
            defaults=settings.status,
        )
        return response.model_dump(mode="json")

    raise ResourceError(f"unknown command: {command}")


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Entry point: run one step, print its response."""
    args = parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        settings = load_settings(args.config)
    except ResourceError as e:
        logging.basicConfig(level=logging.ERROR, stream=sys.stderr)
        log.error("%s", e)
        return 1
    ResourceLogging(settings.logging).setup()

    try:
        response = run(args.command, stdin.read(), settings, directory=args.directory)
    except ValidationError as e:
        log.error("invalid %s request: %s", args.command, e)
        return 1
    except ResourceError as e:
        log.error("%s failed: %s", args.command, e)
        return 1

    json.dump(response, stdout)
    stdout.write("\n")
    return 0


def cli() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
