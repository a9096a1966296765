"""
Command line entry point.

Usage:
    # Flow declarations for one package directory, to stdout
    typewriter -dir ./models

    # TypeScript, whole tree, to a file
    typewriter -dir ./models -r -lang ts -out ./web/src/types/models.ts

    # Inspect what the reader saw
    typewriter -file ./models/person.go --dump-ir
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from typewriter import __version__
from typewriter.analyzer import analyze_package
from typewriter.backends import generate_declarations
from typewriter.config import load_config, GeneratorConfig
from typewriter.errors import TypewriterError, ConfigError
from typewriter.go_parser import parse_go_directory, parse_go_file
from typewriter.logging_config import configure_logging
from typewriter.model import Package
from typewriter.serialization import package_to_yaml

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typewriter",
        description="Generate Flow or TypeScript type declarations from Go types",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-dir", "--dir", dest="dir", help="Directory of Go files to read")
    source.add_argument("-file", "--file", dest="file", help="Single Go file to read")
    parser.add_argument("-out", "--out", dest="out", help="Output file (default: stdout)")
    parser.add_argument("-lang", "--lang", dest="lang", help="Output language: flow or ts (default: flow)")
    parser.add_argument("-r", "--recursive", dest="recursive", action="store_true", default=None,
                        help="Read subdirectories too")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true", default=None,
                        help="Debug logging")
    parser.add_argument("--include-unexported", dest="include_unexported", action="store_true", default=None,
                        help="Emit lower-case type declarations too")
    parser.add_argument("--config", help="YAML config file (default: ./typewriter.yaml if present)")
    parser.add_argument("--dump-ir", action="store_true", help="Write the parsed model as YAML instead")
    parser.add_argument("--report", action="store_true", help="Print analyzer warnings to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    keys = ("dir", "file", "out", "lang", "recursive", "verbose", "include_unexported")
    return {key: getattr(args, key) for key in keys}


def read_package(config: GeneratorConfig) -> Package:
    """Run the reader selected by the configuration."""
    if config.file:
        return parse_go_file(config.file, include_unexported=config.include_unexported)
    if config.dir:
        return parse_go_directory(config.dir, recursive=config.recursive,
                                  include_unexported=config.include_unexported)
    raise ConfigError("no input: set --dir or --file")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, overrides=_overrides(args))
        configure_logging(config.effective_log_level)
        package = read_package(config)

        if args.report:
            report = analyze_package(package)
            for warning in report.warnings:
                print(f"typewriter: warning: {warning}", file=sys.stderr)

        if args.dump_ir:
            output = package_to_yaml(package)
        else:
            output = generate_declarations(package, language=config.language)

        if config.out:
            with open(config.out, "w", encoding="utf-8") as f:
                f.write(output)
            logger.info("Wrote %d declarations to %s", len(package.declarations), config.out)
        else:
            sys.stdout.write(output)
    except (TypewriterError, OSError) as exc:
        print(f"typewriter: {exc}", file=sys.stderr)
        return 1

    return 0
