#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""chaingenesis: genesis generator for proof-of-stake chains with system contracts

Usage:
    chaingenesis                       regenerate all built-in profiles
    chaingenesis PROFILE.json          write the genesis to stdout
    chaingenesis PROFILE.json OUTPUT   OUTPUT is "stdout", "stderr" or a file path
"""

import argparse
import logging
import os
import sys
import traceback

import coloredlogs

from argparse import ArgumentParser, Namespace
from chaingenesis.config import BuilderConfig
from chaingenesis.ethereum.artifact import ArtifactStore
from chaingenesis.exceptions import GenesisBaseException
from chaingenesis.genesis.assembler import GenesisAssembler
from chaingenesis.genesis.document import STDOUT
from chaingenesis.genesis.profile import NetworkProfile
from chaingenesis.genesis.profiles import builtin_profiles

from chaingenesis.__version__ import __version__ as VERSION

log = logging.getLogger(__name__)

LOG_LEVELS = [
    logging.NOTSET,
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]


def exit_with_error(message):
    """
    Exits with error
    :param message: message
    """
    log.error(message)
    sys.exit(1)


def get_parser() -> ArgumentParser:
    """
    Returns the command line parser
    :return: Parser which handles the profile and output arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate genesis files with pre-deployed system contracts"
    )
    parser.add_argument(
        "profile",
        nargs="?",
        help="JSON network profile; without it all built-in profiles are regenerated",
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=STDOUT,
        help='"stdout" (default), "stderr" or a file path',
    )
    parser.add_argument(
        "--artifacts-dir",
        help="directory containing the compiled <ContractName>.json artifacts",
        metavar="DIR",
    )
    parser.add_argument(
        "-v", type=int, help="log level (0-5)", metavar="LOG_LEVEL", default=2
    )
    parser.add_argument(
        "--version", action="store_true", help="print the version and exit"
    )
    return parser


def validate_args(args: Namespace):
    """
    Validate cli args
    :param args:
    :return:
    """
    if not 0 <= args.v < len(LOG_LEVELS):
        exit_with_error("Invalid -v value, you can find valid values in usage")
    if args.v:
        coloredlogs.install(
            fmt="%(name)s [%(levelname)s]: %(message)s",
            level=LOG_LEVELS[args.v],
            stream=sys.stderr,
        )


def build_builtin_profiles(assembler: GenesisAssembler, output_dir: str = ".") -> None:
    """
    Regenerates every built-in profile into its fixed file name
    :param assembler:
    :param output_dir:
    """
    for builtin in builtin_profiles():
        log.info("building %s", builtin.label)
        document = assembler.assemble(builtin.profile)
        document.write(os.path.join(output_dir, builtin.filename))


def build_profile(assembler: GenesisAssembler, profile_path: str, output: str) -> None:
    """
    Builds one JSON profile
    :param assembler:
    :param profile_path:
    :param output: "stdout", "stderr" or a file path
    """
    profile = NetworkProfile.load(profile_path)
    log.info("building %s", profile.name)
    assembler.assemble(profile).write(output)


def parse_args_and_execute(parser: ArgumentParser, args: Namespace) -> None:
    """
    Parses the arguments
    :param parser: The parser
    :param args: The args
    """
    if args.version:
        print("chaingenesis version {}".format(VERSION))
        sys.exit()

    validate_args(args)
    try:
        config = BuilderConfig(artifacts_dir=args.artifacts_dir)
        assembler = GenesisAssembler(
            ArtifactStore(config.artifacts_dir), gas_limit=config.gas_limit
        )
        if args.profile is None:
            build_builtin_profiles(assembler)
        else:
            build_profile(assembler, args.profile, args.output)
    except GenesisBaseException as ge:
        exit_with_error("{}: {}".format(type(ge).__name__, ge))
    except Exception:
        exit_with_error(traceback.format_exc())


def main() -> None:
    """The main CLI interface entry point."""
    parser = get_parser()
    args = parser.parse_args()
    parse_args_and_execute(parser=parser, args=args)


if __name__ == "__main__":
    main()
