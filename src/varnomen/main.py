#!python
import argparse
import logging
import platform
import sys
import time
from typing import List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .annotation import main as annotate_main
from .constants import EXIT_ERROR, EXIT_OK, SUBCOMMAND
from .error import PedigreeError
from .pedigree.pedigree import parse_ped_file
from .util import filepath


def pedigree_main(ped_file: str) -> List[str]:
    """
    print the summary of each family of a PED file
    """
    summaries = []
    for pedigree in parse_ped_file(ped_file).values():
        summary = pedigree.summary()
        print(summary)
        summaries.append(summary)
    return summaries


def create_parser(argv):
    parser = argparse.ArgumentParser(formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )

    # annotate
    required[SUBCOMMAND.ANNOTATE].add_argument(
        '-n',
        '--inputs',
        nargs='+',
        help='path to the input variant files',
        required=True,
        metavar='FILEPATH',
    )
    required[SUBCOMMAND.ANNOTATE].add_argument(
        '-o', '--output', help='path to the output file', required=True
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '--config', '-c', help='path to the JSON config file', type=filepath, default=None
    )
    optional[SUBCOMMAND.ANNOTATE].add_argument(
        '--transcripts',
        nargs='+',
        type=filepath,
        default=[],
        help='transcript model JSON files (added to the reference.transcripts setting of the config)',
    )

    # pedigree
    required[SUBCOMMAND.PEDIGREE].add_argument('ped_file', type=filepath, help='path to the PED file')

    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads reference files and redirects into subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'varnomen: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        if args.command == SUBCOMMAND.ANNOTATE:
            config = _config.load_config(args.config) if args.config else _config.validate_config()
            config['reference.transcripts'] = list(config['reference.transcripts']) + args.transcripts
            try:
                args.inputs = _util.bash_expands(*args.inputs)
            except FileNotFoundError:
                parser.error('--inputs file(s) for {} {} do not exist'.format(args.command, args.inputs))
            annotate_main.main(
                inputs=args.inputs,
                output=args.output,
                config=config,
                start_time=start_time,
            )
        else:
            pedigree_main(args.ped_file)
        duration = int(time.time()) - start_time
        _util.logger.info(f'run time (s): {duration}')
    except PedigreeError as err:
        _util.logger.error(f'invalid pedigree: {err}')
        return EXIT_ERROR
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
