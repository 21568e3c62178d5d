import argparse
import logging
import os
import sys

from . import __version__
from .config import DEFAULT_API_DIR, DEFAULT_HOST, DEFAULT_PORT, WATCHED_EXTENSIONS, ServeConfig
from .log import configure_logging
from .server import run

logger = logging.getLogger(__name__)


def port_number(value):
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port number: {value}")
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"invalid port number: {value}")
    return port


def build_parser():
    parser = argparse.ArgumentParser(
        prog="liveserver",
        description="Serve a directory over HTTP and reload browsers when files change.",
    )
    parser.add_argument("directory", nargs="?", help="directory to serve (overrides --dir)")
    parser.add_argument("-d", "--dir", default=os.getcwd(),
                        help="directory to serve (default: current directory)")
    parser.add_argument("-a", "--host", default=DEFAULT_HOST,
                        help=f"host address to listen on (default: {DEFAULT_HOST})")
    parser.add_argument("-p", "--port", type=port_number, default=DEFAULT_PORT,
                        help=f"port to listen on (default: {DEFAULT_PORT})")
    parser.add_argument("-w", "--watch", action=argparse.BooleanOptionalAction, default=True,
                        help="reload browsers when files change (default: on)")
    parser.add_argument("--cors", nargs="?", const="*", default=None, metavar="ORIGIN",
                        help="send Access-Control-Allow-Origin (bare flag means '*')")
    parser.add_argument("--spa", action="store_true",
                        help="serve /index.html for paths that do not exist")
    parser.add_argument("--api-dir", default=DEFAULT_API_DIR, metavar="DIR",
                        help=f"directory of API handler files under the root (default: {DEFAULT_API_DIR})")
    parser.add_argument("--no-api", dest="api_dir", action="store_const", const=None,
                        help="disable API handler routing")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None) -> ServeConfig:
    args = build_parser().parse_args(argv)
    return config_from_args(args)


def config_from_args(args) -> ServeConfig:
    return ServeConfig(
        root=args.directory or args.dir,
        host=args.host,
        port=args.port,
        watch=args.watch,
        watched_extensions=WATCHED_EXTENSIONS,
        cors_origin=args.cors,
        spa=args.spa,
        api_dir=args.api_dir,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    config = config_from_args(args)

    try:
        run(config)
    except OSError as exc:
        logger.error("Failed to serve files on %s: %s", config.url, exc)
        sys.exit(1)
