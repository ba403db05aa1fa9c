import argparse
import logging
import sys

import uvicorn
from dotenv import load_dotenv

from src.empservice.app import create_app
from src.empservice.config import DEFAULT_CONFIG_PATH, Config, ConfigError, load_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Employee CRUD service")
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG_PATH, help='TOML config file')
    parser.add_argument('-p', '--port', default=None, help='Port number (overrides the config file)')
    return parser


def resolve_port(cli_port, config: Config) -> int:
    return int(cli_port or config.listen_port)


def print_banner(config: Config) -> None:
    owner = config.owner
    print(f'Title: {config.title}')
    print(f'Owner: {owner.name} ({owner.org}, {owner.bio}), Born: {owner.dob}')
    print(f'Client data: {config.clients.data}')
    print(f'Client hosts: {config.clients.hosts}')


def main(argv=None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 1

    logging.basicConfig(level=config.log_level, stream=sys.stderr)
    print_banner(config)

    try:
        port = resolve_port(args.port, config)
    except ValueError:
        print(f'Invalid port: {args.port or config.listen_port}', file=sys.stderr)
        return 1

    uvicorn.run(create_app(config), host=config.host, port=port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
