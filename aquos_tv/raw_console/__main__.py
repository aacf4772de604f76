#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import asyncio
import logging
import dotenv
import aioconsole
import colorama # type: ignore[import]
from colorama import Fore, Style
import traceback

from aquos_tv.internal_types import *
from aquos_tv.pkg_logging import logger
from aquos_tv.exceptions import AquosTvCommandError, AquosTvConnectionError
from aquos_tv.util import exception_description

from aquos_tv.client import TcpAquosTvClientTransport, AquosTvClientConfig
from aquos_tv.protocol import AquosCommand

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

def parse_raw_command(raw_data: str) -> AquosCommand:
    """Parses a typed line such as "VOLM20" or "POWR 1" into a command."""
    raw_data = raw_data.strip()
    return AquosCommand.create(raw_data[:4].upper(), raw_data[4:].strip())

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True
    _transport: Optional[TcpAquosTvClientTransport] = None
    _colorize_stdout: bool = True
    _client_config: Optional[AquosTvClientConfig] = None

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def ocolor(self, codes: str) -> str:
        return codes if self._colorize_stdout else ""

    def get_client_config(self) -> AquosTvClientConfig:
        if self._client_config is None:
            self._client_config = AquosTvClientConfig(
                default_host=self._args.ip_address,
                default_port=self._args.port,
                username=self._args.username,
                password=self._args.password,
              )
        return self._client_config

    async def connect_tv(self) -> TcpAquosTvClientTransport:
        transport = TcpAquosTvClientTransport(config=self.get_client_config())
        await transport.connect()
        return transport

    async def handle_console_input(self) -> None:
        assert self._transport is not None
        try:
            while True:
                raw_data = await aioconsole.ainput(">>> ")
                if raw_data.strip() == "":
                    continue
                if raw_data in ("exit", "quit", "q"):
                    break
                command: Optional[AquosCommand] = None
                try:
                    command = parse_raw_command(raw_data)
                except Exception as e:
                    if self._provide_traceback:
                        print(f"\r{self.ocolor(Fore.RED)}Invalid command: {e}\n{traceback.format_exc()}{self.ocolor(Style.RESET_ALL)}")
                    else:
                        print(f"\r{self.ocolor(Fore.RED)}Invalid command: {e}{self.ocolor(Style.RESET_ALL)}")
                if command is not None:
                    print(f"\r{self.ocolor(Fore.GREEN)}{command.line:<20} ->{self.ocolor(Style.RESET_ALL)}")
                    try:
                        response = await self._transport.transact(command)
                    except AquosTvCommandError:
                        print(f"\r{' '*20}    <- {self.ocolor(Fore.RED)}ERR{self.ocolor(Style.RESET_ALL)}")
                    else:
                        print(f"\r{' '*20}    <- {self.ocolor(Fore.BLUE)}{response}{self.ocolor(Style.RESET_ALL)}")
        except EOFError:
            print()
        except AquosTvConnectionError as e:
            print(f"\r{self.ocolor(Fore.RED)}Connection lost: {exception_description(e)}{self.ocolor(Style.RESET_ALL)}")
            raise
        finally:
            logger.debug("Console input handler exiting")

    async def cmd_bare(self) -> int:
        async with await self.connect_tv() as transport:
            self._transport = transport
            await self.handle_console_input()
        return 0

    async def arun(self) -> int:
        """Run the raw console tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Send raw commands to an AQUOS TV.")

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--no-color', dest='no_color', action='store_true', default=False,
                            help='Do not colorize output')
        parser.add_argument('--port', default=None, type=int,
                            help='''The port number to connect to. Default: env var AQUOS_TV_PORT, or 10002''')
        parser.add_argument('-u', '--username', default=None,
                            help='''Login username. Default: env var AQUOS_TV_USERNAME''')
        parser.add_argument('-p', '--password', default=None,
                            help='''Login password. Default: env var AQUOS_TV_PASSWORD''')
        parser.add_argument('ip_address', default=None, nargs='?',
                            help='''The LAN IP address or hostname of the TV. Default: env var AQUOS_TV_HOST''')

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback
        self._colorize_stdout = not args.no_color and sys.stdout.isatty()

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            rc = await self.cmd_bare()
            logging.debug(f"Command returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"raw_console: error: {exception_description(ex)}", file=sys.stderr)
        except BaseException as ex:
            print(f"raw_console: Unhandled exception: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
        colorama.just_fix_windows_console()
        return asyncio.run(self.arun())

def run(argv: Optional[Sequence[str]]=None) -> int:
    dotenv.load_dotenv()
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
