#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging
import dotenv
from signal import SIGINT, SIGTERM

from aquos_tv.internal_types import *
from aquos_tv import (
    __version__ as pkg_version,
    DEFAULT_PORT,
    aquos_tv_connect,
    AquosTvClientConfig,
    full_class_name,
    exception_description,
  )

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

def split_exec_command(exec_command: str) -> Tuple[str, Optional[str]]:
    """Splits "<name>[=<arg>]" into (name, arg)."""
    if '=' in exec_command:
        name, arg = exec_command.split('=', 1)
        return (name, arg)
    return (exec_command, None)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def get_client_config(self) -> AquosTvClientConfig:
        return AquosTvClientConfig(
            default_host=self._args.host,
            username=self._args.username,
            password=self._args.password,
            default_port=self._args.port,
            login_timeout_secs=self._args.login_timeout,
          )

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_info(self) -> int:
        async with await aquos_tv_connect(config=self.get_client_config()) as client:
            print(json.dumps(client.identity_jsonable(), indent=2))
        return 0

    async def cmd_emulator(self) -> int:
        bind_addr: str = self._args.bind
        port: int = self._args.port
        username: Optional[str] = self._args.username
        password: Optional[str] = self._args.password
        from aquos_tv.emulator import AquosTvEmulator
        emulator = AquosTvEmulator(
            username=username,
            password=password,
            bind_addr=bind_addr,
            port=port,
          )
        def sigint_cleanup() -> None:
            emulator.close(CmdExitError(1, "Emulator terminated with SIGINT or SIGTERM"))
        loop = asyncio.get_running_loop()
        for signal in (SIGINT, SIGTERM):
            loop.add_signal_handler(signal, sigint_cleanup)
        try:
            await emulator.run()
        finally:
            for signal in (SIGINT, SIGTERM):
                loop.remove_signal_handler(signal)
        return 0

    async def cmd_exec(self) -> int:
        continue_on_error: bool = self._args.continue_on_error
        exec_commands: List[str] = self._args.exec_command
        if len(exec_commands) == 0:
            raise CmdExitError(1, "No TV commands specified")
        response_datas: List[JsonableDict] = []
        try:
            async with await aquos_tv_connect(config=self.get_client_config()) as client:
                for exec_command in exec_commands:
                    cmd_name, arg = split_exec_command(exec_command)
                    response_data: JsonableDict = dict(name=cmd_name)
                    if arg is not None:
                        response_data["argument"] = arg
                    try:
                        response_data["response"] = await client.transact_by_name(cmd_name, arg)
                    except Exception as exc:
                        response_data.update(
                            error=full_class_name(exc),
                            error_message=exception_description(exc),
                          )
                        response_datas.append(response_data)
                        if not continue_on_error:
                            raise
                    else:
                        response_datas.append(response_data)
        finally:
            print(json.dumps(response_datas, indent=2))
        return 0

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the aquos-tv command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Control an AQUOS TV.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        def add_connect_args(subparser: argparse.ArgumentParser) -> None:
            subparser.add_argument('--host', default=None,
                                help='''The TV host address. Default: use env var AQUOS_TV_HOST.''')
            subparser.add_argument("--port", default=None, type=int,
                help=f"Default TV port number to connect to. Default: env var AQUOS_TV_PORT, or {DEFAULT_PORT}")
            subparser.add_argument("-u", "--username", default=None,
                help="Login username. Default: env var AQUOS_TV_USERNAME.")
            subparser.add_argument("-p", "--password", default=None,
                help="Login password. Default: env var AQUOS_TV_PASSWORD.")
            subparser.add_argument("--login-timeout", dest="login_timeout", default=None, type=float,
                help="Seconds to wait for each login prompt. Default: env var AQUOS_TV_LOGIN_TIMEOUT, or 0.2")

        # ======================= info

        parser_info = subparsers.add_parser('info', description="Connect to the TV and display its identity.")
        add_connect_args(parser_info)
        parser_info.set_defaults(func=self.cmd_info)

        # ======================= emulator

        parser_emulator = subparsers.add_parser('emulator', description="Run a TV emulator for testing purposes.")
        parser_emulator.add_argument("--port", default=DEFAULT_PORT, type=int,
            help=f"TCP port number to listen on. Default: {DEFAULT_PORT}")
        parser_emulator.add_argument("-u", "--username", default=None,
            help="Username required for login. Default: None (no login required).")
        parser_emulator.add_argument("-p", "--password", default=None,
            help="Password required for login. Default: None.")
        parser_emulator.add_argument('-b', '--bind', default="0.0.0.0",
                            help='''The local unicast IP address to bind to. Default: 0.0.0.0.''')

        parser_emulator.set_defaults(func=self.cmd_emulator)

        # ======================= exec

        parser_exec = subparsers.add_parser('exec', description="Execute one or more named commands on the TV.")
        add_connect_args(parser_exec)
        parser_exec.add_argument('--continue', dest="continue_on_error", action='store_true', default=False,
                            help='Continue running commands on error. Default: False')
        parser_exec.add_argument('exec_command', nargs=argparse.REMAINDER,
                            help='''One or more named commands to execute; e.g., "power.on" or "volume.set=20".''')

        parser_exec.set_defaults(func=self.cmd_exec)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"aquos-tv: error: {exception_description(ex)}", file=sys.stderr)
        except BaseException as ex:
            print(f"aquos-tv: Unhandled exception {ex.__class__.__name__}: {ex}", file=sys.stderr)
            raise

        return rc

    def run(self) -> int:
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
