import asyncio
import sys

from rich.pretty import pprint

from helmsman import *

__prog__ = "playground"


@command("build", args=[argument("target", optional=True, values=("debug", "release"))])
async def build(input):
    """Build the current program"""
    return input.args.get("target", "debug")


@command("connect")
def connect(input):
    """Toggle connection to Playground Wallet"""
    return True


registry = Registry(
    build=build,
    wallet=command("wallet", "Manage Playground Wallet", subcommands=[connect]),
)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        pprint(registry["wallet"])
    else:
        terminal = Terminal(registry, shell=True)
        terminal.commands.build.on_did_run_finish(lambda result: terminal.log(f"built {result}"))
        asyncio.run(terminal.execute(sys.argv[1:]))
