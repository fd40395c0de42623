#!/usr/bin/env python3
"""Example click application exposed as MCP tools.

This example shows:
1. A click group with subcommands and typed options
2. Adding the ``mcp`` subcommand with mcp_command()
3. Each tool call re-running this script with the matching subcommand

Try it:
    python app.py hello --name Ada
    python app.py add --first 2 --second 3

Add to Claude Code:
    claude mcp add example -- python /path/to/app.py mcp

Tools exposed: example_hello, example_add. Booleans are passed as
``--shout true``, so they are declared as ``type=bool`` options rather than
on/off flags.
"""

import click

from click_mcp import mcp_command


@click.group(name="example", help="example")
def app() -> None:
    pass


@app.command(short_help="say hello")
@click.option("--name", default="World", help="the name to say hello to")
@click.option("--shout", type=bool, default=False, help="print in upper case")
def hello(name: str, shout: bool) -> None:
    greeting = f"Hello, {name}"
    click.echo(greeting.upper() if shout else greeting)


@app.command(short_help="Calculate the sum of two numbers")
@click.option("--first", type=int, default=0, help="the first number to add")
@click.option("--second", type=int, default=0, help="the second number to add")
def add(first: int, second: int) -> None:
    click.echo(f"{first} + {second} = {first + second}")


app.add_command(mcp_command(app))


if __name__ == "__main__":
    app()
