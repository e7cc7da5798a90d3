"""Command-line interface for fedcompose."""

import rich_click as click

from .. import __version__
from .check import check_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="fedcompose")
@click.version_option(version=__version__, prog_name="fedcompose")
def main() -> None:
    """🧩 **fedcompose** - Enum consistency checks for federated schemas.

    Verifies that every enum shared between subgraphs declares the same
    values everywhere, and that no type is an enum in one subgraph but
    something else in another.
    """
    pass


# Add commands to the group
main.add_command(check_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]
