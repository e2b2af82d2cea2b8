"""
Main CLI for jira-org-markup
"""

import click
import logging
import sys
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import Config, is_log_level
from .converter import convert_jira_to_org_document, convert_org_to_jira
from .headings import HEADING_OVERFLOW_POLICIES, validate_heading_overflow

# Converted text goes to stdout, everything else to stderr
console = Console(stderr=True)

CONFIG_KEYS = ('org.base_heading_level', 'org.heading_overflow', 'log_level')


def setup_logging(level: str = "INFO"):
    """Setup logging with rich handler"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)]
    )


def print_heading_table(document):
    """Print the heading annotations of a conversion"""
    table = Table(title="Headings")
    table.add_column("Line", justify="right")
    table.add_column("Offset", justify="right")
    table.add_column("Level", justify="right")
    table.add_column("Text")
    for heading in document.headings:
        table.add_row(str(heading.line + 1), str(heading.offset), f"h{heading.level}", heading.text)
    console.print(table)


@click.group()
@click.option('--config', '-c', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """jira-org-markup: Convert between JIRA markup and Org markup"""
    ctx.ensure_object(dict)

    # Setup logging
    log_level = "DEBUG" if verbose else "INFO"
    setup_logging(log_level)

    # Load configuration
    try:
        ctx.obj['config'] = Config(config)
        if verbose:
            console.print(f"[dim]{ctx.obj['config'].config_path_info}[/dim]")
        else:
            logging.getLogger().setLevel(ctx.obj['config'].log_level.upper())
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)


@cli.command("to-org")
@click.argument('input_file', type=click.File('r'), default='-')
@click.option('--output', '-o', type=click.File('w'), default='-', help='Output file (default: stdout)')
@click.option('--base-level', type=click.IntRange(min=0), help='Outline depth headings are rendered under (overrides config)')
@click.option('--raw', is_flag=True, help='Leave heading lines as bare text')
@click.option('--show-headings', is_flag=True, help='Print heading levels to stderr')
@click.pass_context
def to_org(ctx, input_file, output, base_level, raw, show_headings):
    """Converts JIRA markup to Org markup.

    Reads INPUT_FILE, or standard input when omitted.
    """
    config = ctx.obj['config']
    try:
        text = input_file.read()
        if not text.strip():
            console.print("[yellow]Nothing to convert[/yellow]")
            return

        document = convert_jira_to_org_document(text)
        if raw:
            result = document.text
        else:
            level = base_level if base_level is not None else config.base_heading_level
            result = document.render(level)

        output.write(result)
        if show_headings:
            print_heading_table(document)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command("to-jira")
@click.argument('input_file', type=click.File('r'), default='-')
@click.option('--output', '-o', type=click.File('w'), default='-', help='Output file (default: stdout)')
@click.option('--heading-overflow', type=click.Choice(HEADING_OVERFLOW_POLICIES),
              help='Handling of headings deeper than h6 (overrides config)')
@click.pass_context
def to_jira(ctx, input_file, output, heading_overflow):
    """Converts Org markup to JIRA markup.

    Reads INPUT_FILE, or standard input when omitted.
    """
    config = ctx.obj['config']
    try:
        text = input_file.read()
        if not text.strip():
            console.print("[yellow]Nothing to convert[/yellow]")
            return

        policy = heading_overflow or config.heading_overflow
        output.write(convert_org_to_jira(text, heading_overflow=policy))
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@cli.group('config')
@click.pass_context
def config_cmd(ctx):
    """Configure jira-org-markup settings"""
    pass


@config_cmd.command('show')
@click.pass_context
def config_show(ctx):
    """Show current configuration"""
    config = ctx.obj['config']

    console.print("[bold blue]Current jira-org-markup Configuration[/bold blue]")

    console.print("\n[bold]Configuration Source[/bold]")
    console.print(config.config_path_info)

    console.print("\n[bold]Org[/bold]")
    console.print(f"Base Heading Level: {config.base_heading_level}")
    console.print(f"Heading Overflow: {config.heading_overflow}")

    console.print("\n[bold]Logging[/bold]")
    console.print(f"Log Level: {config.log_level}")


@config_cmd.command('set')
@click.argument('key', type=click.Choice(CONFIG_KEYS))
@click.argument('value')
@click.pass_context
def config_set(ctx, key, value):
    """Set a configuration value"""
    config = ctx.obj['config']
    try:
        parsed = yaml.safe_load(value)
        if key == 'org.base_heading_level':
            if not isinstance(parsed, int) or parsed < 0:
                raise ValueError(f"Base heading level must be a non-negative integer: {value}")
        elif key == 'org.heading_overflow':
            validate_heading_overflow(parsed)
        else:
            parsed = str(parsed).upper()
            if not is_log_level(parsed):
                raise ValueError(f"Unknown log level: {value}")

        config.set(key, parsed)
        config.save()
        console.print(f"[green]✓[/green] {key} = {parsed}")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == '__main__':
    cli()
