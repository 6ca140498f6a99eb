"""Defines the command-line interface for the sepaqr application.

This module uses the `click` library to build the `sepaqr` command. It builds
payment payloads from command-line options, payment files and configured
defaults, prints the payload text for a QR encoder, and reports field by
field why a payload was rejected.
"""
import json
import sys
import io
import click
import logging
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.exceptions import PayloadValidationError
from .core.payload import Charset, PaymentPayload
from .core.validator import validate_payload

# Configure rich console for beautiful output.
console = Console(emoji=True)

# Set up basic logging.
logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A custom click Group that supports command aliases and case-insensitivity."""

    def __init__(self, *args, **kwargs):
        """Initializes the aliased group."""
        super().__init__(*args, **kwargs)
        self._aliases: Dict[str, str] = {}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        """Gets a command by name, checking for aliases and prefixes.

        Args:
            ctx: The click context.
            cmd_name: The command name entered by the user.

        Returns:
            The matched click command, or None.
        """
        cmd_name = cmd_name.lower()
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv
        if cmd_name in self._aliases:
            return super().get_command(ctx, self._aliases[cmd_name])
        matches = [x for x in self.list_commands(ctx) if x.startswith(cmd_name)]
        if not matches:
            return None
        if len(matches) == 1:
            return super().get_command(ctx, matches[0])
        ctx.fail(f"Ambiguous command: '{cmd_name}'. Matches: {', '.join(sorted(matches))}")
        return None

    def add_alias(self, alias: str, command_name: str) -> None:
        """Adds an alias for a command.

        Args:
            alias: The alias to add.
            command_name: The name of the command to alias.
        """
        self._aliases[alias.lower()] = command_name.lower()


def payment_options(func):
    """Adds the payment field options shared by `text` and `check`."""
    options = [
        click.option("--name", "beneficiary_name", help="Name of the beneficiary (max. 70 characters)."),
        click.option("--iban", "beneficiary_account_number", help="Account number of the beneficiary (max. 34 characters)."),
        click.option("--bic", "beneficiary_bic", help="BIC of the beneficiary's bank (max. 11 characters)."),
        click.option("--amount", "amount_euro", type=float, help="Amount in euro."),
        click.option("--purpose", help="Purpose code (max. 4 characters)."),
        click.option("--reference", "creditor_reference", help="Structured creditor reference (max. 35 characters)."),
        click.option("--remittance", "remittance_information", help="Unstructured remittance information (max. 140 characters)."),
        click.option("--information", help="Beneficiary to originator information (max. 70 characters)."),
        click.option("--format-version", "version", type=click.Choice(["001", "002"]), help="Payload format version."),
        click.option("--charset", type=int, help="Charset code, 1 (UTF-8) to 8. See 'sepaqr charsets'."),
        click.option("--file", "payment_file", type=click.Path(exists=True, dir_okay=False), help="TOML or JSON file with payment fields."),
        click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _read_payment_file(path: str) -> Dict[str, Any]:
    """Reads payment fields from a TOML or JSON file.

    A top-level `payment` table is used when present.

    Args:
        path: The path to the payment file.

    Returns:
        The payment fields keyed by attribute name or alias.

    Raises:
        click.ClickException: If the file cannot be parsed.
    """
    file_path = Path(path)
    try:
        if file_path.suffix.lower() == ".json":
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            with open(file_path, "rb") as f:
                data = tomllib.load(f)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not read payment file {path}: {e}")

    payment = data.get("payment", data) if isinstance(data, dict) else None
    if not isinstance(payment, dict):
        raise click.ClickException(f"Payment file {path} must contain a table of payment fields.")
    return payment


def _build_payload(config_obj: Config, payment_file: Optional[str], fields: Dict[str, Any]) -> PaymentPayload:
    """Builds a payload from config defaults, a payment file and CLI options.

    Later sources win: command-line options override the payment file, which
    overrides the configured defaults.
    """
    options = config_obj.payment_defaults()
    if payment_file:
        options.update(_read_payment_file(payment_file))
    overrides = {key: value for key, value in fields.items() if value is not None}
    logger.debug(f"Building payload from {len(options)} option(s) and {len(overrides)} override(s).")
    return PaymentPayload(options, **overrides)


def _rejection_reason(payload: PaymentPayload) -> str:
    """Returns a short explanation of why a payload cannot be serialized."""
    try:
        if payload.valid():
            return ""
    except PayloadValidationError as e:
        return str(e)

    # valid() returned False, so one of the boolean-channel checks failed.
    header_valid = (
        payload.valid_service_tag()
        and payload.valid_version()
        and payload.valid_charset()
        and payload.valid_identification_code()
    )
    if not header_valid:
        return "A header field (service tag, version, charset or identification code) is not valid."
    if not payload.valid_amount_euro():
        return "Amount not valid! Text amounts must be empty."
    return f"Payload is too long ({payload.payload_byte_length()} bytes, at most 328)."


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pysepaqr")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Build and check EPC/SEPA credit-transfer QR payloads.

    sepaqr validates the fields of a SEPA credit transfer against the EPC
    quick response code guideline and prints the payload text that any QR
    code encoder turns into a scannable "GiroCode".
    """
    # Basic setup for logging and UTF-8 output.
    if sys.platform == "win32" and isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(encoding='utf-8')
    verbose = verbose or bool(Config().get("verbose", False))
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'sepaqr text --name <name> --iban <iban>' to build a payload, or 'sepaqr --help' for more commands.")


@main.command(name="text")
@payment_options
@click.option("--bytes", "as_bytes", is_flag=True, help="Write the payload encoded in its declared charset.")
def text(payment_file: Optional[str], config_path: Optional[str], as_bytes: bool, **fields: Any) -> None:
    """Print the payload text for a QR code encoder.

    The text is written to standard output without decoration so that it can
    be piped into an encoder. If the payload is invalid, nothing is written
    and the command exits with status 1.
    """
    config_obj = Config(config_path=config_path)
    payload = _build_payload(config_obj, payment_file, fields)

    if as_bytes:
        try:
            data = payload.to_bytes()
        except UnicodeEncodeError as e:
            console.print(f"[red]Payload cannot be encoded in charset {payload.charset}: {escape(str(e))}[/red]")
            sys.exit(1)
        if data:
            click.get_binary_stream("stdout").write(data)
            return
    else:
        payload_text = payload.to_text()
        if payload_text:
            click.echo(payload_text)
            return

    console.print(f"[red]Invalid payload: {escape(_rejection_reason(payload))}[/red]")
    sys.exit(1)


@main.command()
@payment_options
@click.option("--json", "json_output", is_flag=True, help="Output the report in JSON format.")
def check(payment_file: Optional[str], config_path: Optional[str], json_output: bool, **fields: Any) -> None:
    """Check every field of a payload and report the results.

    Each validator runs even if an earlier one failed, so the report lists
    all problems at once. The command exits with status 1 if any check
    failed.
    """
    config_obj = Config(config_path=config_path)
    console.no_color = not config_obj.get("colors", True)
    payload = _build_payload(config_obj, payment_file, fields)
    report = validate_payload(payload, config_obj)

    if json_output:
        click.echo(json.dumps(report, indent=2, ensure_ascii=False, default=str))
    else:
        _display_report(report)

    if not report["valid"]:
        sys.exit(1)


def _display_report(report: Dict[str, Any]) -> None:
    """Displays a validation report as a series of formatted tables.

    Args:
        report: The result dictionary of `validate_payload`.
    """
    summary_table = Table(title="Payload Checks")
    summary_table.add_column("Validator", style="cyan")
    summary_table.add_column("Field")
    summary_table.add_column("Status")
    for res in report["validator_results"]:
        status = "[green]Passed[/green]" if res["passed"] else "[red]Failed[/red]"
        summary_table.add_row(res["name"], res["field"], status)
    console.print(summary_table)

    if report["errors"]:
        issues_table = Table(title="Issues")
        issues_table.add_column("Level", style="bold")
        issues_table.add_column("Message")
        for error in report["errors"]:
            issues_table.add_row("[red]ERROR[/red]", escape(error))
        console.print(issues_table)
        console.print(Panel(f"Found {len(report['errors'])} error(s).", style="red", title="Check Complete"))
    else:
        console.print(Panel(escape(report["text"]), title=f"Payload ({report['byte_length']} bytes)", expand=False))


@main.command()
def charsets() -> None:
    """List the charset codes a payload may declare."""
    table = Table(title="Charsets")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Codec", style="magenta")
    for charset in Charset:
        table.add_row(str(charset.value), charset.name, charset.codec)
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the sepaqr configuration.

    This command allows you to view, set, and reset configuration values
    that are stored in the user-level configuration file, such as the
    default beneficiary under the `payment` table.

    \b
    ACTION:
        get <key>       Get a configuration value.
        set <key> <value> Set a configuration value.
        list            List all current configuration values.
        reset           Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(escape(json.dumps(config_obj.config, indent=2, ensure_ascii=False)), title="Current Configuration"))
    elif action == "get":
        if not key:
            console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(config_obj.get(key))
    elif action == "set":
        if not key or value is None:
            console.print("[red]Error: 'set' action requires a key and a value.[/red]")
            sys.exit(1)
        try:
            processed_value = config_obj.set_user_value(key, value)
            console.print(f"[green]'{escape(key)}' set to '{escape(str(processed_value))}' and saved to user config.[/green]")
        except ValueError as e:
            console.print(f"[red]Invalid value for '{escape(key)}': {escape(str(e))}[/red]")
            sys.exit(1)
        except IOError as e:
            console.print(f"[red]Error saving configuration: {escape(str(e))}[/red]")
            sys.exit(1)
    elif action == "reset":
        if config_obj.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


main.add_alias('t', 'text')
main.add_alias('c', 'check')

if __name__ == "__main__":
    main()
