"""CLI entry point for the Token Vesting Accounting Engine.

Usage:
    token-vesting init --config vesting.yaml --owner ops --fund 1000000
    token-vesting --as ops whitelist alice:5000 bob:2000:100 --delay alice --final
    token-vesting --as alice --at 1700000000 claim
    token-vesting --output json show alice
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from token_vesting import __version__
from token_vesting.core.config import VestingConfig, get_settings, parse_duration
from token_vesting.core.exceptions import ConfigurationError, InvalidParameterError, VestingError
from token_vesting.output.formatters import get_formatter
from token_vesting.providers.base import Clock
from token_vesting.providers.memory import InMemoryTokenLedger, ManualClock, SystemClock
from token_vesting.report import ReportBuilder
from token_vesting.storage.json_store import EngineStore
from token_vesting.vesting import VestingEngine

# Initialize app
app = typer.Typer(
    name="token-vesting",
    help="Token Vesting Accounting Engine",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


class Session:
    """Options shared by every command."""

    def __init__(self, state: Path, at: Optional[int], caller: Optional[str], output: str):
        self.store = EngineStore(state)
        self.clock: Clock = ManualClock(at) if at is not None else SystemClock()
        self.caller = caller
        self.output = output

    def require_caller(self) -> str:
        if not self.caller:
            console.print("[red]This command needs a caller identity (--as)[/]")
            raise typer.Exit(1)
        return self.caller

    def load(self) -> VestingEngine:
        state = self.store.load()
        if state is None:
            console.print(f"[red]No engine state at {self.store.path}. Run 'init' first.[/]")
            raise typer.Exit(1)
        return VestingEngine.from_state(state, self.clock)

    def save(self, engine: VestingEngine) -> None:
        self.store.save(engine.to_state())


def _session(ctx: typer.Context) -> Session:
    return ctx.obj


def _fail(error: VestingError) -> None:
    console.print(f"[red]Error: {escape(error.message)}[/]")
    raise typer.Exit(1)


def _parse_entry(entry: str) -> tuple[str, int, int]:
    """Parse IDENTITY:ALLOCATION[:INITIAL_FEE]."""
    parts = entry.split(":")
    if len(parts) not in (2, 3) or not parts[0]:
        raise InvalidParameterError("entry", entry, "expected IDENTITY:ALLOCATION[:INITIAL_FEE]")
    try:
        allocation = int(parts[1])
        initial_fee = int(parts[2]) if len(parts) == 3 else 0
    except ValueError:
        raise InvalidParameterError("entry", entry, "amounts must be integers")
    return parts[0], allocation, initial_fee


@app.callback()
def main_options(
    ctx: typer.Context,
    state: Optional[Path] = typer.Option(
        None,
        "--state",
        help="Engine state file (default: VESTING_STATE_FILE or vesting_state.json)",
    ),
    at: Optional[int] = typer.Option(
        None,
        "--at",
        help="Evaluate at this unix timestamp instead of the system time",
    ),
    caller: Optional[str] = typer.Option(
        None,
        "--as",
        help="Caller identity",
    ),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Token Vesting Accounting Engine."""
    setup_logging(verbose)
    ctx.obj = Session(state or get_settings().state_file, at, caller, output)


@app.command()
def init(
    ctx: typer.Context,
    owner: str = typer.Option(..., "--owner", help="Owner identity"),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Vesting schedule YAML (default: VESTING_CONFIG_FILE)",
    ),
    manager: Optional[str] = typer.Option(None, "--manager", help="Delegated manager identity"),
    fund: int = typer.Option(0, "--fund", help="Tokens deposited into the vesting vault"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file"),
) -> None:
    """Create a new engine state from a schedule config."""
    session = _session(ctx)
    if session.store.exists() and not force:
        console.print(f"[red]{session.store.path} already exists (use --force)[/]")
        raise typer.Exit(1)

    config_path = config or get_settings().config_file
    if config_path is None:
        console.print("[red]No schedule config given (--config or VESTING_CONFIG_FILE)[/]")
        raise typer.Exit(1)

    try:
        vesting_config = VestingConfig.from_yaml(config_path)
    except ConfigurationError as e:
        _fail(e)

    token_ledger = InMemoryTokenLedger()
    token_ledger.fund(fund)
    engine = VestingEngine(vesting_config, owner, token_ledger, session.clock, manager=manager)
    session.save(engine)
    console.print(f"[green]Initialized {session.store.path}[/]")


@app.command()
def fund(
    ctx: typer.Context,
    amount: int = typer.Argument(..., help="Tokens to deposit into the vesting vault"),
) -> None:
    """Deposit tokens into the vesting vault."""
    session = _session(ctx)
    engine = session.load()
    engine.token_ledger.fund(amount)
    session.save(engine)
    console.print(f"[green]Vault funded with {amount:,}[/]")


@app.command()
def whitelist(
    ctx: typer.Context,
    entries: List[str] = typer.Argument(..., help="IDENTITY:ALLOCATION[:INITIAL_FEE]"),
    delay: List[str] = typer.Option([], "--delay", "-d", help="Identities whose batch2 is delayed"),
    final: bool = typer.Option(False, "--final", help="Close whitelisting after this batch"),
) -> None:
    """Register a batch of beneficiaries."""
    session = _session(ctx)
    engine = session.load()
    try:
        parsed = [_parse_entry(e) for e in entries]
        accounts = engine.whitelist(
            session.require_caller(),
            [p[0] for p in parsed],
            [p[1] for p in parsed],
            [p[0] in delay for p in parsed],
            [p[2] for p in parsed],
            is_final_batch=final,
        )
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Whitelisted {len(accounts)} beneficiaries[/]")


@app.command()
def claim(
    ctx: typer.Context,
    beneficiary: Optional[str] = typer.Option(
        None,
        "--for",
        help="Relay the claim for another beneficiary",
    ),
) -> None:
    """Claim everything currently claimable without penalty."""
    session = _session(ctx)
    engine = session.load()
    caller = session.require_caller()
    try:
        if beneficiary:
            receipt = engine.claim_for(caller, beneficiary)
        else:
            receipt = engine.claim(caller)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]{receipt.beneficiary} claimed {receipt.amount:,}[/]")


@app.command("claim-extra")
def claim_extra(
    ctx: typer.Context,
    extra: int = typer.Argument(..., help="Amount claimed on top of the penalty-free part"),
) -> None:
    """Claim the penalty-free amount plus an early-release extra."""
    session = _session(ctx)
    engine = session.load()
    try:
        receipt = engine.claim_with_extra(session.require_caller(), extra)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(
        f"[green]{receipt.beneficiary} claimed {receipt.amount:,}[/] "
        f"(fee {receipt.fee:,}, burned {receipt.burned:,})"
    )


@app.command()
def eliminate(
    ctx: typer.Context,
    beneficiaries: List[str] = typer.Argument(..., help="Beneficiaries to eliminate"),
) -> None:
    """Eliminate beneficiaries, forfeiting their unvested remainder."""
    session = _session(ctx)
    engine = session.load()
    try:
        receipts = engine.eliminate(session.require_caller(), beneficiaries)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    for receipt in receipts:
        console.print(f"[yellow]{receipt.beneficiary} eliminated, forfeited {receipt.forfeited:,}[/]")


@app.command("collect-fees")
def collect_fees(
    ctx: typer.Context,
    beneficiaries: List[str] = typer.Argument(..., help="Beneficiaries to collect from"),
    max_amount: Optional[int] = typer.Option(None, "--max", help="Cap on the total collected"),
) -> None:
    """Collect matured fees to the active fee collector."""
    session = _session(ctx)
    engine = session.load()
    try:
        receipt = engine.collect_fees(session.require_caller(), beneficiaries, max_amount)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Collected {receipt.amount:,} to {receipt.collector}[/]")


@app.command("switch-collectors")
def switch_collectors(ctx: typer.Context) -> None:
    """Hand fee collection over to the standby collector."""
    session = _session(ctx)
    engine = session.load()
    try:
        active = engine.switch_fee_collectors(session.require_caller())
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Active fee collector: {active.identity}[/]")


@app.command("set-burn-rate")
def set_burn_rate(
    ctx: typer.Context,
    rate: int = typer.Argument(..., help="Burn rate in permille, 1-1000"),
) -> None:
    """Change the early-release burn rate."""
    session = _session(ctx)
    engine = session.load()
    try:
        engine.set_burn_rate(session.require_caller(), rate)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Burn rate set to {rate}[/]")


@app.command("set-locked-offset")
def set_locked_offset(
    ctx: typer.Context,
    offset: str = typer.Argument(..., help="Duration after start, e.g. 90d or seconds"),
) -> None:
    """Change when unvested tokens become early-claimable."""
    session = _session(ctx)
    engine = session.load()
    try:
        seconds = parse_duration(offset)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)
    try:
        engine.set_locked_claimable_tokens_offset(session.require_caller(), seconds)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Locked claimable offset set to {seconds}s[/]")


@app.command("set-manager")
def set_manager(
    ctx: typer.Context,
    manager: Optional[str] = typer.Argument(None, help="New manager; omit to revoke"),
) -> None:
    """Delegate the privileged manager role."""
    session = _session(ctx)
    engine = session.load()
    try:
        engine.set_manager(session.require_caller(), manager)
    except VestingError as e:
        _fail(e)
    session.save(engine)
    console.print(f"[green]Manager: {manager or 'none'}[/]")


@app.command()
def show(
    ctx: typer.Context,
    beneficiaries: Optional[List[str]] = typer.Argument(None, help="Beneficiaries (default: all)"),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Save output to file"),
) -> None:
    """Show per-beneficiary vesting reports."""
    session = _session(ctx)
    engine = session.load()
    builder = ReportBuilder(engine)
    if beneficiaries:
        reports = [builder.build(b) for b in beneficiaries]
    else:
        reports = builder.build_all()

    formatter = get_formatter(session.output)
    formatted = formatter.format_reports(reports)
    if session.output.lower() == "json":
        print(formatted)
    else:
        console.print(formatted)

    if save:
        save.parent.mkdir(parents=True, exist_ok=True)
        formatter.format_to_file(reports, str(save))
        console.print(f"[green]Saved to {save}[/]")


@app.command()
def status(ctx: typer.Context) -> None:
    """Show global totals and fee collector tallies."""
    session = _session(ctx)
    engine = session.load()
    formatter = get_formatter(session.output)
    formatted = formatter.format_status(engine.totals(), engine.collectors())
    if session.output.lower() == "json":
        print(formatted)
    else:
        console.print(formatted)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Token Vesting Engine v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
