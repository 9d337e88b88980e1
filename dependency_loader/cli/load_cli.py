# Path: dependency_loader/cli/load_cli.py
"""
Load CLI Interface

Command-line interface that loads every dependency declared in the
manifest, with all of their transitive dependencies.

Architecture:
- argparse options layered over ConfigLoader (.env + environment)
- ManifestLoader supplies declared roots and extra repositories
- DependencyLoader resolves every root concurrently
- rich summary table, non-zero exit when a declared root is missing

Usage:
    dependency-loader --manifest dependencies.json --root Dependencies
    python -m dependency_loader.download --debug
"""

import argparse
import json
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from dependency_loader.core.config_loader import ConfigLoader
from dependency_loader.core.context import LoaderContext
from dependency_loader.core.logger import get_logger, configure_logging
from dependency_loader.core.manifest_loader import ManifestLoader, ManifestError
from dependency_loader.engine.coordinator import DependencyLoader
from dependency_loader.engine.result import ResolutionReport, ResolutionState
from dependency_loader.constants import LOADER_VERSION, LOG_INPUT, LOG_OUTPUT

logger = get_logger(__name__, 'cli')

console = Console()

STATE_STYLES = {
    ResolutionState.ALL_CHILDREN_DONE: 'green',
    ResolutionState.EXPANDING: 'yellow',
    ResolutionState.FETCHED: 'yellow',
    ResolutionState.FAILED: 'red',
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dependency-loader',
        description="Dependency Loader - fetch declared Maven dependencies and everything they depend on",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load everything declared in ./dependencies.json
  dependency-loader

  # Custom manifest and storage root, extra repository
  dependency-loader --manifest deps.json --root libs --repository https://jitpack.io

  # Verbose tree trace, no checksum verification
  dependency-loader --debug --no-file-check

  # Also write the resolution report as JSON
  dependency-loader --json report.json
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Dependency Loader {LOADER_VERSION}'
    )
    parser.add_argument(
        '-m', '--manifest',
        type=Path,
        help='Path to the JSON manifest (default: dependencies.json)'
    )
    parser.add_argument(
        '-r', '--root',
        type=Path,
        help='Directory receiving downloaded dependencies (default: Dependencies)'
    )
    parser.add_argument(
        '--repository',
        action='append',
        default=[],
        metavar='URL',
        help='Additional fallback repository (repeatable)'
    )
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        help='Show verbose resolution trace'
    )
    parser.add_argument(
        '--no-file-check',
        action='store_true',
        help='Skip SHA-1 verification of downloaded binaries'
    )
    parser.add_argument(
        '--json',
        type=Path,
        metavar='PATH',
        help='Write the resolution report to PATH as JSON'
    )
    parser.add_argument(
        '--env-file',
        type=Path,
        help='Path to a .env file (default: ./.env)'
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ConfigLoader:
    """Layer command-line options over the .env and environment configuration."""
    overrides = {}

    if args.root:
        overrides['dependency_root'] = args.root
    if args.manifest:
        overrides['manifest_path'] = args.manifest
    if args.debug:
        overrides['show_debug'] = True
    if args.no_file_check:
        overrides['enforce_file_check'] = False

    config = ConfigLoader(env_file=args.env_file, overrides=overrides)

    if args.repository:
        config['repositories'].extend(args.repository)

    return config


class LoadCLI:
    """
    Loads the manifest's dependencies and reports the outcome.

    Example:
        cli = LoadCLI(ConfigLoader())
        exit_code = await cli.run()
    """

    def __init__(self, config: ConfigLoader, report_path: Optional[Path] = None):
        self.config = config
        self.report_path = report_path
        self.context = LoaderContext.from_config(config)
        self.loader = DependencyLoader(self.context)

    async def run(self) -> int:
        """
        Run one loading session.

        Returns:
            Process exit code (0 when every declared dependency was loaded)
        """
        manifest_path = Path(self.config.get('manifest_path'))
        logger.info(f"{LOG_INPUT} Starting Dependency Loader with manifest {manifest_path}")

        try:
            manifest = ManifestLoader(manifest_path).load()
            self.context.repositories.add(manifest.repositories)

            if not manifest.dependencies:
                console.print(f"\n[yellow]No dependencies declared in {manifest_path}[/yellow]")
                return 0

            if not self.loader.working:
                console.print("\n[red bold]Classpath unavailable, nothing was loaded[/red bold]")
                return 1

            results = await self.loader.load_declared(manifest.dependencies)
            self._display_reports(self.loader.reports())
            if self.report_path:
                self._write_report(results, self.loader.reports())
            return self._display_summary(results)

        except ManifestError as e:
            console.print(f"\n[red bold]Manifest error:[/red bold] {e}")
            logger.error(f"Manifest error: {e}")
            return 1

        finally:
            await self.loader.close()

    def _display_reports(self, reports: list[ResolutionReport]):
        """Show one row per resolved coordinate."""
        table = Table(title="Resolved Dependencies", show_header=True)
        table.add_column("Name", style="cyan")
        table.add_column("Coordinate", style="white")
        table.add_column("Status")
        table.add_column("Depth", justify="right", style="dim")
        table.add_column("Source", style="dim")

        for report in reports:
            style = STATE_STYLES.get(report.state, 'white')
            source = 'cache' if report.fetch and report.fetch.cached else 'remote' if report.fetch else '-'
            table.add_row(
                report.name,
                report.gav,
                f"[{style}]{report.state.value}[/{style}]",
                str(report.depth),
                source
            )

        console.print(table)

    def _write_report(self, results: dict[str, bool], reports: list[ResolutionReport]):
        """Write declared outcomes and every resolution record as JSON."""
        document = {
            'version': LOADER_VERSION,
            'declared': results,
            'resolutions': [report.to_dict() for report in reports],
        }

        self.report_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.report_path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2)

        console.print(f"Report written to [cyan]{self.report_path}[/cyan]")
        logger.info(f"{LOG_OUTPUT} Resolution report written to {self.report_path}")

    def _display_summary(self, results: dict[str, bool]) -> int:
        """Show declared roots that did not load; return the exit code."""
        loaded = sum(1 for ok in results.values() if ok)
        missing = [name for name, ok in results.items() if not ok]

        summary = Table(title="Load Summary", show_header=True)
        summary.add_column("Metric", style="bold")
        summary.add_column("Count", justify="right")
        summary.add_row("Declared", str(len(results)))
        summary.add_row("Loaded", f"[green]{loaded}[/green]")
        summary.add_row("Missing", f"[red]{len(missing)}[/red]")
        summary.add_row("Registered (incl. transitive)", str(len(self.context.registry)))
        console.print(summary)

        if missing:
            console.print(f"[red]Not loaded:[/red] {', '.join(sorted(missing))}")

        classpath = self.context.classpath.classpath_file
        if classpath:
            console.print(f"Classpath written to [cyan]{classpath}[/cyan]")

        logger.info(f"{LOG_OUTPUT} Loaded {loaded}/{len(results)} declared dependencies")
        return 1 if missing else 0


async def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    config = config_from_args(args)
    configure_logging(config)

    cli = LoadCLI(config, report_path=args.json)
    return await cli.run()


__all__ = ['LoadCLI', 'build_parser', 'config_from_args', 'main']
