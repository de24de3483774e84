"""
Command line interface for the Ruuvi Collector.
Provides the collect, decode and config commands using click and rich.
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..beacon.fields import FIELD_ACCESSORS
from ..beacon.handler import BeaconHandler
from ..collector.pipeline import CollectorPipeline
from ..hci.parser import HCIParser
from ..storage.sink import PersistenceError
from ..utils.config import Config, ConfigurationError
from ..utils.logging import PerformanceMonitor, setup_logging


class CLIError(Exception):
    """Base exception for CLI operations."""
    pass


class CollectorCLI:
    """
    CLI application wrapping the collector pipeline.

    Features:
    - Collect measurements from a dump file or stdin
    - Decode a single dump line for inspection
    - Configuration summary
    """

    def __init__(self, console: Optional[Console] = None):
        """Initialize CLI application."""
        self.console = console or Console()
        self.config: Optional[Config] = None
        self.performance_monitor: Optional[PerformanceMonitor] = None

    def _initialize_components(self, log_level: Optional[str] = None):
        """Load configuration and set up logging."""
        try:
            self.config = Config()
            self.config.validate_configuration()
            setup_logging(self.config, log_level)
            self.performance_monitor = PerformanceMonitor()
        except ConfigurationError as e:
            self.console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
            raise CLIError(f"Configuration error: {e}")

    def _print_header(self):
        """Print application header."""
        header = Panel.fit(
            "[bold blue]Ruuvi Collector[/bold blue]\n"
            "[dim]RuuviTag measurements from hcidump output[/dim]",
            border_style="blue"
        )
        self.console.print(header)

    def collect(self, stream, log_level: Optional[str] = None) -> int:
        """
        Run the pipeline over a stream of dump lines.

        Returns:
            int: Number of measurements handed to the sink
        """
        self._initialize_components(log_level)
        try:
            pipeline = CollectorPipeline.from_config(self.config, monitor=self.performance_monitor)
        except ConfigurationError as e:
            self.console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
            raise CLIError(f"Configuration error: {e}")

        try:
            saved = pipeline.process_stream(stream)
        except PersistenceError as e:
            self.console.print(f"[red]Storage Error: {escape(str(e))}[/red]")
            raise CLIError(f"Storage error: {e}")
        finally:
            pipeline.close()

        self.performance_monitor.log_summary()
        self._print_statistics(pipeline)
        return saved

    def _print_statistics(self, pipeline: CollectorPipeline):
        """Print pipeline counters."""
        table = Table(title="Collection Statistics", show_header=True, header_style="bold green")
        table.add_column("Counter", style="cyan")
        table.add_column("Value", style="green", justify="right")

        for name in ('lines_read', 'lines_filtered', 'frames_decoded', 'readings_built',
                     'readings_accepted', 'readings_discarded'):
            table.add_row(name, str(self.performance_monitor.count(name)))
        table.add_row("tags_seen", str(len(pipeline.registry)))

        self.console.print(table)

    def decode_line(self, line: str) -> bool:
        """
        Decode one dump line and print the frame and measurement.

        Returns:
            bool: True if the line held a valid HCI event
        """
        frame = HCIParser().read_line(line)
        if frame is None:
            self.console.print("[red]Not a valid HCI event line[/red]")
            return False

        frame_table = Table(title="HCI Frame", show_header=True, header_style="bold blue")
        frame_table.add_column("Field", style="cyan")
        frame_table.add_column("Value", style="green")
        for name in ('packet_type', 'event_code', 'packet_length', 'sub_event',
                     'number_of_reports', 'event_type', 'peer_address_type', 'mac', 'rssi'):
            frame_table.add_row(name, str(getattr(frame, name)))
        for index, report in enumerate(frame.reports):
            for advertisement in report.advertisements:
                frame_table.add_row(
                    f"report[{index}] AD 0x{advertisement.type:02X}",
                    advertisement.data.hex().upper()
                )
        self.console.print(frame_table)

        measurement = BeaconHandler().handle(frame)
        if measurement is None:
            self.console.print("[yellow]No Ruuvi measurement in this frame[/yellow]")
            return True

        measurement_table = Table(title="Ruuvi Measurement", show_header=True, header_style="bold green")
        measurement_table.add_column("Field", style="cyan")
        measurement_table.add_column("Value", style="green")
        for name, accessor in FIELD_ACCESSORS.items():
            value = accessor(measurement)
            if value is not None:
                measurement_table.add_row(name, str(value))
        self.console.print(measurement_table)
        return True

    def show_config(self):
        """Print the configuration summary."""
        try:
            config = Config()
            summary = config.get_summary()
        except ConfigurationError as e:
            self.console.print(f"[red]Configuration Error: {escape(str(e))}[/red]")
            raise CLIError(f"Configuration error: {e}")

        table = Table(title="Configuration", show_header=True, header_style="bold blue")
        table.add_column("Section", style="cyan")
        table.add_column("Setting", style="white")
        table.add_column("Value", style="green")
        for section, values in summary.items():
            for key, value in values.items():
                table.add_row(section, key, str(value))
        self.console.print(table)

        try:
            config.validate_configuration()
            self.console.print("[green]Configuration is valid[/green]")
        except ConfigurationError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            raise CLIError(str(e))


# Click commands for CLI entry points
@click.group()
@click.version_option(version=__version__, prog_name="ruuvi-collector")
def cli():
    """Ruuvi Collector - RuuviTag measurements from hcidump output."""
    pass


@cli.command()
@click.option("--input", "-i", "input_file", type=click.File("r"), default="-",
              help="hcidump --raw output to read (defaults to stdin)")
@click.option("--log-level", "-l", default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
              help="Override LOG_LEVEL")
def collect(input_file, log_level):
    """Collect measurements from hcidump output."""
    app = CollectorCLI()
    try:
        app.collect(input_file, log_level)
    except CLIError:
        sys.exit(1)
    except KeyboardInterrupt:
        app.console.print("\n[yellow]Collection interrupted[/yellow]")


@cli.command()
@click.argument("line")
def decode(line):
    """Decode a single hcidump line."""
    app = CollectorCLI()
    if not app.decode_line(line):
        sys.exit(1)


@cli.command()
def config():
    """Show configuration summary."""
    app = CollectorCLI()
    app._print_header()
    try:
        app.show_config()
    except CLIError:
        sys.exit(1)


if __name__ == "__main__":
    cli()
