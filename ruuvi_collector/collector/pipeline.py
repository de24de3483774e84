"""
Collector pipeline: from raw dump lines to stored measurements.

Each line passes the MAC filter, the HCI parser, the beacon handler and the
limiting strategy of its tag. Whatever survives is handed to the sink.
"""

import logging
from typing import Iterable, Optional

from ..beacon.fields import StorageValues, UnknownFieldError
from ..beacon.handler import BeaconHandler
from ..beacon.measurement import EnhancedRuuviMeasurement
from ..hci.parser import HCIDumpAssembler, HCIParser, get_mac_from_line
from ..storage.sink import LoggingSink, MeasurementSink
from ..strategy.limiting import Clock
from ..strategy.registry import StrategyRegistry
from ..utils.config import ConfigurationError
from ..utils.logging import PerformanceMonitor
from .filters import MacFilter


class CollectorPipeline:
    """
    Drives dump lines through decoding, limiting and storage.

    The pipeline owns no global state; the registry, the sink and the other
    collaborators are handed in by the caller.
    """

    def __init__(self,
                 registry: StrategyRegistry,
                 sink: MeasurementSink,
                 handler: Optional[BeaconHandler] = None,
                 parser: Optional[HCIParser] = None,
                 mac_filter: Optional[MacFilter] = None,
                 monitor: Optional[PerformanceMonitor] = None,
                 logger=None):
        """
        Initialize the pipeline.

        Args:
            registry: Per-tag limiting strategies
            sink: Receives accepted measurements
            handler: Beacon handler (defaults to a plain BeaconHandler)
            parser: HCI line parser
            mac_filter: MAC filter (defaults to accepting every MAC)
            monitor: Performance monitor collecting pipeline counters
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.registry = registry
        self.sink = sink
        self.handler = handler or BeaconHandler()
        self.parser = parser or HCIParser()
        self.mac_filter = mac_filter or MacFilter()
        self.monitor = monitor or PerformanceMonitor()

    def process_line(self, line: str) -> Optional[EnhancedRuuviMeasurement]:
        """
        Process one single-line HCI event.

        Args:
            line: Dump line starting with the event marker

        Returns:
            Optional[EnhancedRuuviMeasurement]: The measurement handed to the
            sink, or None if the line was rejected or discarded

        Raises:
            PersistenceError: If the sink fails to store the measurement
        """
        self.monitor.increment('lines_read')

        mac = get_mac_from_line(line)
        if mac is not None and not self.mac_filter.is_allowed(mac):
            self.monitor.increment('lines_filtered')
            return None

        with self.monitor.measure_time('decode'):
            frame = self.parser.read_line(line)
            if frame is None:
                return None
            self.monitor.increment('frames_decoded')

            measurement = self.handler.handle(frame)
            if measurement is None:
                return None
            self.monitor.increment('readings_built')

        accepted = self.registry.get(measurement.mac).apply(measurement)
        if accepted is None:
            self.monitor.increment('readings_discarded')
            return None
        self.monitor.increment('readings_accepted')

        with self.monitor.measure_time('save'):
            self.sink.save(accepted)
        return accepted

    def process_stream(self, lines: Iterable[str]) -> int:
        """
        Process raw ``hcidump --raw`` output, joining wrapped packets.

        Args:
            lines: Raw lines, e.g. an open file or stdin

        Returns:
            int: Number of measurements handed to the sink
        """
        assembler = HCIDumpAssembler()
        saved = 0

        for raw_line in lines:
            for packet in assembler.feed(raw_line):
                if self.process_line(packet) is not None:
                    saved += 1

        for packet in assembler.flush():
            if self.process_line(packet) is not None:
                saved += 1

        return saved

    def close(self):
        """Close the sink."""
        self.sink.close()

    @classmethod
    def from_config(cls,
                    config,
                    sink: Optional[MeasurementSink] = None,
                    clock: Optional[Clock] = None,
                    monitor: Optional[PerformanceMonitor] = None) -> 'CollectorPipeline':
        """
        Assemble a pipeline from a Config instance.

        Args:
            config: Configuration instance
            sink: Sink to use instead of the configured LoggingSink
            clock: Clock handed to the limiting strategies
            monitor: Performance monitor

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config.validate_configuration()

        registry = StrategyRegistry.from_config(config, clock=clock)
        tag_names = config.tag_names
        handler = BeaconHandler(name_lookup=tag_names.get, receiver=config.receiver)

        if sink is None:
            try:
                sink = LoggingSink(StorageValues(config.storage_values), config.storage_values_list)
            except UnknownFieldError as e:
                raise ConfigurationError(f"Unknown field in RUUVI_STORAGE_VALUES_LIST: {e}")

        return cls(
            registry=registry,
            sink=sink,
            handler=handler,
            mac_filter=MacFilter.from_config(config),
            monitor=monitor
        )
