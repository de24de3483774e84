"""
Ruuvi Collector - RuuviTag measurement collection from raw HCI dumps.

Reads ``hcidump --raw`` output, decodes RuuviTag advertisements and hands a
rate limited stream of measurements to a sink.

Features:
- HCI event decoding, including packets wrapped over several lines
- Ruuvi data format 3 and 5 decoding with derived values
- Per-tag time gated or motion sensitive limiting
- MAC filtering and tag naming
- Configuration management with environment variables
"""

__version__ = "1.0.0"
__author__ = "Ruuvi Collector Team"
__description__ = "RuuviTag measurement collector for hcidump output"

# Package imports for convenience
from .utils.config import Config, ConfigurationError
from .utils.logging import ProductionLogger, PerformanceMonitor
from .hci import HCIParser, HCIFrame
from .beacon import BeaconHandler, EnhancedRuuviMeasurement, RuuviPayloadDecoder
from .strategy import StrategyRegistry, StrategySettings
from .collector import CollectorPipeline, MacFilter
from .storage import LoggingSink, PersistenceError, RecordingSink

__all__ = [
    "Config",
    "ConfigurationError",
    "ProductionLogger",
    "PerformanceMonitor",
    "HCIParser",
    "HCIFrame",
    "BeaconHandler",
    "EnhancedRuuviMeasurement",
    "RuuviPayloadDecoder",
    "StrategyRegistry",
    "StrategySettings",
    "CollectorPipeline",
    "MacFilter",
    "LoggingSink",
    "PersistenceError",
    "RecordingSink"
]
