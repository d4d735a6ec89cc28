"""
celstats: weekly rewards extract aggregation.

Layers (import DAG, lower never imports higher):
- celstats.core: constants, errors, symbols, pydantic schemas, decimal/serde helpers (zero-IO)
- celstats.engine: decode → reduce → finalize → report over one owned AggregationState
- celstats.io: settings, extract reading, atomic report writing, weekly dataset driver
- celstats.cli: `celstats process` / `celstats show-report`
"""

__version__ = "0.1.0"
