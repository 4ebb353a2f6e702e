"""flowbridge - transcode static HTML + CSS into the @webflow/XscpData graph."""

__version__ = "0.1.0"
