"""Provider catalog and connectivity probes."""
