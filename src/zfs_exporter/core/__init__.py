"""Translation core: schema, registry, histograms and the collector."""
