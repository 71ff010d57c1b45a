"""Lint engine: rules, registry, walker, aggregator and formatters."""
