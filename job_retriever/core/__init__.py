"""Configuration, lookup tables, HTML helpers and the gateway HTTP client."""
