"""JSON API exposing price feed lookups to oracle consumers."""
