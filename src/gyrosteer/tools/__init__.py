"""Developer tooling (debug instrumentation)."""
