"""HTTP API for ControlGap."""
