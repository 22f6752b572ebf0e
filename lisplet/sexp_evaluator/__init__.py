"""Evaluation of syntax trees, scope environments and host primitives."""
