"""Parsing of source text into syntax trees."""
