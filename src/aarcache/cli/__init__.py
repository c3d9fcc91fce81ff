"""Command-line interface for aarcache."""
