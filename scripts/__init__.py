"""Operator scripts for the LP kernel (``python3 scripts/lp_cli.py --help``)."""
