"""Membership portal: lifecycle rules, record store, ledger, messaging and API facade"""

__version__ = "0.1.0"
