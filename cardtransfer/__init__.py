"""
Card-to-card transfer service: two-step login, card dashboard and
balance-conserving transfers between a user's own cards.
"""

__version__ = "1.0.0"
