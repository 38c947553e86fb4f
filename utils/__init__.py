"""Security helpers, random secrets and route guards."""
