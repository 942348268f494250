"""
Utilities for the account service: configuration, logging and SDK clients
"""
