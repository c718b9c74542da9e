"""
Assistant bounded context: domain layer.

Support chat messages and the contract of the completion endpoint.
"""
