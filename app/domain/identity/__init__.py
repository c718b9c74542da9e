"""
Identity bounded context: domain layer.

Who the caller is and whether they are an operator.
"""
