"""
Settlement bounded context: domain layer.

This module contains all domain logic for the settlement context:
- Profit share calculation
- Client lifecycle (status and activation axes)
- Payment proof workflow
- Payment destination settings
"""
