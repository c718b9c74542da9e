"""
Identity interface: sign-up, sign-in, sign-out and the current caller.
"""
