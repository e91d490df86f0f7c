"""
Accounts app

Custom user model, signup and the session-scoped AI credential.
"""
