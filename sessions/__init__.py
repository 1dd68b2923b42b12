"""sessions/ -- In-memory session token pool.

Layer rule: sessions/ imports only stdlib + core/. It does NOT import from
auth/; the credential store and the session pool are independent.
"""
