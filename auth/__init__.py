"""auth/ -- Credential file: record codec, password hashing, stores.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from sessions/.
"""
