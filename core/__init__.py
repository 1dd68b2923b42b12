"""core/ -- Kernel for credfile: settings and error kinds.

Layer rule: core/ has no reverse dependencies. It does NOT import from
auth/ or sessions/.
"""
