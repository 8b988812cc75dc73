"""Rating API and notification delivery service.

Kept as a regular package so ``app`` resolves to this project rather than to
an unrelated namespace package installed in the environment.
"""
