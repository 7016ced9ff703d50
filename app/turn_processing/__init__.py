"""Turn/action processing helpers.

This package centralizes move validation so both human participants and the
computer opponent flow through the same pipeline and show up consistently in
server logs.
"""
