"""HTTP transport package.

Architectural role:
    Sends JSON requests and turns raw responses into parsed documents or
    transport-level failures. Domain classification happens in `drawthings.image`.
"""
