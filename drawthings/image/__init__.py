"""Image generation package.

Scope:
    Provides the txt2img request pipeline (`client`) and decoding/persistence of
    returned images (`storage`).

Non-goals:
    - No retries, streaming or progress reporting.
    - No image post-processing; bytes are written exactly as decoded.
"""
