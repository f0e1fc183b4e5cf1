"""Core data contracts package.

Architectural role:
    Holds the request/result schema and the error taxonomy shared by the
    transport, validation, image and API layers.

Composition:
    - `types`: `GenerationRequest` / `GenerationResult` and default constants.
    - `errors`: tagged error kinds and classification predicates.

Determinism and side effects:
    Importing this package is side-effect free.
"""
