"""specgate -- Check Swagger 2 / OpenAPI 3 definitions against API gateway acceptance rules.

This package classifies an API definition as Swagger 2, OpenAPI 3 or neither,
validates it on the matching path through an external conformance checker,
and turns the checker's free-text messages into the gateway's fixed
diagnostic codes plus run-level counters.

Typical workflow::

    specgate location:./definitions 2    # validate a directory, all diagnostics
    specgate "$(cat petstore.yaml)" 1    # validate literal text, gateway-compatible

Modules:
    app: Typer application and CLI entry point.
    batch: Literal / ``location:`` input handling and directory traversal.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    error_codes: The fixed diagnostic catalogue.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    report: Rendering of document reports and the run summary.
"""

__version__ = "0.1.0"
