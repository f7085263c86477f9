"""Fixed diagnostic catalogue shared with the API gateway.

Downstream consumers key off these numeric codes, so both the codes and their
messages must stay byte-for-byte stable. The second half of the module holds
the parser-message literals the validators look for in the conformance
checker's output, and the fixed texts they emit themselves.
"""

INVALID_OAS2_FOUND_ERROR_CODE = 900761
"""The Swagger 2 version marker is missing or the definition is not valid OAS2."""

INVALID_OAS2_FOUND_ERROR_MESSAGE = "Invalid OpenAPI V2 definition found"

INVALID_OAS3_FOUND_ERROR_CODE = 900762
"""The OpenAPI 3 version marker is missing or the definition is not valid OAS3."""

INVALID_OAS3_FOUND_ERROR_MESSAGE = "Invalid OpenAPI V3 definition found"

OPENAPI_PARSE_EXCEPTION_ERROR_CODE = 900754
"""Generic parse failure for either specification."""

OPENAPI_PARSE_EXCEPTION_ERROR_MESSAGE = "Error while parsing OpenAPI definition"

ERROR_MESSAGES: dict[int, str] = {
    INVALID_OAS2_FOUND_ERROR_CODE: INVALID_OAS2_FOUND_ERROR_MESSAGE,
    INVALID_OAS3_FOUND_ERROR_CODE: INVALID_OAS3_FOUND_ERROR_MESSAGE,
    OPENAPI_PARSE_EXCEPTION_ERROR_CODE: OPENAPI_PARSE_EXCEPTION_ERROR_MESSAGE,
}

# --- Parser message literals ---

SWAGGER_IS_MISSING_MSG = "swagger is missing"
OPENAPI_IS_MISSING_MSG = "openapi is missing"
SWAGGER_OR_OPENAPI_IS_MISSING_MSG = "attribute swagger or openapi should present"
MALFORMED_SWAGGER_ERROR = "malformed or unreadable swagger supplied"
UNABLE_TO_LOAD_REMOTE_REFERENCE = "Unable to load RELATIVE ref:"
SCHEMA_IS_UNEXPECTED_MSG = "schema is unexpected"
IS_MISSING_MSG = "is missing"

UNABLE_TO_RENDER_THE_DEFINITION_ERROR = (
    "Unable to render this definition, "
    "The provided definition does not specify a valid version field."
)

SCHEMA_UNEXPECTED_HINT = (
    ". Please verify whether the schema object is adhering to the OpenAPI "
    "Specification. Make sure that the reference object is of format "
    "$ref: '#/components/schemas/{schemaName}'"
)

# --- Reference prefixes ---

LOCAL_REFERENCE_PREFIX = "#/"
SCHEMA_REF_PATH = "#/components/schemas/"
DEFINITIONS_REF_PATH = "#/definitions/"
REFERENCE_KEY = "$ref"
