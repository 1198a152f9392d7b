"""Define Auth Tools — the OAuth bootstrap tool.

Invariants:
    - get_auth_url is read-only and never needs an authenticated client:
      it is how a user obtains credentials in the first place
"""

from gtasks_mcp.core.domain_types import OperationDescriptor

GET_AUTH_URL = "get_auth_url"

TOOLS_AUTH: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name=GET_AUTH_URL,
        description="Get OAuth2 authorization URL for Google Tasks authentication",
        input_schema={
            "type": "object",
            "properties": {},
        },
        mutating=False,
    ),
)
