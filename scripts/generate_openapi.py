"""
Generate the storefront OpenAPI schema from the gateway app.

The gateway mounts the identity and store routers under /api, so its schema
is the complete public API and can be used to generate TypeScript types.

Usage:
    python -m scripts.generate_openapi > openapi.json
"""

import json

from services.gateway_service.app.main import app as gateway_app


def build_openapi_schema() -> dict:
    schema = gateway_app.openapi()
    schema["info"]["description"] = "Combined API schema for the storefront services."
    return schema


if __name__ == "__main__":
    print(json.dumps(build_openapi_schema(), indent=2))
