"""Write the companion service's OpenAPI schema to ``openapi.json``."""

from pathlib import Path
import json
import sys

from fitbuddy.main import app


def generate_openapi(server_url: str = "http://localhost:8000") -> Path:
    """Dump the schema with ``server_url`` as its only server entry."""
    schema = app.openapi()
    schema["servers"] = [{"url": server_url}]
    output_path = Path(__file__).resolve().parent / "openapi.json"
    output_path.write_text(json.dumps(schema, indent=2))
    return output_path


if __name__ == "__main__":
    generate_openapi(*sys.argv[1:2])
