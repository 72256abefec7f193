import os
from functools import lru_cache
from google.cloud import secretmanager


@lru_cache(maxsize=1)
def _get_client() -> secretmanager.SecretManagerServiceClient:
    return secretmanager.SecretManagerServiceClient()


def get_project_id() -> str:
    project_id = os.getenv("GCP_PROJECT_ID")
    if not project_id:
        raise RuntimeError("GCP_PROJECT_ID is not set")
    return project_id


def parse_secret_reference(secret_name: str, version: str = "latest") -> tuple:
    """Split a Cloud Run reference "Secret:secret-name:version" into (name, version)."""
    if secret_name.startswith("Secret:"):
        parts = secret_name.split(":")
        if len(parts) >= 2:
            secret_name = parts[1]
        if len(parts) >= 3 and parts[2]:
            version = parts[2]
    return secret_name, version


@lru_cache(maxsize=64)
def get_secret_value(secret_name: str, version: str = "latest") -> str:
    if not secret_name:
        raise ValueError("secret_name is required")

    secret_name, version = parse_secret_reference(secret_name, version)
    name = f"projects/{get_project_id()}/secrets/{secret_name}/versions/{version}"
    response = _get_client().access_secret_version(name=name)
    return response.payload.data.decode("utf-8")
