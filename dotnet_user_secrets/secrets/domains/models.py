"""Domain models for user secrets management."""
from dataclasses import dataclass
from pathlib import Path


@dataclass
class SecretsLocation:
    """Resolved user secrets store for a project manifest."""
    manifest_path: Path
    user_secrets_id: str
    secrets_path: Path
    id_created: bool = False  # UserSecretsId was generated and written to the manifest
    store_created: bool = False
