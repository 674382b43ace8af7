"""Workflow for locating and opening a project's user secrets store."""
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from ..domains import manifest, store
from ..domains.models import SecretsLocation

logger = logging.getLogger(__name__)

Opener = Callable[[Path], object]


def resolve_user_secrets(manifest_path: Union[str, Path]) -> SecretsLocation:
    """
    Look up the secrets store for a manifest without writing anything.

    Args:
        manifest_path: Path to the project manifest

    Returns:
        SecretsLocation for the manifest's existing UserSecretsId

    Raises:
        OSError: If the manifest cannot be read
        xml.etree.ElementTree.ParseError: If the manifest is malformed
        ManifestError: If the manifest has no UserSecretsId
    """
    manifest_path = Path(manifest_path)
    content = manifest.read_manifest(manifest_path)

    user_secrets_id = manifest.extract_user_secrets_id(content)
    if not user_secrets_id:
        raise manifest.ManifestError(f"No UserSecretsId found in {manifest_path.name}")

    return SecretsLocation(
        manifest_path=manifest_path,
        user_secrets_id=user_secrets_id,
        secrets_path=store.get_secrets_path(user_secrets_id),
    )


def open_user_secrets(
    manifest_path: Union[str, Path],
    opener: Optional[Opener] = None,
    notify: Callable[[str], object] = print,
) -> SecretsLocation:
    """
    Find or create a manifest's UserSecretsId and open its secrets.json.

    Args:
        manifest_path: Path to the project manifest
        opener: Called with the secrets.json path to open it (skipped if None)
        notify: Receives user-facing notices

    Returns:
        SecretsLocation describing what was resolved and created

    Behavior:
        - Uses the first non-empty UserSecretsId in the manifest
        - Otherwise generates one from the file name and writes it back
        - Creates secrets.json (and its directories) if missing
        - Never overwrites an existing secrets.json
    """
    manifest_path = Path(manifest_path)
    content = manifest.read_manifest(manifest_path)

    user_secrets_id = manifest.extract_user_secrets_id(content)
    id_created = False

    if not user_secrets_id:
        user_secrets_id = manifest.generate_user_secrets_id(manifest_path)
        updated = manifest.add_user_secrets_id(content, user_secrets_id)
        manifest.write_manifest(manifest_path, updated, expected=content)
        id_created = True
        notify(f"Created new UserSecretsId: {user_secrets_id}")
    else:
        logger.info(f"Found UserSecretsId '{user_secrets_id}' in {manifest_path.name}")

    secrets_path = store.get_secrets_path(user_secrets_id)
    store_created = store.ensure_secrets_file(secrets_path)

    if opener is not None:
        opener(secrets_path)

    notify(f"Opened user secrets for: {manifest_path.name}")

    return SecretsLocation(
        manifest_path=manifest_path,
        user_secrets_id=user_secrets_id,
        secrets_path=secrets_path,
        id_created=id_created,
        store_created=store_created,
    )
