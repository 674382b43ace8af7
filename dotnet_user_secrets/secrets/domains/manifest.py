"""Project manifest (csproj) handling for UserSecretsId lookup and insertion."""
import os
import re
import shutil
import logging
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

ROOT_TAG = "Project"
GROUP_TAG = "PropertyGroup"
ID_TAG = "UserSecretsId"

# Declaration written on rewrite; no encoding/standalone attributes
XML_DECLARATION = '<?xml version="1.0"?>'
INDENT = "  "

_NON_WORD = re.compile(r"\W+", re.ASCII)

# Markup allowed before the root element
_PROLOG_ITEM = re.compile(
    r"\s*(<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^\[>]*(?:\[.*?\])?\s*>)", re.DOTALL
)
_DECLARATION = re.compile(r"<\?xml\s")

PathLike = Union[str, os.PathLike]


class ManifestError(Exception):
    """Manifest structure error exception."""
    pass


class ManifestConflictError(ManifestError):
    """Manifest changed on disk between read and write."""
    pass


def _local_name(tag) -> Optional[str]:
    """Return tag name without its {namespace} prefix (None for comments/PIs)."""
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


def _namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _qualified(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}" if namespace else name


def _children(element: ET.Element, name: str) -> list:
    return [child for child in element if _local_name(child.tag) == name]


def _field_text(field: ET.Element) -> str:
    """
    Unwrap a field value into plain text.

    A field may carry its value directly (<UserSecretsId>abc</UserSecretsId>)
    or wrapped in nested markup; both forms are read through this helper.
    """
    return "".join(field.itertext()).strip()


def read_manifest(path: PathLike) -> str:
    """
    Read manifest content as text.

    Raises:
        OSError: If the file cannot be read
    """
    return Path(path).read_text(encoding="utf-8-sig")


def parse_manifest(content: str) -> ET.Element:
    """
    Parse manifest markup, keeping comments and processing instructions.

    Raises:
        xml.etree.ElementTree.ParseError: On malformed markup
    """
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
    return ET.fromstring(content, parser=parser)


def extract_user_secrets_id(content: str) -> Optional[str]:
    """
    Find the authoritative UserSecretsId in manifest content.

    Args:
        content: Manifest markup

    Returns:
        First non-empty UserSecretsId in document order, or None if absent

    Raises:
        xml.etree.ElementTree.ParseError: On malformed markup
    """
    root = parse_manifest(content)
    if _local_name(root.tag) != ROOT_TAG:
        logger.debug(f"Manifest root is <{_local_name(root.tag)}>, not <{ROOT_TAG}>")
        return None

    for group in _children(root, GROUP_TAG):
        fields = _children(group, ID_TAG)
        if not fields:
            continue
        value = _field_text(fields[0])
        if value:
            return value

    return None


def generate_user_secrets_id(manifest_path: PathLike) -> str:
    """
    Derive a UserSecretsId from the manifest file name.

    The stem is lowercased and every run of non-word characters becomes a
    single dash, e.g. "My.Web_App!.csproj" -> "my-web_app-".
    """
    stem = Path(manifest_path).stem
    return _NON_WORD.sub("-", stem.lower())


def add_user_secrets_id(content: str, user_secrets_id: str) -> str:
    """
    Insert a UserSecretsId into a manifest.

    The first existing UserSecretsId field in any PropertyGroup is filled in
    and any other empty ones are dropped. Without such a field, one is added
    to the first PropertyGroup, which is created when the manifest has none.
    Comments and processing instructions around <Project> are kept.

    Args:
        content: Manifest markup
        user_secrets_id: Identifier to insert

    Returns:
        Re-serialized manifest markup

    Raises:
        xml.etree.ElementTree.ParseError: On malformed markup
        ManifestError: If the manifest has no <Project> root
    """
    root = parse_manifest(content)
    if _local_name(root.tag) != ROOT_TAG:
        raise ManifestError("Invalid manifest: no root element found")

    namespace = _namespace(root.tag)

    groups = _children(root, GROUP_TAG)
    existing = [(group, field) for group in groups for field in _children(group, ID_TAG)]

    if existing:
        _, field = existing[0]
        for child in list(field):
            field.remove(child)
        for group, extra in existing[1:]:
            if not _field_text(extra):
                group.remove(extra)
    else:
        if groups:
            group = groups[0]
        else:
            group = ET.Element(_qualified(namespace, GROUP_TAG))
            root.insert(0, group)
            logger.info(f"Created <{GROUP_TAG}> for {ID_TAG}")
        field = ET.SubElement(group, _qualified(namespace, ID_TAG))
    field.text = user_secrets_id

    prolog, epilog = _misc_around_root(content)
    return serialize_manifest(root, prolog, epilog)


def _misc_around_root(content: str) -> Tuple[List[str], List[str]]:
    """
    Collect comments, PIs and doctype outside the root element.

    The XML declaration itself is not included. Content must already parse.
    """
    prolog = []
    pos = 0
    while True:
        match = _PROLOG_ITEM.match(content, pos)
        if not match:
            break
        item = match.group(1)
        if not _DECLARATION.match(item):
            prolog.append(item)
        pos = match.end()

    epilog = []
    tail = content.rstrip()
    while True:
        if tail.endswith("-->"):
            start = tail.rfind("<!--")
        elif tail.endswith("?>"):
            start = tail.rfind("<?")
        else:
            break
        if start < pos:
            break
        epilog.insert(0, tail[start:])
        tail = tail[:start].rstrip()

    return prolog, epilog


def serialize_manifest(
    root: ET.Element,
    prolog: Sequence[str] = (),
    epilog: Sequence[str] = (),
) -> str:
    """
    Serialize a manifest tree with 2-space indentation and a trailing newline.

    Args:
        root: Manifest root element
        prolog: Markup items written between the declaration and the root
        epilog: Markup items written after the root
    """
    ET.indent(root, space=INDENT)
    namespace = _namespace(root.tag)
    body = ET.tostring(root, encoding="unicode", default_namespace=namespace or None)
    lines = [XML_DECLARATION, *prolog, body, *epilog]
    return "\n".join(lines) + "\n"


def write_manifest(path: PathLike, content: str, expected: str) -> None:
    """
    Atomically replace a manifest file.

    The new content goes to a temporary file next to the manifest, which is
    renamed over it only if the manifest still holds the text it was read
    with.

    Args:
        path: Manifest path
        content: New manifest markup
        expected: Manifest text the update was computed from

    Raises:
        ManifestConflictError: If the manifest changed since it was read
        OSError: If the file cannot be written
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        shutil.copymode(path, tmp_path)

        if read_manifest(path) != expected:
            raise ManifestConflictError(
                f"Manifest {path.name} was modified by another process; not overwriting"
            )

        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.info(f"Wrote {ID_TAG} to {path}")
