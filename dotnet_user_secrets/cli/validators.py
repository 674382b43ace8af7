"""Input validation for CLI arguments."""
import sys
from pathlib import Path

MANIFEST_SUFFIXES = (".csproj", ".fsproj", ".vbproj")


def validate_manifest_path(path: str) -> Path:
    """
    Validate the manifest argument points at an existing file.

    Args:
        path: Manifest path from the command line

    Returns:
        Manifest path

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not path:
        print("Error: Manifest path cannot be empty", file=sys.stderr)
        sys.exit(2)

    manifest_path = Path(path).expanduser()

    if not manifest_path.exists():
        print(f"Error: Manifest file does not exist: {manifest_path}", file=sys.stderr)
        sys.exit(2)

    if not manifest_path.is_file():
        print(f"Error: Path is not a file: {manifest_path}", file=sys.stderr)
        print("\nPass the project file itself, e.g. src/MyApp/MyApp.csproj", file=sys.stderr)
        sys.exit(2)

    # Other suffixes are allowed; only warn
    if manifest_path.suffix.lower() not in MANIFEST_SUFFIXES:
        print(
            f"Warning: {manifest_path.name} is not a {', '.join(MANIFEST_SUFFIXES)} file",
            file=sys.stderr
        )

    return manifest_path
