"""
Artifact Inspector.

Turns a resolver artifact descriptor into an Artifact by reading what the
archive itself declares: SDK bounds from the AAR manifest and whether native
libraries are bundled.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path

from pydantic import BaseModel, Field

from ...core.exceptions import ArtifactIOError
from ...core.logging import get_logger
from ...models.graph import ResolvedArtifactDescriptor
from ...models.module import DEFAULT_MIN_SDK_VERSION, Artifact, ArtifactFileType

logger = get_logger(__name__)

ANDROID_NS = "http://schemas.android.com/apk/res/android"
MANIFEST_ENTRY = "AndroidManifest.xml"
NATIVE_CODE_PREFIX = "jni/"


class ArchiveFacts(BaseModel):
    """What an archive declares about itself."""

    min_sdk_version: int | None = Field(default=None)
    target_sdk_version: int | None = Field(default=None)
    has_native_code: bool = Field(default=False)


def _parse_sdk_version(value: str | None) -> int | None:
    """Parse a uses-sdk attribute; codenames and placeholders yield None."""
    if value is None:
        return None
    value = value.strip()
    return int(value) if value.isdigit() else None


def read_archive_facts(path: Path) -> ArchiveFacts:
    """Read SDK bounds and native-code presence from an AAR.

    Args:
        path: Path to the ``.aar`` file.

    Returns:
        ArchiveFacts: Values found in the archive; unset when not declared.

    Raises:
        ArtifactIOError: If the archive is missing or unreadable.
    """
    try:
        with zipfile.ZipFile(path, "r") as zf:
            names = [n.lstrip("/") for n in zf.namelist()]
            has_native_code = any(
                n.startswith(NATIVE_CODE_PREFIX) and not n.endswith("/") for n in names
            )
            manifest = zf.read(MANIFEST_ENTRY) if MANIFEST_ENTRY in names else None
    except (OSError, zipfile.BadZipFile) as e:
        raise ArtifactIOError(
            message="Cannot read artifact archive",
            path=str(path),
            operation="inspect",
            cause=e,
        ) from e

    facts = ArchiveFacts(has_native_code=has_native_code)
    if manifest is None:
        return facts

    try:
        root = ET.fromstring(manifest)
    except ET.ParseError as e:
        raise ArtifactIOError(
            message="Malformed AndroidManifest.xml",
            path=str(path),
            operation="inspect",
            cause=e,
        ) from e

    uses_sdk = root.find("uses-sdk")
    if uses_sdk is not None:
        facts.min_sdk_version = _parse_sdk_version(uses_sdk.get(f"{{{ANDROID_NS}}}minSdkVersion"))
        facts.target_sdk_version = _parse_sdk_version(
            uses_sdk.get(f"{{{ANDROID_NS}}}targetSdkVersion")
        )
    return facts


class ArtifactInspector:
    """Builds Artifact values for a single target SDK."""

    def __init__(self, target_sdk: int) -> None:
        self.target_sdk = target_sdk

    def inspect(self, descriptor: ResolvedArtifactDescriptor) -> Artifact:
        """Create the Artifact backing a module.

        Explicit descriptor values win over what the archive declares; plain
        archives use the default minimum SDK and the configured target SDK.

        Args:
            descriptor: Resolver-provided artifact descriptor.

        Returns:
            Artifact: The immutable artifact value.

        Raises:
            ArtifactIOError: If the file is missing or an AAR cannot be read.
        """
        path = descriptor.file
        if not path.is_file():
            raise ArtifactIOError(
                message="Artifact file not found",
                path=str(path),
                operation="inspect",
            )

        file_type = ArtifactFileType.from_path(path)
        facts = read_archive_facts(path) if file_type == ArtifactFileType.AAR else ArchiveFacts()

        min_sdk = descriptor.min_sdk_version or facts.min_sdk_version or DEFAULT_MIN_SDK_VERSION
        target_sdk = descriptor.target_sdk_version or facts.target_sdk_version or self.target_sdk
        has_native_code = (
            descriptor.has_native_code
            if descriptor.has_native_code is not None
            else facts.has_native_code
        )

        artifact = Artifact(
            file=path,
            file_type=file_type,
            min_sdk_version=min_sdk,
            target_sdk_version=target_sdk,
            has_native_code=has_native_code,
            license_text=descriptor.license_text,
        )
        logger.debug(
            "Inspected artifact",
            file=path.name,
            file_type=file_type.value,
            min_sdk=min_sdk,
            target_sdk=target_sdk,
            native=has_native_code,
        )
        return artifact
