import json
from pathlib import Path
from typing import Any, Dict, Optional

from decrowdfund.shared.exceptions import ConfigurationException


class ResourceManager:
    """Manages access to bundled contract artifacts (ABI + deployments)"""

    def __init__(self):
        self._package_root = Path(__file__).resolve().parent.parent.parent
        self._resources_root = (self._package_root / "resources").resolve(
            strict=False
        )
        self._cache: Dict[str, Any] = {}

    def get_resource_path(self, resource_type: str, filename: str) -> Path:
        """Get full path to a resource file"""
        resource_dir = self._get_resource_dir(resource_type)
        resource_path = (resource_dir / filename).resolve(strict=False)

        try:
            resource_path.relative_to(resource_dir)
        except ValueError:
            raise ValueError(
                f"Invalid resource path outside {resource_dir}: {filename}"
            )

        return resource_path

    def load_artifact(
        self, name: str, path: Optional[Path] = None
    ) -> Dict[str, Any]:
        """Load a Truffle-style artifact with ``abi`` and ``networks`` keys.

        ``path`` points at an artifact outside the package (a fresh
        ``truffle migrate`` output); otherwise the bundled one is used.
        """
        artifact_path = (
            Path(path) if path else self.get_resource_path("abi", f"{name}.json")
        )
        cache_key = f"artifact:{artifact_path}"
        if cache_key not in self._cache:
            if not artifact_path.exists():
                raise ConfigurationException(
                    f"Contract artifact not found: {artifact_path}"
                )
            with open(artifact_path) as f:
                artifact = json.load(f)
            if "abi" not in artifact:
                raise ConfigurationException(
                    f"Contract artifact has no ABI: {artifact_path}"
                )
            artifact.setdefault("networks", {})
            self._cache[cache_key] = artifact
        return self._cache[cache_key]

    def _get_resource_dir(self, resource_type: str) -> Path:
        resource_dir = (self._resources_root / resource_type).resolve(
            strict=False
        )
        try:
            resource_dir.relative_to(self._resources_root)
        except ValueError:
            raise ValueError(f"Invalid resource type: {resource_type}")

        return resource_dir


# Global instance
resource_manager = ResourceManager()
