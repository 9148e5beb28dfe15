"""Document loader for YAML and JSON screen documents."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from screenflow.core.errors import DocumentError
from screenflow.document.models import ModuleDocument
from screenflow.document.validators import DocumentValidator

logger = logging.getLogger(__name__)

_DOCUMENT_SUFFIXES = (".yaml", ".yml", ".json")


class DocumentLoader:
    """Load and validate ModuleDocument instances.

    A document is rejected here, before any session activates, if it is
    missing required fields, uses an unknown action type or rule
    operator, or breaks a structural invariant.
    """

    @staticmethod
    def load(path: Path | str) -> ModuleDocument:
        """Load a document from a file or directory.

        Args:
            path: A ``.yaml``/``.yml``/``.json`` file, or a directory holding
                ``module.yaml`` or a set of screen files merged in name order.

        Returns:
            Validated ModuleDocument.

        Raises:
            DocumentError: If the file is missing, unparseable or invalid.
        """
        doc_path = Path(path)

        if doc_path.is_dir():
            data = DocumentLoader._load_directory(doc_path)
        else:
            if not doc_path.exists():
                raise DocumentError("Document file not found", path=str(doc_path))
            data = DocumentLoader._read(doc_path)

        logger.info(f"Loaded document from {doc_path}")
        return DocumentLoader.load_data(data)

    @staticmethod
    def load_data(data: Any) -> ModuleDocument:
        """Validate already-parsed document data.

        A bare list is treated as the screen list of an anonymous module.
        """
        if data is None:
            data = {}
        if isinstance(data, list):
            data = {"screens": data}
        if not isinstance(data, dict):
            raise DocumentError(
                f"Document root must be a mapping or a list, got {type(data).__name__}"
            )

        try:
            document = ModuleDocument.model_validate(data)
        except ValidationError as e:
            raise DocumentError(f"Invalid document: {e}") from e

        DocumentValidator(document).validate()
        return document

    @staticmethod
    def _read(path: Path) -> Any:
        # JSON is a subset of YAML, so one parser covers both formats
        try:
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DocumentError(f"Could not parse document: {e}", path=str(path)) from e

    @staticmethod
    def _load_directory(directory: Path) -> dict[str, Any]:
        for name in ("module.yaml", "module.yml", "module.json"):
            master = directory / name
            if master.exists():
                data = DocumentLoader._read(master)
                if not isinstance(data, dict):
                    raise DocumentError("Module file must be a mapping", path=str(master))
                return data

        files = sorted(p for p in directory.iterdir() if p.suffix in _DOCUMENT_SUFFIXES)
        if not files:
            raise DocumentError("No document files found", path=str(directory))

        data: dict[str, Any] = {"screens": []}
        for fpath in files:
            chunk = DocumentLoader._read(fpath) or {}

            # A file is either one screen, a list of screens, or a module fragment
            if isinstance(chunk, list):
                data["screens"].extend(chunk)
            elif isinstance(chunk, dict) and "sections" in chunk:
                data["screens"].append(chunk)
            elif isinstance(chunk, dict):
                data["screens"].extend(chunk.get("screens", []))
                for key, value in chunk.items():
                    if key != "screens":
                        data[key] = value
            else:
                raise DocumentError("Unsupported document fragment", path=str(fpath))
        return data
