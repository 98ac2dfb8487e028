"""
Dataset metadata.

Models for ``dataset-metadata.json`` (or the older ``datapackage.json``)
and the validation applied before a dataset is created.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import KaggleFileNotFoundError, MetadataError

DATASET_METADATA_FILE = 'dataset-metadata.json'
OLD_DATASET_METADATA_FILE = 'datapackage.json'
KERNEL_METADATA_FILE = 'kernel-metadata.json'

METADATA_FILES = frozenset({
    DATASET_METADATA_FILE,
    OLD_DATASET_METADATA_FILE,
    KERNEL_METADATA_FILE,
})

PLACEHOLDER_SLUG = 'INSERT_SLUG_HERE'
PLACEHOLDER_TITLE = 'INSERT_TITLE_HERE'


@dataclass
class Column:
    """A column descriptor from a resource schema."""
    name: str
    description: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name}
        if self.description is not None:
            result['description'] = self.description
        if self.type is not None:
            result['type'] = self.type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        return cls(
            name=data.get('name', ''),
            description=data.get('description'),
            type=data.get('type'),
        )


@dataclass
class Schema:
    """Schema of a tabular resource."""
    fields: List[Column] = field(default_factory=list)

    def processed_columns(self) -> List[Column]:
        """Flattened column list, dropping nameless entries."""
        return [column for column in self.fields if column.name]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Schema':
        return cls(fields=[Column.from_dict(f) for f in data.get('fields') or []])


@dataclass
class Resource:
    """
    A file declared in the metadata.

    Attributes:
        path: File name relative to the dataset folder
        description: Optional description
        schema: Optional column schema
    """
    path: str
    description: Optional[str] = None
    schema: Optional[Schema] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Resource':
        schema = data.get('schema')
        return cls(
            path=data.get('path', ''),
            description=data.get('description'),
            schema=Schema.from_dict(schema) if isinstance(schema, dict) else None,
        )


@dataclass
class Metadata:
    """Contents of a dataset metadata file."""
    title: str
    id: str
    licenses: List[str] = field(default_factory=list)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)

    @property
    def owner_slug(self) -> Optional[str]:
        owner, _, _ = self.id.partition('/')
        return owner or None

    @property
    def dataset_slug(self) -> Optional[str]:
        _, sep, slug = self.id.partition('/')
        return slug if sep and slug else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Metadata':
        licenses = []
        for item in data.get('licenses') or []:
            licenses.append(item.get('name', '') if isinstance(item, dict) else str(item))
        return cls(
            title=data.get('title', ''),
            id=data.get('id', ''),
            licenses=licenses,
            subtitle=data.get('subtitle'),
            description=data.get('description'),
            keywords=list(data.get('keywords') or []),
            resources=[Resource.from_dict(r) for r in data.get('resources') or []],
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Metadata':
        """Load metadata from a dataset folder or a metadata file path."""
        meta_file = find_metadata_file(path)
        try:
            data = json.loads(meta_file.read_text(encoding='utf-8'))
        except ValueError as e:
            raise MetadataError(f"Invalid JSON in {meta_file}: {e}") from e
        if not isinstance(data, dict):
            raise MetadataError(f"{meta_file} must contain a JSON object")
        return cls.from_dict(data)

    def require_slugs(self) -> Tuple[str, str]:
        """
        Owner and dataset slug from ``id``.

        Raises:
            MetadataError: If either part is missing
        """
        owner = self.owner_slug
        if not owner:
            raise MetadataError("Missing owner slug in id")
        slug = self.dataset_slug
        if not slug:
            raise MetadataError("Missing dataset slug in id")
        return owner, slug

    def validate(self, folder: Union[str, Path]) -> None:
        """
        Check the metadata before creating a dataset.

        Raises:
            MetadataError: On the first rule that does not hold
        """
        _, slug = self.require_slugs()
        if slug == PLACEHOLDER_SLUG:
            raise MetadataError("Default slug detected, please change values before uploading")
        if self.title == PLACEHOLDER_TITLE:
            raise MetadataError("Default title detected, please change values before uploading")
        if len(self.licenses) != 1:
            raise MetadataError("Please specify exactly one license")
        if not 6 <= len(slug) <= 50:
            raise MetadataError("The dataset slug must be between 6 and 50 characters")
        if not 6 <= len(self.title) <= 50:
            raise MetadataError("The dataset title must be between 6 and 50 characters")
        if self.subtitle is not None and not 20 <= len(self.subtitle) <= 80:
            raise MetadataError("Subtitle length must be between 20 and 80 characters")
        self.validate_resources(folder)

    def validate_resources(self, folder: Union[str, Path]) -> None:
        """Every declared resource must exist in ``folder``, once."""
        folder = Path(folder)
        seen = set()
        for resource in self.resources:
            if resource.path in seen:
                raise MetadataError(f"path {resource.path} was specified more than once")
            seen.add(resource.path)
            if not (folder / resource.path).exists():
                raise MetadataError(f"{resource.path} does not exist in {folder}")


def find_metadata_file(path: Union[str, Path]) -> Path:
    """Locate the metadata file for a dataset folder (or accept a file path)."""
    path = Path(path)
    if path.is_dir():
        meta_file = path / DATASET_METADATA_FILE
        if meta_file.exists():
            return meta_file
        old = path / OLD_DATASET_METADATA_FILE
        if old.exists():
            return old
        raise KaggleFileNotFoundError(meta_file)
    if path.exists():
        return path
    raise KaggleFileNotFoundError(path)


@dataclass
class DatasetNewRequest:
    """Payload of ``POST /datasets/create/new``."""
    title: str
    slug: str
    owner_slug: str
    license_name: str
    files: List[Any] = field(default_factory=list)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    is_private: bool = True
    convert_to_csv: bool = True
    category_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_metadata(
        cls,
        metadata: Metadata,
        files: List[Any],
        public: bool = False,
        convert_to_csv: bool = True
    ) -> 'DatasetNewRequest':
        owner_slug, slug = metadata.require_slugs()
        if not metadata.licenses:
            raise MetadataError("Please specify exactly one license")
        return cls(
            title=metadata.title,
            slug=slug,
            owner_slug=owner_slug,
            license_name=metadata.licenses[0],
            files=files,
            subtitle=metadata.subtitle,
            description=metadata.description,
            is_private=not public,
            convert_to_csv=convert_to_csv,
            category_ids=list(metadata.keywords),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'title': self.title,
            'slug': self.slug,
            'ownerSlug': self.owner_slug,
            'licenseName': self.license_name,
            'isPrivate': self.is_private,
            'convertToCsv': self.convert_to_csv,
            'categoryIds': self.category_ids,
            'files': [f.to_dict() for f in self.files],
        }
        if self.subtitle is not None:
            result['subtitle'] = self.subtitle
        if self.description is not None:
            result['description'] = self.description
        return result


@dataclass
class DatasetNewVersionRequest:
    """Payload of ``POST /datasets/create/version/...``."""
    version_notes: str
    files: List[Any] = field(default_factory=list)
    subtitle: Optional[str] = None
    description: Optional[str] = None
    convert_to_csv: bool = True
    delete_old_versions: bool = False
    category_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'versionNotes': self.version_notes,
            'convertToCsv': self.convert_to_csv,
            'deleteOldVersions': self.delete_old_versions,
            'categoryIds': self.category_ids,
            'files': [f.to_dict() for f in self.files],
        }
        if self.subtitle is not None:
            result['subtitle'] = self.subtitle
        if self.description is not None:
            result['description'] = self.description
        return result
