"""Tests for dataset metadata."""
import json

import pytest

from kagglepy.core.exceptions import KaggleFileNotFoundError, MetadataError
from kagglepy.core.metadata import (
    DatasetNewRequest,
    DatasetNewVersionRequest,
    Metadata,
    find_metadata_file,
)
from kagglepy.core.upload import DatasetUploadFile


def write_metadata(folder, name='dataset-metadata.json', **overrides):
    data = {
        'title': 'Titanic passengers',
        'id': 'someone/titanic-passengers',
        'licenses': [{'name': 'CC0-1.0'}],
        'resources': [],
    }
    data.update(overrides)
    (folder / name).write_text(json.dumps(data))
    return data


class TestLoad:
    """Test suite for loading metadata files."""

    def test_load_from_folder(self, tmp_path):
        write_metadata(
            tmp_path,
            keywords=['tabular'],
            resources=[{
                'path': 'train.csv',
                'description': 'Training split',
                'schema': {'fields': [{'name': 'id', 'type': 'integer'}]},
            }],
        )

        metadata = Metadata.load(tmp_path)

        assert metadata.owner_slug == 'someone'
        assert metadata.dataset_slug == 'titanic-passengers'
        assert metadata.licenses == ['CC0-1.0']
        assert metadata.keywords == ['tabular']
        resource = metadata.resources[0]
        assert resource.description == 'Training split'
        assert resource.schema.processed_columns()[0].to_dict() == {'name': 'id', 'type': 'integer'}

    def test_falls_back_to_datapackage(self, tmp_path):
        write_metadata(tmp_path, name='datapackage.json')

        assert find_metadata_file(tmp_path) == tmp_path / 'datapackage.json'

    def test_missing_file(self, tmp_path):
        with pytest.raises(KaggleFileNotFoundError):
            Metadata.load(tmp_path)

    def test_invalid_json(self, tmp_path):
        (tmp_path / 'dataset-metadata.json').write_text('{nope')

        with pytest.raises(MetadataError, match="Invalid JSON"):
            Metadata.load(tmp_path)


class TestValidate:
    """Test suite for metadata validation."""

    def test_valid(self, tmp_path):
        (tmp_path / 'train.csv').write_text('id\n1\n')
        write_metadata(tmp_path, resources=[{'path': 'train.csv'}])

        Metadata.load(tmp_path).validate(tmp_path)

    @pytest.mark.parametrize("overrides,message", [
        ({'id': 'someone/INSERT_SLUG_HERE'}, "Default slug"),
        ({'title': 'INSERT_TITLE_HERE'}, "Default title"),
        ({'id': 'someone'}, "dataset slug"),
        ({'id': '/titanic-passengers'}, "owner slug"),
        ({'licenses': []}, "exactly one license"),
        ({'licenses': [{'name': 'a'}, {'name': 'b'}]}, "exactly one license"),
        ({'id': 'someone/abc'}, "slug must be between"),
        ({'title': 'Short'}, "title must be between"),
        ({'subtitle': 'too short'}, "Subtitle length"),
        ({'resources': [{'path': 'missing.csv'}]}, "does not exist"),
    ])
    def test_invalid(self, tmp_path, overrides, message):
        write_metadata(tmp_path, **overrides)

        with pytest.raises(MetadataError, match=message):
            Metadata.load(tmp_path).validate(tmp_path)

    def test_duplicate_resource(self, tmp_path):
        (tmp_path / 'train.csv').write_text('1')
        write_metadata(tmp_path, resources=[{'path': 'train.csv'}, {'path': 'train.csv'}])

        with pytest.raises(MetadataError, match="more than once"):
            Metadata.load(tmp_path).validate_resources(tmp_path)


class TestRequests:
    """Test suite for dataset creation payloads."""

    def test_new_request(self, tmp_path):
        write_metadata(tmp_path, subtitle='Who survived the Titanic', keywords=['ships'])
        metadata = Metadata.load(tmp_path)

        request = DatasetNewRequest.from_metadata(
            metadata, [DatasetUploadFile(token='tok')], public=True
        )

        assert request.to_dict() == {
            'title': 'Titanic passengers',
            'slug': 'titanic-passengers',
            'ownerSlug': 'someone',
            'licenseName': 'CC0-1.0',
            'isPrivate': False,
            'convertToCsv': True,
            'categoryIds': ['ships'],
            'files': [{'token': 'tok'}],
            'subtitle': 'Who survived the Titanic',
        }

    @pytest.mark.parametrize("dataset_id, message", [
        ('', "owner slug"),
        ('/titanic-passengers', "owner slug"),
        ('someone', "dataset slug"),
        ('someone/', "dataset slug"),
    ])
    def test_new_request_requires_slugs(self, tmp_path, dataset_id, message):
        write_metadata(tmp_path, id=dataset_id)

        with pytest.raises(MetadataError, match=message):
            DatasetNewRequest.from_metadata(Metadata.load(tmp_path), [])

    def test_new_request_requires_license(self, tmp_path):
        write_metadata(tmp_path, licenses=[])

        with pytest.raises(MetadataError, match="license"):
            DatasetNewRequest.from_metadata(Metadata.load(tmp_path), [])

    def test_version_request(self):
        request = DatasetNewVersionRequest(
            version_notes='v2',
            files=[DatasetUploadFile(token='tok', description='d')],
            delete_old_versions=True,
        )

        assert request.to_dict() == {
            'versionNotes': 'v2',
            'convertToCsv': True,
            'deleteOldVersions': True,
            'categoryIds': [],
            'files': [{'token': 'tok', 'description': 'd'}],
        }
