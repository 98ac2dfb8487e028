"""Tests for upload negotiation."""
import pytest

from kagglepy.core.exceptions import MissingTokenError
from kagglepy.core.upload import UploadNegotiator, UploadSessionInfo


class TestNegotiateUpload:
    """Test suite for dataset file negotiation."""

    @pytest.mark.asyncio
    async def test_sends_name_size_and_mtime(self, fake_kaggle, api_factory):
        fake_kaggle.route(
            'POST', '/datasets/upload/file/1024/1700000000',
            {'token': 'tok-1', 'createUrl': 'https://blob/put'}
        )
        negotiator = UploadNegotiator(api_factory(await fake_kaggle.start()))

        info = await negotiator.negotiate_upload('train.csv', 1024, 1700000000)

        assert info == UploadSessionInfo(
            token='tok-1',
            content_length=1024,
            last_modified=1700000000,
            create_url='https://blob/put',
        )
        request = fake_kaggle.requests[0]
        assert request.method == 'POST'
        assert request.form == {'fileName': 'train.csv'}

    @pytest.mark.asyncio
    async def test_without_create_url(self, fake_kaggle, api_factory):
        fake_kaggle.route('POST', '/datasets/upload/file/3/4', {'token': 'tok-2'})
        negotiator = UploadNegotiator(api_factory(await fake_kaggle.start()))

        info = await negotiator.negotiate_upload('a.csv', 3, 4)

        assert info.token == 'tok-2'
        assert info.create_url is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [{}, {'token': ''}, {'token': 7}])
    async def test_missing_token(self, fake_kaggle, api_factory, response):
        fake_kaggle.route('POST', '/datasets/upload/file/3/4', response)
        negotiator = UploadNegotiator(api_factory(await fake_kaggle.start()))

        with pytest.raises(MissingTokenError) as exc_info:
            await negotiator.negotiate_upload('a.csv', 3, 4)

        assert exc_info.value.payload == response


class TestNegotiateSubmission:
    """Test suite for submission URL negotiation."""

    @pytest.mark.asyncio
    async def test_returns_raw_response(self, fake_kaggle, api_factory):
        response = {'createUrl': 'https://signed', 'token': 'tok1'}
        fake_kaggle.route('POST', '/competitions/titanic/submissions/url/42/99', response)
        negotiator = UploadNegotiator(api_factory(await fake_kaggle.start()))

        result = await negotiator.negotiate_submission('titanic', 'submission.csv', 42, 99)

        assert result == response
        assert fake_kaggle.requests[0].form == {'fileName': 'submission.csv'}
