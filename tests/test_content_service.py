"""
Tests for the Gemini content service.
"""

import pytest
from unittest.mock import patch, MagicMock

from ideapress.exceptions import ContentGenerationError
from ideapress.services.content_service import GeminiContentService


@pytest.fixture
def sample_idea():
    """Fixture providing sample idea fields for testing."""
    return {
        'title': 'Structured Concurrency in Python',
        'description': 'How TaskGroup changes error handling for asyncio code.',
        'tags': ['python', 'asyncio'],
    }


@pytest.fixture
def mock_gemini_client():
    """Fixture providing a mocked Gemini client."""
    with patch('google.genai.Client') as mock_client:
        mock_client.return_value.models = MagicMock()
        mock_client.return_value.models.generate_content = MagicMock()
        yield mock_client


@pytest.fixture
def content_service(mock_gemini_client):
    """Fixture providing a GeminiContentService with a mocked client."""
    return GeminiContentService(
        google_api_key="test_google_key",
        model="gemini-pro",
        client=mock_gemini_client.return_value
    )


class TestGeminiContentService:
    """Tests for GeminiContentService."""

    def test_generate_article(self, content_service, mock_gemini_client, sample_idea):
        """The generated text is returned stripped."""
        mock_response = MagicMock()
        mock_response.text = "\n# Structured Concurrency\n\nBody text.\n"
        mock_gemini_client.return_value.models.generate_content.return_value = mock_response

        article = content_service.generate_article(**sample_idea)

        assert article == "# Structured Concurrency\n\nBody text."
        kwargs = mock_gemini_client.return_value.models.generate_content.call_args.kwargs
        assert kwargs['model'] == "gemini-pro"
        assert "Title: Structured Concurrency in Python" in kwargs['contents']
        assert "Tags: python, asyncio" in kwargs['contents']

    def test_api_error(self, content_service, mock_gemini_client, sample_idea):
        """Client failures become ContentGenerationError."""
        mock_gemini_client.return_value.models.generate_content.side_effect = Exception("API error")

        with pytest.raises(ContentGenerationError):
            content_service.generate_article(**sample_idea)

    def test_empty_response(self, content_service, mock_gemini_client, sample_idea):
        """An empty answer is treated as a failure."""
        mock_response = MagicMock()
        mock_response.text = None
        mock_gemini_client.return_value.models.generate_content.return_value = mock_response

        with pytest.raises(ContentGenerationError):
            content_service.generate_article(**sample_idea)

    def test_missing_api_key(self, sample_idea):
        """Without a key no client is built."""
        with pytest.raises(ContentGenerationError):
            GeminiContentService(google_api_key=None).generate_article(**sample_idea)

    def test_client_created_lazily(self):
        """The genai client is built on first use with the configured key."""
        with patch('ideapress.services.content_service.genai.Client') as MockClient:
            service = GeminiContentService(google_api_key="test_google_key")
            MockClient.assert_not_called()

            assert service.gemini_client is MockClient.return_value
            MockClient.assert_called_once_with(api_key="test_google_key")


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
