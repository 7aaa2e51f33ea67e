"""
Gemini content service for IdeaPress.
Turns an idea into a Markdown blog post using Google's Gemini models.
"""

from typing import Optional, Sequence
from google import genai

from ideapress.exceptions import ContentGenerationError
from ideapress.utils.logger import logger
from ideapress.utils.constants import GOOGLE_AI_MODEL

ARTICLE_PROMPT = """You are an expert technical writer who creates engaging, informative blog posts on software development topics.

Write a technical blog post about the following topic:

Title: {title}

Description: {description}

Tags: {tags}

Please write a comprehensive, engaging blog post in Markdown format. Include:
1. An introduction that hooks the reader
2. Main sections with detailed explanations
3. Code examples where relevant
4. Best practices and tips
5. A conclusion

Make it informative, well-structured, and suitable for a technical audience."""


class GeminiContentService:
    """Gemini-backed article generator."""

    def __init__(self, google_api_key: Optional[str], model: str = GOOGLE_AI_MODEL, client=None):
        """
        Initialize the Gemini content service.

        Args:
            google_api_key: Google AI API key
            model: Gemini model to use
            client: Pre-built genai client; created on first use when omitted
        """
        self.google_api_key = google_api_key
        self.model = model
        self._client = client

    @property
    def gemini_client(self):
        if self._client is None:
            if not self.google_api_key:
                raise ContentGenerationError("GOOGLE_AI_API_KEY not configured", step="generate")
            self._client = genai.Client(api_key=self.google_api_key)
        return self._client

    @staticmethod
    def build_prompt(title: str, description: str, tags: Sequence[str]) -> str:
        return ARTICLE_PROMPT.format(title=title, description=description, tags=", ".join(tags))

    def generate_article(self, title: str, description: str, tags: Sequence[str]) -> str:
        """
        Generate a Markdown article for an idea.

        Args:
            title: Idea title
            description: Idea description
            tags: Idea tags

        Returns:
            The article body in Markdown

        Raises:
            ContentGenerationError: If Gemini fails or returns no text
        """
        logger.info(f"Generating article with Gemini: {title}")
        client = self.gemini_client
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=self.build_prompt(title, description, tags),
            )
        except Exception as e:
            logger.error(f"Error generating content with Gemini: {e}")
            raise ContentGenerationError(str(e), step="generate") from e

        text = (response.text or "").strip()
        if not text:
            logger.error("Gemini returned an empty response")
            raise ContentGenerationError("Gemini returned an empty response", step="generate")
        logger.info(f"Generated article of {len(text)} characters")
        return text
