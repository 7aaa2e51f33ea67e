import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

from ideapress.utils.constants import (
    PINECONE_INDEX_NAME,
    SIMILARITY_THRESHOLD,
    GOOGLE_AI_MODEL,
    SUPPORTED_PLATFORMS,
)


class Config:
    def __init__(self):
        # Load appropriate .env file based on environment
        self.env = os.getenv("IDEAPRESS_ENV", "dev")
        self._load_env_file()

        # Project paths
        self.project_root = Path(__file__).parent.parent.parent
        self.ideas_file = self.project_root / os.getenv("IDEAS_FILE", "ideas.yaml")

        # Pinecone settings
        self.pinecone_api_key = os.getenv("PINECONE_API_KEY")
        self.pinecone_index_name = os.getenv("PINECONE_INDEX_NAME", PINECONE_INDEX_NAME)
        # The paginated list API only exists on serverless indexes
        self.pinecone_list_api = os.getenv("PINECONE_LIST_API", "true").lower() == "true"

        # Embedding settings
        self.embedding_backend = os.getenv("EMBEDDING_BACKEND", "openai").lower()
        self.embedding_cache_enabled = os.getenv("EMBEDDING_CACHE", "true").lower() == "true"
        self.openai_api_key = os.getenv("OPENAI_API_KEY")

        # Uniqueness gate
        self.similarity_threshold = float(os.getenv("SIMILARITY_THRESHOLD", SIMILARITY_THRESHOLD))

        # Google AI settings
        self.google_ai_api_key = os.getenv("GOOGLE_AI_API_KEY")
        self.google_ai_model = os.getenv("GOOGLE_AI_MODEL", GOOGLE_AI_MODEL)

        # Publishing settings
        self.devto_api_key = os.getenv("DEV_TO_API_KEY")
        self.hashnode_api_key = os.getenv("HASHNODE_API_KEY")
        self.hashnode_publication_id = os.getenv("HASHNODE_PUBLICATION_ID")
        self.publish_platforms = self._parse_platforms(
            os.getenv("PUBLISH_PLATFORMS", ",".join(SUPPORTED_PLATFORMS))
        )

        # Logging settings
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def _load_env_file(self):
        """Load .env.<IDEAPRESS_ENV> outside dev when present, else .env."""
        candidates = [".env"]
        if self.env != "dev":
            candidates.insert(0, f".env.{self.env}")

        for env_file in candidates:
            if Path(env_file).exists():
                load_dotenv(env_file)
                self.env_file = env_file
                return
        self.env_file = None

    @staticmethod
    def _parse_platforms(value: str):
        platforms = [p.strip().lower() for p in value.split(",") if p.strip()]
        unknown = [p for p in platforms if p not in SUPPORTED_PLATFORMS]
        if unknown:
            raise ValueError(f"Unsupported publish platform(s): {', '.join(unknown)}")
        return platforms

    def load_ideas(self, path=None):
        """Load idea definitions for bulk import from a YAML file."""
        ideas_file = Path(path) if path else self.ideas_file
        if not ideas_file.exists():
            return []

        with open(ideas_file, 'r') as file:
            ideas_config = yaml.safe_load(file) or {}
            return [
                {
                    'title': idea['title'],
                    'description': idea['description'],
                    'tags': list(idea.get('tags', [])),
                }
                for idea in ideas_config.get('ideas', [])
                if idea.get('enabled', True)
            ]

# Create a global config instance
config = Config()
