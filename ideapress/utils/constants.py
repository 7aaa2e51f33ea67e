"""Constants used throughout the application."""

# Embedding related constants
EMBEDDING_DIMENSION = 384
EMBEDDING_METRIC = "cosine"
LOCAL_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
OPENAI_EMBEDDING_MODEL = "text-embedding-3-small"

# Uniqueness gate
SIMILARITY_THRESHOLD = 0.85
GATE_TOP_K = 5
MAX_REPORTED_CONFLICTS = 3

# Selection
RECENT_HISTORY_SIZE = 5

# Pinecone related constants
PINECONE_INDEX_NAME = "blog-ideas"
PINECONE_MAX_TOP_K = 10000

# Pinecone AWS configuration
AWS_REGION = "us-east-1"
AWS_CLOUD = "aws"

# Content generation
GOOGLE_AI_MODEL = "gemini-flash-latest"

# Publishing
DEVTO_API_URL = "https://dev.to/api/articles"
HASHNODE_API_URL = "https://gql.hashnode.com"
SUPPORTED_PLATFORMS = ("devto", "hashnode")
REQUEST_TIMEOUT = 30
