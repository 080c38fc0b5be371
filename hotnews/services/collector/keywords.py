"""Keyword and pattern registry.

Static vocabularies shared by the classifier and the scorer. Order matters:
tags and entities are reported in the order declared here.
"""

# Terms that make a story AI-relevant (whole-word, case-insensitive)
AI_KEYWORDS: tuple[str, ...] = (
    # General AI terms
    "ai",
    "artificial intelligence",
    "machine learning",
    "ml",
    "deep learning",
    "neural",
    # LLMs
    "llm",
    "large language model",
    "language model",
    "gpt",
    "gpt-4",
    "gpt-5",
    "chatgpt",
    "claude",
    "anthropic",
    "gemini",
    "mistral",
    "mixtral",
    "llama",
    "phi",
    "qwen",
    "deepseek",
    # Companies/research labs
    "openai",
    "deepmind",
    "hugging face",
    "huggingface",
    # Techniques
    "transformer",
    "attention mechanism",
    "fine-tuning",
    "finetuning",
    "rlhf",
    "reinforcement learning",
    "prompt engineering",
    "prompting",
    "rag",
    "retrieval augmented",
    "embedding",
    "embeddings",
    "vector",
    "diffusion model",
    # Image/video generation
    "stable diffusion",
    "midjourney",
    "dall-e",
    "dalle",
    "sora",
    "runway",
    "pika",
    "text-to-image",
    "text-to-video",
    "image generation",
    # AI coding
    "copilot",
    "cursor",
    "code generation",
    "ai coding",
    "codeium",
    "tabnine",
    "replit",
    # Agents
    "ai agent",
    "autonomous agent",
    "agentic",
    "autogen",
    "crewai",
    "langchain",
    "llamaindex",
    # Infrastructure
    "pytorch",
    "tensorflow",
    "jax",
    "vllm",
    "ollama",
    "mlx",
    # Safety & alignment
    "ai safety",
    "alignment",
    "interpretability",
    "agi",
    "artificial general intelligence",
    # NLP / vision
    "nlp",
    "computer vision",
    "generative",
)

# Organizations boosted by the importance scorer (substring match)
MAJOR_ENTITIES: tuple[str, ...] = (
    "openai",
    "anthropic",
    "google",
    "deepmind",
    "meta",
    "microsoft",
    "nvidia",
    "amazon",
    "apple",
    "mistral",
    "huggingface",
    "stability",
    "cohere",
    "xai",
)

# Tag label -> trigger keywords (whole-word). Dict order is tag order.
TAG_PATTERNS: dict[str, tuple[str, ...]] = {
    "LLM": ("llm", "gpt", "claude", "gemini", "mistral", "llama", "chatgpt"),
    "Machine Learning": ("machine learning", "ml", "deep learning", "neural"),
    "OpenAI": ("openai", "gpt", "chatgpt", "sora"),
    "Anthropic": ("anthropic", "claude"),
    "Google": ("google", "gemini", "deepmind"),
    "Computer Vision": (
        "computer vision",
        "diffusion",
        "stable diffusion",
        "midjourney",
        "image",
    ),
    "NLP": ("nlp", "language model", "transformer"),
    "Research": ("paper", "research", "study"),
}

# Tag used when no category matches
FALLBACK_TAG = "AI"

__all__ = [
    "AI_KEYWORDS",
    "FALLBACK_TAG",
    "MAJOR_ENTITIES",
    "TAG_PATTERNS",
]
