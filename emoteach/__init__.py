"""EmoTeach - emotion-driven adaptation engine for interactive lessons."""

__version__ = "0.1.0"
