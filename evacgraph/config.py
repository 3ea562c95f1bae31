"""
Evacgraph Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Application configuration loaded from environment variables."""

    # Passability thresholds used when a node is created without explicit ones.
    # Each node keeps its own copy; changing these never touches existing nodes.
    DEFAULT_TEMPERATURE_THRESHOLD: float = float(os.getenv("EVACGRAPH_TEMPERATURE_THRESHOLD", "60.0"))
    DEFAULT_GAS_CONCENTRATION_THRESHOLD: float = float(os.getenv("EVACGRAPH_GAS_THRESHOLD", "0.5"))

    # Multi-exit ranking
    ROUTES_PER_EXIT: int = int(os.getenv("EVACGRAPH_ROUTES_PER_EXIT", "3"))
    MAX_ROUTES: int = int(os.getenv("EVACGRAPH_MAX_ROUTES", "3"))

    # Logging
    VERBOSE: bool = _env_flag("EVACGRAPH_VERBOSE")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors if values are unusable."""
        if cls.ROUTES_PER_EXIT < 1:
            raise ValueError(
                "EVACGRAPH_ROUTES_PER_EXIT must be at least 1 "
                f"(got {cls.ROUTES_PER_EXIT})"
            )

        if cls.MAX_ROUTES < 1:
            raise ValueError(
                f"EVACGRAPH_MAX_ROUTES must be at least 1 (got {cls.MAX_ROUTES})"
            )

        if cls.DEFAULT_TEMPERATURE_THRESHOLD < 0 or cls.DEFAULT_GAS_CONCENTRATION_THRESHOLD < 0:
            raise ValueError(
                "Default passability thresholds must be non-negative. "
                "Check EVACGRAPH_TEMPERATURE_THRESHOLD and EVACGRAPH_GAS_THRESHOLD."
            )

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Evacgraph Configuration:",
            f"  Temperature Threshold: {cls.DEFAULT_TEMPERATURE_THRESHOLD}",
            f"  Gas Threshold: {cls.DEFAULT_GAS_CONCENTRATION_THRESHOLD}",
            f"  Routes Per Exit: {cls.ROUTES_PER_EXIT}",
            f"  Max Routes: {cls.MAX_ROUTES}",
            f"  Verbose: {cls.VERBOSE}",
        ]
        return "\n".join(lines)
