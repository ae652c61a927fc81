#!/usr/bin/env python3
"""
Similarity Calculator - Cosine similarity between vectors.
"""
import math
from typing import Sequence


class SimilarityCalculator:
    """Calculate cosine similarity between vectors."""

    @staticmethod
    def calculate(vec1: Sequence[float], vec2: Sequence[float]) -> float:
        """
        Calculate raw cosine similarity between two vectors.

        Args:
            vec1: First vector
            vec2: Second vector

        Returns:
            Cosine similarity (-1.0 to 1.0), or 0.0 if either vector is zero
            or the dimensions differ
        """
        if len(vec1) != len(vec2):
            return 0.0

        dot_product = sum(a * b for a, b in zip(vec1, vec2))
        norm1 = math.sqrt(sum(a * a for a in vec1))
        norm2 = math.sqrt(sum(b * b for b in vec2))

        if norm1 == 0 or norm2 == 0:
            return 0.0

        # Float error can push |cos| a hair past 1
        return max(-1.0, min(1.0, dot_product / (norm1 * norm2)))
