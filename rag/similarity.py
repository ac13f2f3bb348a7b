"""
similarity.py - 코사인 유사도
===============================
두 임베딩 벡터가 얼마나 같은 방향을 가리키는지 계산합니다.

    cos(a, b) = dot(a, b) / (|a| * |b|)

결과는 -1 ~ 1 사이이고, 1에 가까울수록 의미가 비슷합니다.

노름이 0인 벡터(모든 값이 0)는 방향이 없어서 수학적으로 정의되지 않습니다.
이 경우 0.0을 돌려줍니다 (strict=True면 DegenerateVectorError).
입력에 NaN이 섞여 있으면 결과도 NaN이 되고, 검색 단계에서 항상 탈락합니다.
"""

import math
from typing import Sequence

from rag.errors import DegenerateVectorError, DimensionMismatchError


def cosine_similarity(
    a: Sequence[float],
    b: Sequence[float],
    strict: bool = False,
) -> float:
    """
    두 벡터의 코사인 유사도를 계산합니다.

    Args:
        a, b: 같은 길이의 벡터
        strict: True면 노름 0 벡터에 대해 예외를 발생시킴

    Returns:
        -1.0 ~ 1.0 사이의 유사도 (노름 0이면 0.0)

    Raises:
        DimensionMismatchError: 길이가 다르거나 비어 있을 때
        DegenerateVectorError: strict=True이고 노름이 0일 때
    """
    if not a or not b:
        raise DimensionMismatchError("vectors cannot be empty")
    if len(a) != len(b):
        raise DimensionMismatchError(
            f"vector dimensions must match: {len(a)} != {len(b)}"
        )

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        if strict:
            raise DegenerateVectorError("cannot score a zero-norm vector")
        return 0.0

    score = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))
    if math.isnan(score):
        return score
    # 부동소수점 오차로 1을 살짝 넘는 경우
    return max(-1.0, min(1.0, score))
