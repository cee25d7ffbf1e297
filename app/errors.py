"""Errors raised when editing or scoring an evaluation."""


class EvaluationError(Exception):
    """Base class for evaluation errors."""


class NotFoundError(EvaluationError, KeyError):
    """A category, criterion, vendor or evaluation id does not exist."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found: {item_id}")

    def __str__(self) -> str:
        return self.args[0]


class InvalidWeightError(EvaluationError, ValueError):
    """A category or criterion weight lies outside [0, 1]."""

    def __init__(self, weight: float, owner: str):
        self.weight = weight
        self.owner = owner
        super().__init__(f"Weight {weight} for {owner} must be between 0 and 1")


class ScoreOutOfRangeError(EvaluationError, ValueError):
    """A raw score lies outside [0, max_score]."""

    def __init__(self, criterion_id: str, value: float, max_score: float):
        self.criterion_id = criterion_id
        self.value = value
        self.max_score = max_score
        super().__init__(
            f"Score {value} for criterion {criterion_id} must be between 0 and {max_score}"
        )


class InvalidCriterionError(EvaluationError, ValueError):
    """A category, criterion or vendor cannot be added to the evaluation."""


class AwardNotAllowedError(EvaluationError):
    """The vendor does not meet the minimum qualifying score."""

    def __init__(self, vendor_id: str, score, threshold: float):
        self.vendor_id = vendor_id
        self.score = score
        self.threshold = threshold
        shown = "no score" if score is None else f"{score:.1f}%"
        super().__init__(
            f"Vendor {vendor_id} must have a score of at least {threshold:g}% "
            f"to be awarded the contract (has {shown})"
        )
