"""
Vote tally.

The winner is the option with the most distinct voters. Ties go to the
higher-rated option, then to the option proposed first.
"""

from typing import Dict, List, Optional


def vote_counts(votes: Dict[str, List[str]]) -> Dict[str, int]:
    return {option_id: len(set(voters)) for option_id, voters in votes.items()}


def tally_votes(
    restaurant_options: List[dict],
    votes: Dict[str, List[str]]
) -> Optional[dict]:
    """
    Pick the winning restaurant option.

    Args:
        restaurant_options: Options in proposal order
        votes: Mapping of option id to voter ids

    Returns:
        The winning option dict, or None when there are no options
    """
    if not restaurant_options:
        return None

    counts = vote_counts(votes or {})
    ranked = sorted(
        enumerate(restaurant_options),
        key=lambda item: (
            -counts.get(item[1]['id'], 0),
            -(item[1].get('rating') or 0),
            item[0],
        ),
    )
    return ranked[0][1]
