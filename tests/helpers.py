"""Answer builders for frozen question snapshots."""


def correct_answers(snapshot, how_many=None):
    """Answers map picking the right option for the first ``how_many`` questions."""
    answers = {}
    for q in snapshot[:how_many]:
        answers[str(q['id'])] = next(o['id'] for o in q['options'] if o['is_correct'])
    return answers


def wrong_answers(snapshot):
    return {
        str(q['id']): next(o['id'] for o in q['options'] if not o['is_correct'])
        for q in snapshot
    }
