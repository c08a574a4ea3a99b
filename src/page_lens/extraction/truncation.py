"""Graceful truncation at sentence or word boundaries."""

SENTENCE_BREAKS = (". ", ".\n", "! ", "!\n", "? ", "?\n")
ELLIPSIS = "..."

# A sentence break must fall within the last 30% of the budget
SENTENCE_WINDOW = 0.7
# A word break must fall past 80% of the budget
WORD_WINDOW = 0.8


def truncate_gracefully(text: str, max_length: int) -> str:
    """
    Cut text to at most max_length characters.
    
    Prefers the last sentence break in the final 30% of the budget, then
    the last word break past 80%, then a hard cut. Non-sentence cuts end
    with an ellipsis, which counts toward max_length.
    
    Args:
        text: Text to cut
        max_length: Character budget
        
    Returns:
        text unchanged when it fits, otherwise the cut text
    """
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    
    head = text[:max_length]
    best = -1
    for breaker in SENTENCE_BREAKS:
        position = head.rfind(breaker)
        if position > max_length * SENTENCE_WINDOW:
            best = max(best, position + len(breaker))
    if best > 0:
        return head[:best].strip()
    
    room = max_length - len(ELLIPSIS)
    if room <= 0:
        return head.strip()
    
    head = head[:room]
    space = head.rfind(" ")
    if space > max_length * WORD_WINDOW:
        return head[:space].strip() + ELLIPSIS
    return head.strip() + ELLIPSIS
